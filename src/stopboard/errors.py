"""Error taxonomy for the board renderer and its collaborators."""

from __future__ import annotations


class RenderError(Exception):
    """Base class for failures that abort a render call."""


class AllocationError(RenderError):
    """The canvas bitmap could not be created."""


class TypefaceError(RenderError):
    """A required font could not be constructed."""


class DrawError(RenderError):
    """A text blob or shape could not be constructed or drawn."""


class EncodingError(RenderError):
    """The finished bitmap could not be serialized as PNG."""


class ConfigError(ValueError):
    """The layout configuration is structurally invalid."""


class StopDataError(ValueError):
    """A stop-data document does not have the expected shape."""


def error_chain(error: BaseException) -> list[str]:
    """Return the messages of an exception's cause chain, outermost first.

    Follows ``__cause__`` (``raise ... from ...``) and falls back to
    ``__context__`` for implicit chaining, unless the context was
    suppressed with ``from None``. Exceptions with an empty message are
    represented by their class name so every link stays visible.
    """
    messages: list[str] = []
    seen: set[int] = set()
    current: BaseException | None = error
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        messages.append(str(current) or type(current).__name__)
        if current.__cause__ is not None:
            current = current.__cause__
        elif not current.__suppress_context__:
            current = current.__context__
        else:
            current = None
    return messages
