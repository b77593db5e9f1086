"""Data models for transit stop data."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from datetime import datetime, timezone

from stopboard.errors import StopDataError


class RenderTarget(enum.Enum):
    """Physical display class the board is rendered for.

    KINDLE output is rotated a quarter turn clockwise before encoding so a
    landscape layout fills a portrait e-ink panel. OTHER is left as drawn.
    """

    KINDLE = "kindle"
    OTHER = "other"

    @classmethod
    def parse(cls, value: str | RenderTarget) -> RenderTarget:
        """Parse a case-insensitive target name ("kindle" or "other")."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(f"unknown render target: {value!r}") from None


@dataclass(frozen=True)
class Line:
    """A transit line within one direction of an agency.

    Attributes:
        line: Short line label drawn inside the grey oval (e.g. "N", "14R").
        destination: Headsign shown right after the line label.
    """

    line: str
    destination: str


@dataclass(frozen=True)
class Upcoming:
    """A single arrival estimate for a line."""

    minutes: int

    @classmethod
    def from_timestamp(cls, when: str | datetime, now: datetime | None = None) -> Upcoming:
        """Build an estimate from an ISO 8601 arrival time.

        Minutes are floored and clamped at 0, so an arrival that is already
        due shows as "0 min". Naive times are taken as UTC.
        """
        dt = when if isinstance(when, datetime) else datetime.fromisoformat(when)
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=timezone.utc)
        if now is None:
            now = datetime.now(timezone.utc)
        delta = dt - now
        return cls(minutes=max(0, int(delta.total_seconds() // 60)))


# agency -> direction -> ordered (line, arrivals) pairs. Order is display
# order and is never re-sorted by the renderer.
StopData = dict[str, dict[str, list[tuple[Line, list[Upcoming]]]]]


def parse_upcoming(raw: object, now: datetime | None = None) -> Upcoming:
    """Parse one arrival entry: minutes as an int or {"minutes": n}, or an ISO timestamp."""
    if isinstance(raw, bool):
        raise StopDataError(f"invalid arrival entry: {raw!r}")
    if isinstance(raw, int):
        return Upcoming(minutes=raw)
    if isinstance(raw, dict) and "minutes" in raw:
        try:
            return Upcoming(minutes=int(raw["minutes"]))
        except (TypeError, ValueError) as e:
            raise StopDataError(f"invalid arrival entry: {raw!r}") from e
    if isinstance(raw, (str, datetime)):
        try:
            return Upcoming.from_timestamp(raw, now)
        except ValueError as e:
            raise StopDataError(f"invalid arrival timestamp: {raw!r}") from e
    raise StopDataError(f"invalid arrival entry: {raw!r}")


def parse_stop_data(raw: object, now: datetime | None = None) -> StopData:
    """Parse a raw agency -> direction -> lines document into StopData.

    Each line entry is a mapping with ``line``, ``destination`` and
    ``upcoming`` keys. ``destination`` defaults to an empty string and
    ``upcoming`` to an empty list.
    """
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise StopDataError("stop data must be a mapping of agencies")

    stop_data: StopData = {}
    for agency, directions in raw.items():
        if not isinstance(directions, dict):
            raise StopDataError(f"agency {agency!r} must map directions to lines")
        parsed_directions: dict[str, list[tuple[Line, list[Upcoming]]]] = {}
        for direction, lines in directions.items():
            if not isinstance(lines, list):
                raise StopDataError(
                    f"direction {direction!r} of agency {agency!r} must be a list"
                )
            entries: list[tuple[Line, list[Upcoming]]] = []
            for entry in lines:
                if not isinstance(entry, dict) or "line" not in entry:
                    raise StopDataError(
                        f"line entry in {agency!r}/{direction!r} needs a 'line' key"
                    )
                line = Line(
                    line=str(entry["line"]),
                    destination=str(entry.get("destination", "")),
                )
                raw_upcoming = entry.get("upcoming", [])
                if not isinstance(raw_upcoming, list):
                    raise StopDataError(
                        f"upcoming of line {entry['line']!r} in {agency!r}/{direction!r}"
                        " must be a list"
                    )
                upcoming = [parse_upcoming(u, now) for u in raw_upcoming]
                entries.append((line, upcoming))
            parsed_directions[str(direction)] = entries
        stop_data[str(agency)] = parsed_directions
    return stop_data
