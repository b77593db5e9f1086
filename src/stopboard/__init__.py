"""Transit departure board renderer for e-ink displays."""

__version__ = "0.1.0"
