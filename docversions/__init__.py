"""Document versions HTTP service."""

__version__ = "1.0.0"
