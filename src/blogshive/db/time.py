# src/blogshive/db/time.py
"""Time utilities for database models."""

from datetime import UTC, datetime


def utcnow() -> datetime:
    """Return the current UTC time as a timezone-aware datetime."""
    return datetime.now(UTC)


def as_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes read back from SQLite."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def isoformat_utc(value: datetime) -> str:
    """Render ``value`` as ISO-8601 UTC with a ``Z`` suffix.

    The ``Z`` form contains no ``+``, so it survives being pasted unencoded
    into a query string.
    """
    return as_utc(value).isoformat().replace("+00:00", "Z")
