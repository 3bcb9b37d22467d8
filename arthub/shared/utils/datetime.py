"""
UTC datetime utilities.

All datetime values in the system are timezone-aware UTC. Use these
helpers instead of datetime.now() or datetime.utcnow().
"""

from datetime import UTC, datetime, timedelta


def utc_now() -> datetime:
    """Return the current UTC datetime with timezone info."""
    return datetime.now(UTC)


def ensure_utc(dt: datetime | None) -> datetime | None:
    """
    Ensure a datetime is UTC-aware.

    - If None, returns None
    - If naive, assumes UTC and attaches timezone
    - If aware, converts to UTC

    Use at repository boundaries and when parsing query parameters.
    """
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def older_than(dt: datetime | None, seconds: float) -> bool:
    """Return whether dt is at least `seconds` in the past (None counts as old)."""
    if dt is None:
        return True
    return ensure_utc(dt) <= utc_now() - timedelta(seconds=seconds)
