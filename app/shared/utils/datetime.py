"""UTC datetime helpers.

Every timestamp stored or compared by the service is timezone-aware UTC.
"""

from datetime import UTC, datetime


def utc_now() -> datetime:
    """Return the current UTC datetime (timezone-aware)."""
    return datetime.now(UTC)


def ensure_utc(dt: datetime | None) -> datetime | None:
    """Normalize a datetime to aware UTC.

    Naive values are assumed to already be UTC (drivers such as asyncpg
    hand back aware values, but request bodies may not carry an offset).
    """
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)
