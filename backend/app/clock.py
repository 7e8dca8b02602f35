"""Timestamps are timezone-aware UTC everywhere; these helpers keep that consistent."""

from datetime import UTC, datetime, timedelta, timezone


def utcnow() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(UTC)


def to_aware_utc(value: datetime | None) -> datetime | None:
    """Convert to aware UTC. Naive values are taken to be UTC already."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def format_display_date(value: datetime | None, utc_offset_hours: int) -> str:
    """Format a timestamp as YYYY.MM.DD in the display timezone."""
    value = to_aware_utc(value) or utcnow()
    local = value.astimezone(timezone(timedelta(hours=utc_offset_hours)))
    return local.strftime("%Y.%m.%d")
