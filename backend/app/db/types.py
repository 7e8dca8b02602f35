"""Column types shared by the table models."""

from datetime import UTC, datetime

from sqlalchemy import DateTime
from sqlalchemy.types import TypeDecorator

from app.clock import to_aware_utc


class UTCTimestamp(TypeDecorator):
    """
    TIMESTAMP WITH TIME ZONE that always hands back aware UTC datetimes.

    Naive values are bound as UTC. SQLite has no timezone support, so there
    the value is stored as naive UTC and tagged again when loaded.
    """

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect):
        value = to_aware_utc(value)
        if value is not None and dialect.name == "sqlite":
            return value.replace(tzinfo=None)
        return value

    def process_result_value(self, value: datetime | None, dialect):
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value.astimezone(UTC)
