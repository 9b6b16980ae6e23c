"""Datetime helpers."""
from datetime import datetime, timezone
from typing import Optional, Union


def as_utc(value: datetime) -> datetime:
    """SQLite hands back naive timestamps; treat them as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def parse_timestamp(value: Optional[Union[str, datetime]]) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp as stored in JSON documents."""
    if value is None or isinstance(value, datetime):
        return as_utc(value) if value is not None else None
    return as_utc(datetime.fromisoformat(value.replace("Z", "+00:00")))
