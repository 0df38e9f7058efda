from __future__ import annotations

from datetime import datetime, timezone

from ..core.constants import DATE_KEY_FORMAT


def now_utc() -> datetime:
    """Current instant (timezone-aware, UTC).

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now(timezone.utc)


def as_utc(instant: datetime) -> datetime:
    """Naive instants are taken to be UTC; aware ones are converted to UTC."""
    if instant.tzinfo is None:
        return instant.replace(tzinfo=timezone.utc)
    return instant.astimezone(timezone.utc)


def date_key(instant: datetime) -> str:
    """Calendar-day key for an instant.

    Aware datetimes are bucketed on their UTC date; naive ones on their own date.
    """
    if instant.tzinfo is not None:
        instant = instant.astimezone(timezone.utc)
    return instant.strftime(DATE_KEY_FORMAT)


def whole_minutes_between(start: datetime, end: datetime) -> int:
    """Floor of (end - start) in minutes. Negative when end precedes start."""
    return int((end - start).total_seconds() // 60)


def format_duration(minutes: int) -> str:
    hours, mins = divmod(int(minutes), 60)
    return f"{hours}h {mins}m"
