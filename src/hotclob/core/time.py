import time
from datetime import datetime, timedelta, timezone
from typing import Optional

UNIX_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def unix_now() -> int:
    """当前 unix 秒"""
    return int(time.time())


def as_utc(dt: Optional[datetime]) -> datetime:
    """
    Normalize a datetime to UTC.

    None -> UNIX_EPOCH; naive datetimes are treated as UTC.
    """
    if dt is None:
        return UNIX_EPOCH
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def to_unix_seconds(dt: datetime) -> Optional[int]:
    """Whole unix seconds for `dt`, or None if it is before the epoch or does not fit in a u64."""
    seconds = (as_utc(dt) - UNIX_EPOCH) // timedelta(seconds=1)
    if seconds < 0 or seconds > 2**64 - 1:
        return None
    return seconds
