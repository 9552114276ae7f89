import time
from datetime import datetime, timezone
from typing import Optional


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    # SQLITE RETURNS DateTime COLUMNS NAIVE, POSTGRES KEEPS tzinfo, NAIVE MEANS UTC
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def generate_request_id() -> int:
    # MICROSECONDS SINCE EPOCH, STILL BELOW 2**53 SO JAVASCRIPT CLIENTS KEEP IT EXACT
    return time.time_ns() // 1000
