import math
from datetime import datetime, time, timezone
from typing import Iterator, List, Sequence, TypeVar
from zoneinfo import ZoneInfo

from .config import settings

T = TypeVar('T')


def current_time() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def start_of_today(now: datetime = None) -> datetime:
    """Local midnight of the current day, as a naive UTC datetime."""
    tz = ZoneInfo(settings.TIMEZONE)
    now = now or current_time()
    local_now = now.replace(tzinfo=timezone.utc).astimezone(tz)
    local_midnight = datetime.combine(local_now.date(), time.min, tzinfo=tz)
    return local_midnight.astimezone(timezone.utc).replace(tzinfo=None)


def duration_hours(check_in: datetime, check_out: datetime) -> float:
    # Clock skew between writers must never produce negative time
    return max((check_out - check_in).total_seconds(), 0) / 3600


def round_hours(hours: float) -> float:
    """Round to one decimal, halves away from zero."""
    return math.floor(hours * 10 + 0.5) / 10


def format_duration(check_in: datetime, check_out: datetime) -> str:
    total_minutes = int(max((check_out - check_in).total_seconds(), 0) // 60)
    hours, minutes = divmod(total_minutes, 60)
    return f'{hours}h {minutes}m'


def chunked(items: Sequence[T], size: int) -> Iterator[List[T]]:
    if size < 1:
        raise ValueError(f'Invalid batch size: {size}')
    for i in range(0, len(items), size):
        yield list(items[i : i + size])
