"""Deadline lock decision.

Both instants are viewed in one fixed civil timezone (the pool's home
region) and compared at minute granularity, so every caller reaches the same
answer wherever it runs. The lock fires at the start of the scheduled minute.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Optional, Tuple

import pytz

from propsheet.pool.config.pool_params import get_pool_params

MinuteKey = Tuple[int, int, int, int, int]


def pool_timezone() -> pytz.BaseTzInfo:
    return get_pool_params().lock.tzinfo()


def minute_key(instant: datetime, tz: Optional[pytz.BaseTzInfo] = None) -> MinuteKey:
    """(year, month, day, hour, minute) of ``instant`` in ``tz``.

    Naive datetimes are taken as UTC.
    """
    tz = tz or pool_timezone()
    if instant.tzinfo is None:
        instant = instant.replace(tzinfo=timezone.utc)
    local = instant.astimezone(tz)
    return (local.year, local.month, local.day, local.hour, local.minute)


def should_lock(now: Any, scheduled: Any, tz: Optional[pytz.BaseTzInfo] = None) -> bool:
    """True once ``now`` has reached the scheduled minute.

    A missing or malformed instant on either side never locks.
    """
    if not isinstance(now, datetime) or not isinstance(scheduled, datetime):
        return False
    try:
        return minute_key(now, tz) >= minute_key(scheduled, tz)
    except (OverflowError, ValueError):
        return False


__all__ = ["MinuteKey", "pool_timezone", "minute_key", "should_lock"]
