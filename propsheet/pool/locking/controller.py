"""Deadline lock controller.

Moves an event from open to locked once its start minute arrives. Safe to
call redundantly and concurrently (every page view, every watcher tick): the
only write is ``locked = true``, so racing writers converge on the same value.
The controller never unlocks.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Optional

import pytz

from propsheet.shared.logging import log_pool_event

from ..models import Event
from ..scoring.determinism import to_utc
from .decision import pool_timezone, should_lock

Clock = Callable[[], datetime]
LockWriter = Callable[[str], Awaitable[Any]]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class LockResult:
    """Outcome of one lock check."""

    acted: bool
    error: Optional[str] = None


class LockController:
    """Apply the lock decision to one event at a time.

    Args:
        write_locked: Coroutine persisting ``locked = true`` for an event id
        clock: Source of the current instant
        tz: Fixed pool timezone (defaults to the configured one)
        logger: Logger instance
    """

    def __init__(
        self,
        write_locked: LockWriter,
        *,
        clock: Clock = utc_now,
        tz: Optional[pytz.BaseTzInfo] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self._write_locked = write_locked
        self._clock = clock
        self._tz = tz or pool_timezone()
        self.logger = logger or logging.getLogger(__name__)

    async def maybe_lock(
        self,
        event_id: str,
        scheduled: Optional[datetime],
        currently_locked: bool,
    ) -> LockResult:
        if currently_locked:
            return LockResult(acted=False)

        now = self._clock()
        if not should_lock(now, scheduled, self._tz):
            return LockResult(acted=False)

        try:
            await self._write_locked(event_id)
        except Exception as e:
            # Retried on the next check; submission intake re-verifies lock state
            self.logger.warning({"event_lock_failed": {"event_id": event_id, "error": str(e)}})
            return LockResult(acted=False, error=str(e))

        local_now = to_utc(now).astimezone(self._tz)
        message = {"event_locked": {"event_id": event_id, "at": local_now.isoformat()}}
        self.logger.info(message)
        log_pool_event(message)
        return LockResult(acted=True)

    async def maybe_lock_event(self, event: Event) -> LockResult:
        return await self.maybe_lock(event.event_id, event.event_date, event.is_locked)


__all__ = ["Clock", "LockWriter", "LockResult", "LockController", "utc_now"]
