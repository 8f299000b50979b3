"""Live update feed.

A subscription polls a fetch coroutine and hands the callback the entire
current collection whenever it changes. Snapshots replace, never patch: the
consumer recomputes from scratch on each delivery.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from typing import Any, Awaitable, Callable, Generic, Optional, TypeVar

from propsheet.pool.config.pool_params import get_pool_params
from propsheet.pool.scoring.determinism import compute_hash

T = TypeVar("T")

Fetch = Callable[[], Awaitable[T]]
Callback = Callable[[T], Any]

logger = logging.getLogger(__name__)


class Subscription(Generic[T]):
    """Handle for one live query. Cancel to stop delivery."""

    def __init__(
        self,
        fetch: Fetch[T],
        callback: Callback[T],
        *,
        interval: float,
        fingerprint: Callable[[T], str] = compute_hash,
        name: str = "subscription",
    ):
        self._fetch = fetch
        self._callback = callback
        self._interval = interval
        self._fingerprint = fingerprint
        self.name = name
        self._last_fingerprint: Optional[str] = None
        self._task: Optional[asyncio.Task] = None
        self._cancelled = False
        self.deliveries = 0

    @property
    def active(self) -> bool:
        return not self._cancelled and self._task is not None and not self._task.done()

    def start(self) -> "Subscription[T]":
        if self._task is None and not self._cancelled:
            self._task = asyncio.get_running_loop().create_task(self._run(), name=self.name)
        return self

    async def poll_once(self) -> bool:
        """Fetch once and deliver if the snapshot changed. Returns True on delivery."""
        if self._cancelled:
            return False
        snapshot = await self._fetch()
        fp = self._fingerprint(snapshot)
        if fp == self._last_fingerprint:
            return False
        self._last_fingerprint = fp
        result = self._callback(snapshot)
        if inspect.isawaitable(result):
            await result
        self.deliveries += 1
        return True

    async def _run(self) -> None:
        while not self._cancelled:
            try:
                await self.poll_once()
            except asyncio.CancelledError:
                raise
            except Exception as e:
                logger.warning({"feed_poll_error": {"subscription": self.name, "error": str(e)}})
            await asyncio.sleep(self._interval)

    def cancel(self) -> None:
        """Stop delivery. Safe to call more than once."""
        if self._cancelled:
            return
        self._cancelled = True
        if self._task is not None and not self._task.done():
            self._task.cancel()

    async def wait_closed(self) -> None:
        if self._task is None:
            return
        try:
            await self._task
        except asyncio.CancelledError:
            pass


class LiveFeed:
    """Factory for subscriptions sharing one poll interval."""

    def __init__(self, interval: float | None = None):
        self.interval = interval if interval is not None else get_pool_params().feed.poll_interval_seconds

    def subscribe(
        self,
        fetch: Fetch[T],
        callback: Callback[T],
        *,
        fingerprint: Callable[[T], str] = compute_hash,
        name: str = "subscription",
    ) -> Subscription[T]:
        """Start a subscription on the running loop; the first snapshot is always delivered."""
        sub: Subscription[T] = Subscription(
            fetch,
            callback,
            interval=self.interval,
            fingerprint=fingerprint,
            name=name,
        )
        return sub.start()


__all__ = ["Subscription", "LiveFeed"]
