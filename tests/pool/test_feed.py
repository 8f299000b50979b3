"""Tests for the live update feed."""

import asyncio
from unittest.mock import AsyncMock

import pytest

from propsheet.pool.feed import LiveFeed, Subscription


class TestPollOnce:
    @pytest.mark.asyncio
    async def test_first_snapshot_always_delivered(self):
        received = []
        sub = Subscription(AsyncMock(return_value=[]), received.append, interval=1)

        assert await sub.poll_once() is True
        assert received == [[]]

    @pytest.mark.asyncio
    async def test_unchanged_snapshot_not_redelivered(self):
        received = []
        sub = Subscription(AsyncMock(return_value=[{"id": 1}]), received.append, interval=1)

        await sub.poll_once()
        assert await sub.poll_once() is False
        assert sub.deliveries == 1

    @pytest.mark.asyncio
    async def test_whole_collection_replaces_previous(self):
        received = []
        fetch = AsyncMock(side_effect=[[{"id": 1}], [{"id": 1}, {"id": 2}]])
        sub = Subscription(fetch, received.append, interval=1)

        await sub.poll_once()
        await sub.poll_once()

        assert received[-1] == [{"id": 1}, {"id": 2}]

    @pytest.mark.asyncio
    async def test_async_callback_awaited(self):
        callback = AsyncMock()
        sub = Subscription(AsyncMock(return_value=[1]), callback, interval=1)

        await sub.poll_once()

        callback.assert_awaited_once_with([1])

    @pytest.mark.asyncio
    async def test_cancelled_subscription_stops_delivery(self):
        received = []
        sub = Subscription(AsyncMock(return_value=[1]), received.append, interval=1)

        sub.cancel()
        sub.cancel()

        assert await sub.poll_once() is False
        assert received == []


class TestRunningSubscription:
    @pytest.mark.asyncio
    async def test_errors_do_not_end_subscription(self):
        received = []
        fetch = AsyncMock(side_effect=[RuntimeError("flaky"), [1], [1], [1], [1], [1], [1], [1], [1], [1]])
        sub = LiveFeed(interval=0.005).subscribe(fetch, received.append)

        await asyncio.sleep(0.05)
        assert sub.active is True
        sub.cancel()
        await sub.wait_closed()

        assert received == [[1]]
        assert sub.active is False

    @pytest.mark.asyncio
    async def test_cancel_stops_task(self):
        fetch = AsyncMock(return_value=[])
        sub = LiveFeed(interval=0.005).subscribe(fetch, lambda snapshot: None)
        await asyncio.sleep(0.02)

        sub.cancel()
        await sub.wait_closed()
        calls = fetch.await_count
        await asyncio.sleep(0.02)

        assert fetch.await_count == calls
