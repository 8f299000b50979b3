"""Deadline locking for pool events."""

from __future__ import annotations

from .controller import LockController, LockResult
from .decision import minute_key, should_lock

__all__ = ["LockController", "LockResult", "minute_key", "should_lock"]
