from __future__ import annotations

import logging
from typing import Any, List

from propsheet.pool.config.pool_params import get_pool_params
from propsheet.pool.locking.controller import LockController

logger = logging.getLogger(__name__)


async def run_lock_checks(*, store: Any, controller: LockController) -> List[str]:
    """
    Check every active, unlocked event once.
    Returns ids of events locked by this sweep.
    """
    try:
        events = await store.list_lockable_events()
    except Exception as exc:
        logger.warning({"lock_sweep_error": {"stage": "list_events", "error": str(exc)}})
        return []

    locked: List[str] = []
    for event in events:
        result = await controller.maybe_lock_event(event)
        if result.acted:
            locked.append(event.event_id)

    if locked:
        logger.info({"lock_sweep_locked": locked})
    return locked


async def run_lock_checks_if_due(*, step: int, store: Any, controller: LockController) -> List[str]:
    """Step-based scheduler for the lock sweep."""
    steps_interval = get_pool_params().lock.check_steps
    if steps_interval <= 0 or (step % steps_interval != 0):
        return []
    return await run_lock_checks(store=store, controller=controller)


__all__ = ["run_lock_checks", "run_lock_checks_if_due"]
