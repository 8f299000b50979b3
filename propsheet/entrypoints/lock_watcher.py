"""Lock watcher process.

Sweeps active events on a fixed cadence and locks those whose start minute
has arrived. Page views also lock on demand; this process covers events
nobody is looking at.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import signal
from typing import List, Optional

from dotenv import load_dotenv

from propsheet.config import last_yaml_path, load_settings, sanitize_dict
from propsheet.config.db_url import ensure_env_database_url
from propsheet.pool.config.pool_params import get_pool_params
from propsheet.pool.database.dbm import DBM
from propsheet.pool.database.store import DocumentStore
from propsheet.pool.handlers.lock_check import run_lock_checks_if_due
from propsheet.pool.locking.controller import LockController
from propsheet.shared.logging import configure_logging, setup_pool_events_logger

logger = logging.getLogger("propsheet.lock_watcher")


class LockWatcher:
    def __init__(self, store: DocumentStore, *, interval: float):
        self.store = store
        self.interval = interval
        self.controller = LockController(store.set_event_locked, logger=logger)
        self.step = 0
        self._stop = asyncio.Event()

    def stop(self) -> None:
        self._stop.set()

    async def tick(self) -> List[str]:
        locked = await run_lock_checks_if_due(step=self.step, store=self.store, controller=self.controller)
        self.step += 1
        return locked

    async def run(self, *, once: bool = False) -> None:
        logger.info({"lock_watcher": "started", "interval": self.interval})
        while not self._stop.is_set():
            await self.tick()
            if once:
                break
            try:
                await asyncio.wait_for(self._stop.wait(), timeout=self.interval)
            except asyncio.TimeoutError:
                pass
        logger.info({"lock_watcher": "stopped", "steps": self.step})


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Propsheet event lock watcher")
    parser.add_argument("--config", type=str, default=None, help="YAML settings file")
    parser.add_argument(
        "--interval",
        type=float,
        default=None,
        help="Seconds between sweeps (default from pool params)",
    )
    parser.add_argument("--once", action="store_true", help="Run a single sweep and exit")
    parser.add_argument("--create-tables", action="store_true", help="Create missing tables before starting")
    return parser


async def _amain(args: argparse.Namespace) -> None:
    settings = load_settings(args.config)
    configure_logging(settings.logging.level, settings.logging.json_logs)
    logger.info({"settings": sanitize_dict(settings.model_dump()), "config_file": last_yaml_path()})

    data_dir = os.environ.get("PROPSHEET_LOG_DIR")
    if data_dir:
        os.makedirs(data_dir, exist_ok=True)
        setup_pool_events_logger(data_dir, settings.logging.events_retention_bytes)

    dbm = DBM.from_settings(settings)
    if args.create_tables:
        await dbm.create_all()

    interval = args.interval if args.interval is not None else get_pool_params().lock.check_interval_seconds
    watcher = LockWatcher(DocumentStore(dbm), interval=interval)

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, watcher.stop)
        except NotImplementedError:
            pass

    try:
        await watcher.run(once=args.once)
    finally:
        await dbm.dispose()


def main(argv: Optional[List[str]] = None) -> None:
    # Load .env if not in test mode
    if os.environ.get("PROPSHEET_TEST_MODE") != "true":
        load_dotenv()
    ensure_env_database_url()

    args = build_parser().parse_args(argv)
    try:
        asyncio.run(_amain(args))
    except KeyboardInterrupt:
        logger.info({"lock_watcher": "keyboard_interrupt"})


if __name__ == "__main__":
    main()
