import logging
import os
from logging.handlers import RotatingFileHandler

from pythonjsonlogger import jsonlogger

POOL_LEVEL_NUM = 38
DEFAULT_LOG_BACKUP_COUNT = 10
POOL_EVENTS_FILENAME = "pool_events.log"


def configure_logging(level: str = "INFO", json_logs: bool = False) -> None:
    root = logging.getLogger()
    root.setLevel(level.upper())
    handler = logging.StreamHandler()
    if json_logs:
        handler.setFormatter(jsonlogger.JsonFormatter("%(asctime)s %(levelname)s %(name)s %(message)s"))
    else:
        handler.setFormatter(
            logging.Formatter(
                "%(asctime)s | %(levelname)s | %(name)s | %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
    root.handlers = [handler]


def setup_pool_events_logger(full_path, events_retention_size):
    """File logger for lock transitions and grading writes."""
    logging.addLevelName(POOL_LEVEL_NUM, "POOL")

    logger = logging.getLogger("pool")
    logger.setLevel(POOL_LEVEL_NUM)

    def pool(self, message, *args, **kws):
        if self.isEnabledFor(POOL_LEVEL_NUM):
            self._log(POOL_LEVEL_NUM, message, args, **kws)

    logging.Logger.pool = pool

    formatter = logging.Formatter(
        "%(asctime)s | %(levelname)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    file_handler = RotatingFileHandler(
        os.path.join(full_path, POOL_EVENTS_FILENAME),
        maxBytes=events_retention_size,
        backupCount=DEFAULT_LOG_BACKUP_COUNT,
    )
    file_handler.setFormatter(formatter)
    file_handler.setLevel(POOL_LEVEL_NUM)
    logger.addHandler(file_handler)

    return logger


def log_pool_event(message) -> None:
    """Record a state-changing pool action at the POOL level, if configured."""
    logger = logging.getLogger("pool")
    if logger.isEnabledFor(POOL_LEVEL_NUM):
        logger.log(POOL_LEVEL_NUM, message)
