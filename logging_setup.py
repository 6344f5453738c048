"""
Logging setup for SplitLedger

- console: INFO by default
- file (optional): daily TimedRotatingFileHandler, 7 days kept
"""
from __future__ import annotations
import logging
import os
import sys
from logging.handlers import TimedRotatingFileHandler
from typing import Optional

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LOG_FILE_NAME = "splitledger.log"
LOG_FILE_BACKUP_COUNT = 7


def setup_logging(
    log_dir: Optional[str] = None,
    console_level: int = logging.INFO,
    file_level: int = logging.INFO,
) -> logging.Logger:
    """
    Configure the root logger and return it.
    Handlers from an earlier call are replaced, not stacked.
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)  # handlers do the filtering
    root_logger.handlers.clear()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(console_level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
        file_handler = TimedRotatingFileHandler(
            filename=get_log_file_path(log_dir),
            when="midnight",
            interval=1,
            backupCount=LOG_FILE_BACKUP_COUNT,
            encoding="utf-8",
        )
        file_handler.suffix = "%Y-%m-%d"
        file_handler.setLevel(file_level)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    root_logger.debug("Logging ready (console=%s, dir=%s)", logging.getLevelName(console_level), log_dir)
    return root_logger


def get_log_file_path(log_dir: str) -> str:
    return os.path.join(log_dir, LOG_FILE_NAME)
