"""Logging configuration for the rental aggregator."""

import logging
import os
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"

# Third-party loggers that are only interesting when something breaks
NOISY_LOGGERS = ("urllib3", "requests", "werkzeug", "asyncio")


def setup_logging(log_level: Optional[str] = None, log_dir: str = "./logs") -> None:
    """
    Configure logging for the application.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR).
                   Defaults to LOG_LEVEL env var or INFO.
        log_dir: Directory for the daily log file, only used if it exists
    """
    level = log_level or os.getenv("LOG_LEVEL", "INFO")

    formatter = logging.Formatter(
        fmt=LOG_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)

    # Optional file handler
    file_handler = None
    log_path = Path(log_dir)
    if log_path.exists():
        log_file = log_path / f"rental_aggregator_{datetime.now():%Y%m%d}.log"
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    # Avoid stacking handlers when called twice (CLI + web)
    for handler in list(root_logger.handlers):
        if getattr(handler, "_rental_aggregator", False):
            root_logger.removeHandler(handler)
    for handler in (console_handler, file_handler):
        if handler:
            handler._rental_aggregator = True
            root_logger.addHandler(handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
