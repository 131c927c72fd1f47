from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import Dict, Optional

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(module)s:%(funcName)s:%(lineno)d - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
DEFAULT_LEVEL = os.getenv("CHORD_ROOTS_LOG_LEVEL", "WARNING").upper()

PACKAGE_LOGGER = "chord_roots"

_loggers: Dict[str, logging.Logger] = {}


def _level(level_str: str) -> int:
    level = logging.getLevelName(level_str.upper())
    if not isinstance(level, int):
        return logging.WARNING
    return level


def setup_logger(
    name: str = PACKAGE_LOGGER,
    level_str: Optional[str] = None,
    log_file: Optional[Path] = None,
    log_to_console: bool = True,
) -> logging.Logger:
    """
    Configures and returns a logger instance.

    Loggers below the package logger (``chord_roots.<module>``) get no handlers
    of their own and propagate to it, so configuring ``chord_roots`` once sets
    level and destinations for the whole package.

    Args:
        name: logger name.
        level_str: level name such as "DEBUG" or "INFO". None keeps the level
            already set, or CHORD_ROOTS_LOG_LEVEL (default WARNING) on first use.
        log_file: optional file that receives the same records.
        log_to_console: attach a stderr handler.
    """
    if name != PACKAGE_LOGGER and name.startswith(PACKAGE_LOGGER + "."):
        return logging.getLogger(name)

    # Already configured: only the level changes unless a log file is added.
    if name in _loggers and log_file is None:
        logger = _loggers[name]
        if level_str is not None:
            logger.setLevel(_level(level_str))
        return logger

    logger = logging.getLogger(name)
    logger.setLevel(_level(level_str or DEFAULT_LEVEL))

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    if logger.hasHandlers():
        logger.handlers.clear()

    if log_to_console:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    if log_file:
        log_file_path = Path(log_file)
        log_file_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file_path, mode="a", encoding="utf-8")
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    if logger.handlers:
        logger.propagate = False

    _loggers[name] = logger
    return logger


app_logger = setup_logger()
