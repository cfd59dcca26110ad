# Copyright 2025 Ilya Makarov
#
# Licensed under the Business Source License 1.1
# Change Date: 2028-11-05
# Change License: Apache License 2.0

"""
Logging setup for confstore.

Library modules log through plain ``logging.getLogger("confstore.<component>")``
and never attach handlers themselves. Applications (and the CLI) call
``get_logger`` once to get console and rotating file output.
"""

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Dict, Optional

DEFAULT_LOG_DIR = Path.home() / ".confstore" / "logs"

CONSOLE_FORMAT = "[%(asctime)s] [%(name)s:%(levelname)s] %(message)s"
FILE_FORMAT = "%(asctime)s | %(name)s | %(levelname)s | %(filename)s:%(lineno)d | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Rotate after 10MB, keep 5 backup files
MAX_LOG_BYTES = 10 * 1024 * 1024
LOG_BACKUPS = 5


def parse_level(level: str) -> int:
    """Convert a level name to its logging constant, INFO when unknown"""
    value = logging.getLevelName(level.upper())
    return value if isinstance(value, int) else logging.INFO


class StoreLogger:
    """
    Handler setup for a confstore logger hierarchy.

    The console handler follows the requested level; the rotating file
    handler always records DEBUG so a verbose trail survives quiet runs.
    """

    def __init__(
        self,
        name: str = "confstore",
        level: str = "INFO",
        log_dir: Optional[Path] = None,
        console_output: bool = True,
        file_output: bool = True,
    ):
        self.name = name
        self.logger = logging.getLogger(name)
        self.log_file: Optional[Path] = None

        self.logger.handlers.clear()
        self.logger.setLevel(parse_level(level))

        if console_output:
            self.logger.addHandler(self._console_handler(level))

        if file_output:
            self.log_file = (log_dir or DEFAULT_LOG_DIR) / f"{name}.log"
            self.logger.addHandler(self._file_handler(self.log_file))

    @staticmethod
    def _console_handler(level: str) -> logging.Handler:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(fmt=CONSOLE_FORMAT, datefmt=DATE_FORMAT))
        handler.setLevel(parse_level(level))
        return handler

    @staticmethod
    def _file_handler(log_file: Path) -> logging.Handler:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handler = RotatingFileHandler(
            log_file, maxBytes=MAX_LOG_BYTES, backupCount=LOG_BACKUPS, encoding="utf-8"
        )
        handler.setFormatter(logging.Formatter(fmt=FILE_FORMAT, datefmt=DATE_FORMAT))
        handler.setLevel(logging.DEBUG)
        return handler

    def debug(self, message: str, **kwargs):
        self.logger.debug(message, extra=kwargs)


_loggers: Dict[str, StoreLogger] = {}


def get_logger(
    name: str = "confstore",
    level: Optional[str] = None,
    log_dir: Optional[Path] = None,
    file_output: Optional[bool] = None,
) -> StoreLogger:
    """
    Get or create a logger instance.

    Args:
        name: Logger name
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_dir: Directory for the rotating log file
        file_output: Force file logging on/off instead of reading CONFSTORE_NO_FILE_LOGS

    Returns:
        StoreLogger instance
    """
    if name not in _loggers:
        log_level = level or os.getenv("CONFSTORE_LOG_LEVEL", "INFO")

        if file_output is None:
            # CI/test mode
            file_output = os.getenv("CONFSTORE_NO_FILE_LOGS", "false").lower() != "true"

        _loggers[name] = StoreLogger(
            name=name,
            level=log_level,
            log_dir=log_dir,
            file_output=file_output,
        )

    return _loggers[name]
