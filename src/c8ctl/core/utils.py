"""Utility functions for c8ctl."""

import logging
import os
import sys
from logging import Handler
from logging.handlers import RotatingFileHandler

from c8ctl.core.paths import C8ctlPaths

LOGGER_NAME = "c8ctl"


def _get_log_level() -> int:
    """Get log level from C8CTL_LOG_LEVEL environment variable.

    Supports: DEBUG, INFO, WARNING, ERROR (case-insensitive).
    Defaults to INFO if not set or invalid.

    Returns:
        Logging level constant
    """
    level_str = os.environ.get("C8CTL_LOG_LEVEL", "INFO").upper()
    level_map = {
        "DEBUG": logging.DEBUG,
        "INFO": logging.INFO,
        "WARNING": logging.WARNING,
        "ERROR": logging.ERROR,
    }
    return level_map.get(level_str, logging.INFO)


def setup_logger(
    command: str = "deploy",
    log_to_file: bool = True,
    use_rotating: bool = True,
    max_bytes: int = 5 * 1024 * 1024,  # 5MB
    backup_count: int = 3,
) -> logging.Logger:
    """Set up the c8ctl logger for one command invocation.

    Console output goes to stderr at the C8CTL_LOG_LEVEL level so that
    report output on stdout stays machine-readable. The log file, when
    enabled, always captures DEBUG.

    Args:
        command: Command name, used as the log file name
        log_to_file: If False, only log to the console
        use_rotating: If True, use RotatingFileHandler instead of FileHandler
        max_bytes: Maximum file size before rotation (only if use_rotating=True)
        backup_count: Number of backup files to keep (only if use_rotating=True)

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG)

    # Clear any existing handlers to avoid duplicates
    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(_get_log_level())
    console_handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(console_handler)

    if log_to_file:
        log_file = C8ctlPaths.get_logs_dir() / f"{command}.log"
        try:
            C8ctlPaths.ensure_directories()
            file_handler: Handler
            if use_rotating:
                file_handler = RotatingFileHandler(
                    log_file, maxBytes=max_bytes, backupCount=backup_count, mode="a"
                )
            else:
                file_handler = logging.FileHandler(log_file, mode="a")
        except OSError as e:
            logger.warning(f"File logging disabled: {e}")
        else:
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(
                logging.Formatter(
                    "%(asctime)s - %(levelname)s - %(name)s - %(message)s",
                    datefmt="%Y-%m-%d %H:%M:%S",
                )
            )
            logger.addHandler(file_handler)
            logger.debug(f"Log file: {log_file}")

    return logger
