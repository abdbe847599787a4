"""
Logging setup for the Webty comment backend
"""
import logging
import os
import sys
from pathlib import Path
from logging.handlers import RotatingFileHandler
from typing import Optional


LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

LOG_DIR = Path(__file__).parent.parent.parent / "logs"


def _file_handler(log_file: str, level: int, max_bytes: int, backup_count: int) -> RotatingFileHandler:
    LOG_DIR.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        LOG_DIR / log_file,
        maxBytes=max_bytes,
        backupCount=backup_count,
        encoding="utf-8",
    )
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    return handler


def _console_handler(level: int) -> logging.StreamHandler:
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    return handler


def setup_logger(
    name: str,
    level: int = logging.INFO,
    log_file: Optional[str] = None,
    max_bytes: int = 10 * 1024 * 1024,  # 10MB
    backup_count: int = 5,
) -> logging.Logger:
    """
    Return a logger with its own console (and optionally file) handler.

    Args:
        name: Logger name, usually the calling module's __name__
        level: Logging level
        log_file: File name under LOG_DIR; console only when None
        max_bytes: Size at which the log file rotates
        backup_count: Number of rotated files to keep

    Returns:
        The configured logger
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)

    if logger.handlers:
        return logger

    logger.addHandler(_console_handler(level))
    if log_file:
        logger.addHandler(_file_handler(log_file, level, max_bytes, backup_count))

    return logger


def get_logger(name: str) -> logging.Logger:
    """Module logger; handlers come from configure_app_logging()."""
    return logging.getLogger(name)


def configure_app_logging(
    level: int | None = None,
    log_to_file: bool | None = None,
    log_file: str = "webty.log",
) -> None:
    """
    Configure the root logger once at application startup.

    Args:
        level: Root level, defaults to WEBTY_LOG_LEVEL or INFO
        log_to_file: Also write to LOG_DIR/log_file, defaults to WEBTY_LOG_TO_FILE
        log_file: Log file name
    """
    if level is None:
        level = logging.getLevelName(os.getenv("WEBTY_LOG_LEVEL", "INFO").upper())
        if not isinstance(level, int):
            level = logging.INFO
    if log_to_file is None:
        log_to_file = os.getenv("WEBTY_LOG_TO_FILE", "false").lower() == "true"

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    root_logger.addHandler(_console_handler(level))
    if log_to_file:
        root_logger.addHandler(_file_handler(log_file, level, 10 * 1024 * 1024, 5))
