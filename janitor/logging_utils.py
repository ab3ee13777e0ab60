"""Shared logging helpers for the guard layer."""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import List, Optional

from janitor.config import GuardSettings

NAMESPACE = "janitor"
DEFAULT_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"

# Longest slice of an untrusted value echoed into a log line
MAX_ECHO_CHARS = 100


def ensure_log_dir(log_dir: Path) -> Path:
    """Ensure the logs directory exists."""
    log_dir.mkdir(parents=True, exist_ok=True)
    return log_dir


def has_rotating_handler(logger: logging.Logger, filename: str) -> bool:
    """Check if the logger already has a RotatingFileHandler for the given file."""
    return any(
        isinstance(handler, RotatingFileHandler)
        and Path(handler.baseFilename).name == filename
        for handler in logger.handlers
    )


def add_rotating_handler(
    logger: logging.Logger,
    log_dir: Path,
    filename: str,
    level: int = logging.INFO,
    fmt: str = DEFAULT_FORMAT,
    max_bytes: int = 5_000_000,
    backup_count: int = 7,
) -> RotatingFileHandler:
    """Attach a rotating file handler to the logger."""
    handler = RotatingFileHandler(
        ensure_log_dir(log_dir) / filename,
        maxBytes=max_bytes,
        backupCount=backup_count,
        encoding="utf-8",
    )
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt))
    logger.addHandler(handler)
    return handler


def configure_logging(
    settings: GuardSettings,
    namespace: str = NAMESPACE,
    filename: str = "janitor.log",
    console: bool = True,
) -> List[logging.Handler]:
    """
    Configure rotating file (and optional console) logging for a namespace.

    Safe to call more than once; handlers are only added if missing.

    Args:
        settings: Supplies level and log directory.
        namespace: Logger namespace (e.g., "janitor").
        filename: Log file name inside settings.log_dir.
        console: Also attach a StreamHandler.
    """
    level = getattr(logging, settings.log_level)
    logger = logging.getLogger(namespace)
    logger.setLevel(level)

    handlers: List[logging.Handler] = []
    if not has_rotating_handler(logger, filename):
        handlers.append(add_rotating_handler(logger, settings.log_dir, filename, level))

    has_console = any(type(handler) is logging.StreamHandler for handler in logger.handlers)
    if console and not has_console:
        stream = logging.StreamHandler()
        stream.setLevel(level)
        stream.setFormatter(logging.Formatter(DEFAULT_FORMAT))
        logger.addHandler(stream)
        handlers.append(stream)

    return handlers


def truncate_for_log(value: Optional[object], limit: int = MAX_ECHO_CHARS) -> str:
    """Shorten an untrusted value before echoing it into a log line.

    Line breaks are escaped so the value cannot start a forged log record.
    """
    text = repr(value) if not isinstance(value, str) else value
    text = text.replace("\r", "\\r").replace("\n", "\\n")
    if len(text) <= limit:
        return text
    return text[:limit] + "..."


__all__ = [
    "configure_logging",
    "ensure_log_dir",
    "truncate_for_log",
]
