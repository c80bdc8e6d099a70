"""Logging setup for simulation hosts (CLI, job runner embedders)."""
from __future__ import annotations

import logging
import sys
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path
from typing import TextIO

_LOG_FORMAT = "%(asctime)s | %(name)s | %(levelname)s | %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _resolve_level(level: str) -> int:
    resolved = logging.getLevelName(level.upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def _has_handler(logger: logging.Logger, kind: type[logging.Handler]) -> bool:
    return any(type(h) is kind for h in logger.handlers)


def setup_logging(
    name: str,
    level: str = "INFO",
    log_dir: str | None = None,
    stream: TextIO | None = None,
) -> logging.Logger:
    """Configure the ``name`` logger and return it.

    Console records go to ``stream`` (stderr by default) so a CLI can keep
    stdout for its own output. With ``log_dir`` set, records are also written
    to ``<log_dir>/<name>.log``, rolled at midnight. Safe to call repeatedly:
    the level is updated and each handler is attached at most once, so a
    later call may add file logging to an existing console setup.
    """
    logger = logging.getLogger(name)
    logger.setLevel(_resolve_level(level))
    formatter = logging.Formatter(_LOG_FORMAT, datefmt=_DATE_FORMAT)

    if not _has_handler(logger, logging.StreamHandler):
        console = logging.StreamHandler(stream or sys.stderr)
        console.setFormatter(formatter)
        logger.addHandler(console)

    if log_dir and not _has_handler(logger, TimedRotatingFileHandler):
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)
        file_handler = TimedRotatingFileHandler(
            filename=log_path / f"{name}.log",
            when="midnight",
            backupCount=14,
            encoding="utf-8",
        )
        file_handler.suffix = "%Y-%m-%d"
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger
