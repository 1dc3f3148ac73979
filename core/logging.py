"""
Logging configuration for the xTrade bot registry.
"""
from __future__ import annotations

import logging
import os
import sys
import tempfile
from pathlib import Path
from typing import Optional

from loguru import logger

# Lazy import settings to avoid circular dependency
_settings = None

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}"

VERBOSITY_LEVELS = ("INFO", "DEBUG", "TRACE")


def _get_settings():
    """Get settings with lazy loading."""
    global _settings
    if _settings is None:
        from core.settings.config import settings as app_settings
        _settings = app_settings
    return _settings


def level_for_verbosity(verbose: int) -> Optional[str]:
    """Map a ``-v`` count to a log level: 1 INFO, 2 DEBUG, 3+ TRACE.

    No ``-v`` is no override (``None``), leaving ``LOG_LEVEL`` in charge.
    """
    if verbose <= 0:
        return None
    return VERBOSITY_LEVELS[min(verbose, len(VERBOSITY_LEVELS)) - 1]


def _resolve_log_path(default_path: Path) -> Path:
    try:
        default_path.parent.mkdir(parents=True, exist_ok=True)
        return default_path
    except OSError:
        fallback_dir = Path.cwd() / "logs"
        fallback_dir.mkdir(parents=True, exist_ok=True)
        return fallback_dir / default_path.name


def _add_file_sink(path: Path, level: str, rotation: str, retention: str) -> None:
    try:
        logger.add(
            str(path),
            format=FILE_FORMAT,
            level=level,
            rotation=rotation,
            retention=retention,
            compression="zip",
        )
    except PermissionError:
        # Fall back to a temp directory that is always writable
        tmp_dir = Path(tempfile.gettempdir()) / "xtrade_logs"
        tmp_dir.mkdir(parents=True, exist_ok=True)
        logger.add(
            str(tmp_dir / path.name),
            format=FILE_FORMAT,
            level=level,
            rotation=rotation,
            retention=retention,
            compression="zip",
        )


class LoguruHandler(logging.Handler):
    """Route standard-library log records (uvicorn, fastapi) into loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno
        logger.opt(depth=6, exception=record.exc_info).log(level, record.getMessage())


def setup_logging(level: Optional[str] = None, fallback: Optional[str] = None):
    """Configure loguru sinks.

    ``level`` wins over an exported or ``.env`` ``LOG_LEVEL``, which wins over
    ``fallback`` and finally the ``log_level`` setting. Console output goes to
    stderr so CLI results on stdout stay machine readable.
    """
    settings = _get_settings()

    logger.remove()

    log_level = (level or os.getenv("LOG_LEVEL") or fallback or settings.log_level or "INFO").upper()
    logger.add(sys.stderr, format=CONSOLE_FORMAT, level=log_level, colorize=True)

    if settings.log_file:
        log_path = _resolve_log_path(Path(settings.log_file))
        _add_file_sink(log_path, "DEBUG", rotation="100 MB", retention="30 days")
        _add_file_sink(log_path.parent / "errors.log", "ERROR", rotation="50 MB", retention="90 days")

    root_logger = logging.getLogger()
    root_logger.handlers = [LoguruHandler()]
    root_logger.setLevel(logging.INFO)

    logger.debug(f"Logging initialized - Level: {log_level}, File: {settings.log_file or '-'}")
    return logger


# Modules log through this object; sinks are installed by setup_logging()
log = logger
