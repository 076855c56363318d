# src/soil_dashboard/logging_config.py
from __future__ import annotations

import logging

from rich.logging import RichHandler

from .config import Config

LOG_FORMAT = "%(name)s - %(message)s"
DATE_FORMAT = "[%Y-%m-%d %H:%M:%S]"

_configured = False


def configure_logging(level: str | int | None = None) -> logging.Logger:
    """
    Install a rich console handler on the root logger (once).
    Returns the package logger.
    """
    global _configured

    level = level or Config.LOG_LEVEL
    root_logger = logging.getLogger()

    if not _configured:
        handler = RichHandler(rich_tracebacks=True, show_path=False, log_time_format=DATE_FORMAT)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root_logger.addHandler(handler)
        _configured = True

    root_logger.setLevel(level)

    # Reduce noise from third-party libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("openai").setLevel(logging.WARNING)
    logging.getLogger("matplotlib").setLevel(logging.WARNING)
    logging.getLogger("PIL").setLevel(logging.WARNING)

    return logging.getLogger("soil_dashboard")
