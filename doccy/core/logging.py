"""Logging utilities for Doccy."""

from __future__ import annotations

import logging
import sys

_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str | int = "INFO") -> None:
    """Configure the root logger with a single stdout handler."""
    logging.captureWarnings(True)
    root = logging.getLogger()
    root.setLevel(level)
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(_FORMAT))
    root.handlers = [handler]


def get_logger(name: str = "doccy") -> logging.Logger:
    """Return a named logger, configuring root on first call."""
    if not logging.getLogger().handlers:
        from doccy.database.config.config import settings

        configure_logging(settings.LOG_LEVEL)
    return logging.getLogger(name)


__all__ = ["configure_logging", "get_logger"]
