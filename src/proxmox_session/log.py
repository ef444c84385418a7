"""Logging setup for the command line entry point."""
from __future__ import annotations

import logging

from .config import LoggingConfig


def setup_logging(config: LoggingConfig) -> logging.Logger:
    level = getattr(logging, config.level.upper(), None)
    if not isinstance(level, int):
        level = logging.WARNING
    logging.basicConfig(level=level, format=config.format)
    logger = logging.getLogger("proxmox_session")
    logger.setLevel(level)
    return logger
