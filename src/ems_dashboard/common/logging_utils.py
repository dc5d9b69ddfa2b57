from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Install a single console handler on the package logger."""

    logger = logging.getLogger("ems_dashboard")
    log_level = getattr(logging, str(level).upper(), logging.INFO)

    # Clear existing handlers to avoid duplicates when the app is rebuilt.
    logger.handlers.clear()
    logger.setLevel(log_level)

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler.setLevel(log_level)
    logger.addHandler(handler)
