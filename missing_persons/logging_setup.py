"""
Logging configuration for the dashboard package.

Streamlit re-executes the script on every interaction, so the handler is only
attached once per process.
"""

from __future__ import annotations

import logging
import os

PACKAGE_LOGGER = "missing_persons"
LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str | None = None) -> logging.Logger:
    logger = logging.getLogger(PACKAGE_LOGGER)
    level_name = (level or os.getenv("MP_LOG_LEVEL") or "INFO").upper()
    logger.setLevel(getattr(logging, level_name, logging.INFO))
    if not any(getattr(h, "_mp_handler", False) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._mp_handler = True  # type: ignore[attr-defined]
        logger.addHandler(handler)
        logger.propagate = False
    return logger
