"""
Runtime settings for Fotoperiodo.

Values come from the environment so a deployment can move the settings
snapshot or slow down the refresh without touching code:

    FOTOPERIODO_SETTINGS_PATH    where the local settings snapshot lives
    FOTOPERIODO_REFRESH_SECONDS  dashboard auto-refresh period
    FOTOPERIODO_LOG_LEVEL        logging level name (DEBUG, INFO, ...)
"""

import logging
import os
import sys
from pathlib import Path

from config.constants import STORAGE_KEY

SETTINGS_PATH = Path(
    os.getenv("FOTOPERIODO_SETTINGS_PATH", f"~/.fotoperiodo/{STORAGE_KEY}.json")
).expanduser()
REFRESH_INTERVAL = max(1, int(os.getenv("FOTOPERIODO_REFRESH_SECONDS", "30")))  # seconds
LOG_LEVEL = os.getenv("FOTOPERIODO_LOG_LEVEL", "WARNING").upper()

LOGGER_NAME = "fotoperiodo"


def configure_logging(level: str | int = LOG_LEVEL) -> logging.Logger:
    """Attach a single stderr handler to the ``fotoperiodo`` logger.

    Safe to call on every Streamlit rerun: existing handlers are replaced,
    not stacked.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.handlers.clear()
    logger.propagate = False

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s"))
    logger.addHandler(handler)

    if isinstance(level, str):
        level = logging.getLevelName(level)
        if not isinstance(level, int):
            level = logging.WARNING
    logger.setLevel(level)
    return logger
