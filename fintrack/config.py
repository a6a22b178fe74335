"""Configuration for the finance aggregator.

Values come from the environment (optionally a ``.env`` file) and are
read on each call so tests can override them with ``monkeypatch``.
"""

import logging
import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_WINDOW_DAYS = 30
DEFAULT_DATA_PATH = Path("data") / "snapshot.json"

_TRUTHY = {"1", "true", "yes", "on"}


def window_days() -> int:
    """Trailing window used for the rolling expense total."""
    raw = os.getenv("FINTRACK_WINDOW_DAYS")
    if raw is None:
        return DEFAULT_WINDOW_DAYS
    try:
        value = int(raw)
    except ValueError:
        logger.warning("FINTRACK_WINDOW_DAYS=%r is not an integer, using %d", raw, DEFAULT_WINDOW_DAYS)
        return DEFAULT_WINDOW_DAYS
    if value < 0:
        logger.warning("FINTRACK_WINDOW_DAYS=%r is negative, using %d", raw, DEFAULT_WINDOW_DAYS)
        return DEFAULT_WINDOW_DAYS
    return value


def budget_windowed() -> bool:
    """Whether budget status only counts expenses inside the budget's dates."""
    return os.getenv("FINTRACK_BUDGET_WINDOWED", "").strip().lower() in _TRUTHY


def data_path() -> Path:
    return Path(os.getenv("FINTRACK_DATA_PATH", DEFAULT_DATA_PATH))


def user_id() -> Optional[str]:
    """Owner of the records to show; unset means nobody is selected."""
    value = os.getenv("FINTRACK_USER_ID", "").strip()
    return value or None


def log_level() -> int:
    name = os.getenv("FINTRACK_LOG_LEVEL", "INFO").upper()
    level = logging.getLevelName(name)
    if not isinstance(level, int):
        return logging.INFO
    return level


def configure_logging() -> None:
    logging.basicConfig(level=log_level())
