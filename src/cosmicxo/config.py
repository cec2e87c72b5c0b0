"""Environment-driven settings for the Cosmic Tic-Tac-Toe server."""

from __future__ import annotations

import logging
import os

logger = logging.getLogger(__name__)


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    if v is not None and str(v).strip() != "":
        return str(v).strip()
    return default


def _env_float(name: str, default: float) -> float:
    raw = _env(name)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning("Ignoring invalid %s=%r, using %s", name, raw, default)
        return default


def _env_int(name: str, default: int) -> int:
    raw = _env(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("Ignoring invalid %s=%r, using %s", name, raw, default)
        return default


# ================== SERVER ==================
HOST = _env("COSMICXO_HOST", "0.0.0.0")
PORT = _env_int("COSMICXO_PORT", 8000)

# ================== AI ==================
# Seconds the computer "thinks" before replying
AI_DELAY = max(0.0, _env_float("COSMICXO_AI_DELAY", 0.5))

# ================== LOGGING ==================
LOG_LEVEL = _env("LOG_LEVEL", "INFO").upper()
LOG_FILE = _env("COSMICXO_LOG_FILE")
LOG_MAX_MB = _env_int("LOG_MAX_MB", 10)
LOG_BACKUP_COUNT = _env_int("LOG_BACKUP_COUNT", 5)
