"""Root logger configuration for the Cosmic Tic-Tac-Toe server."""

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from . import config


def setup_logging() -> None:
    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(config.LOG_LEVEL)

    fmt = logging.Formatter("%(asctime)s | %(levelname)s | %(name)s | %(message)s")

    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(fmt)
    root.addHandler(stream_handler)

    if config.LOG_FILE:
        Path(config.LOG_FILE).parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            config.LOG_FILE,
            maxBytes=config.LOG_MAX_MB * 1024 * 1024,
            backupCount=config.LOG_BACKUP_COUNT,
            encoding="utf-8",
        )
        file_handler.setFormatter(fmt)
        root.addHandler(file_handler)

    # Per-request access lines are noise at INFO.
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
