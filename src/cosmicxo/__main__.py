"""Entry point for running Cosmic Tic-Tac-Toe via ``python -m cosmicxo``."""

from __future__ import annotations

import uvicorn

from . import config
from .logging_setup import setup_logging


def main() -> None:
    """Start the FastAPI-powered Cosmic Tic-Tac-Toe web server."""

    setup_logging()
    uvicorn.run(
        "cosmicxo.ui:app",
        host=config.HOST,
        port=config.PORT,
        reload=False,
        log_config=None,
    )


if __name__ == "__main__":
    main()
