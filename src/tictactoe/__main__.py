"""Entry point for running Tic Tac Toe via ``python -m tictactoe``."""

from __future__ import annotations

import logging
import os

import uvicorn


def main() -> None:
    """Start the FastAPI-powered Tic Tac Toe web server."""

    host = os.environ.get("TICTACTOE_HOST", "0.0.0.0")
    port = int(os.environ.get("TICTACTOE_PORT", "8000"))
    log_level = os.environ.get("TICTACTOE_LOG_LEVEL", "info").lower()
    # uvicorn only configures its own loggers; give the game's loggers a handler too.
    logging.basicConfig(
        level=log_level.upper(), format="%(levelname)s:     %(name)s - %(message)s"
    )
    uvicorn.run("tictactoe.ui:app", host=host, port=port, log_level=log_level, reload=False)


if __name__ == "__main__":
    main()
