"""Executable entrypoint for gridsnake."""

from __future__ import annotations

import logging
import os

from .game import SnakeGame


def main() -> None:
    """Launch the game."""
    logging.basicConfig(
        level=os.environ.get("GRIDSNAKE_LOG_LEVEL", "WARNING").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    SnakeGame().run()


if __name__ == "__main__":
    main()
