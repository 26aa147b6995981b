"""Logging setup shared by the app factory and the launcher."""

from __future__ import annotations

import logging


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging at the given level name."""
    log_level = getattr(logging, level.upper(), logging.INFO)

    logging.basicConfig(
        level=log_level, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    # Quiet noisy libraries
    if level.upper() != "DEBUG":
        logging.getLogger("sqlalchemy").setLevel(logging.WARNING)
