"""
Logging configuration for the promo_kit service.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path


def setup_logging(
    level: int | str = logging.INFO,
    log_dir: str | Path | None = None,
    name: str = "promo_kit",
) -> logging.Logger:
    """Attach console (and optionally file) handlers to the package logger.

    Safe to call more than once; existing handlers are replaced.

    Args:
        level: Logging level, as an int or a name like "DEBUG".
        log_dir: Directory for ``promo_kit.log``. Console only when None.
        name: Logger name.

    Returns:
        The configured logger.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    logger = logging.getLogger(name)
    logger.setLevel(level)
    logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(
        logging.Formatter(fmt="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s", datefmt="%H:%M:%S")
    )
    logger.addHandler(console_handler)

    if log_dir:
        log_dir = Path(log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_dir / "promo_kit.log", encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)  # Capture everything
        file_handler.setFormatter(
            logging.Formatter(
                fmt="%(asctime)s | %(levelname)-8s | %(name)s:%(funcName)s:%(lineno)d | %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        logger.addHandler(file_handler)

    return logger
