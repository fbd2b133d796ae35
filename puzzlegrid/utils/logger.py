"""Logging utilities shared by the puzzle grid engines."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

from .pretty import format_grid

if TYPE_CHECKING:
    from ..engine.grid import MaskedGrid


DEFAULT_LOGGER_NAME = "puzzlegrid"


def configure_logging(level: int = logging.INFO) -> None:
    """Configure root logging with a sensible formatter.

    Board generation and word search retry or recurse a great deal, so only
    session-level events are logged at ``INFO``; per-cell detail and board
    dumps stay at ``DEBUG``. Callers may reconfigure before building an engine.
    """

    handler = logging.StreamHandler()
    formatter = logging.Formatter(
        fmt="%(asctime)s | %(levelname)-7s | %(name)s | %(message)s",
        datefmt="%H:%M:%S",
    )
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a namespaced logger, configuring defaults if needed."""

    if not logging.getLogger().handlers:
        configure_logging()
    return logging.getLogger(name or DEFAULT_LOGGER_NAME)


def log_board(logger: logging.Logger, grid: MaskedGrid, label: str, level: int = logging.DEBUG) -> None:
    """Dump a rendered board (``#`` inactive, ``.`` empty) when ``level`` is enabled."""

    if logger.isEnabledFor(level):
        logger.log(level, "%s (%sx%s)\n%s", label, grid.rows, grid.cols, format_grid(grid))
