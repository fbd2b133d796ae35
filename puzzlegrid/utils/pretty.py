"""Pretty-print helpers for puzzle grids."""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING, Iterable, Optional

if TYPE_CHECKING:
    from ..core.models import WordPath
    from ..engine.grid import MaskedGrid


INACTIVE_SYMBOL = "#"
EMPTY_SYMBOL = "."


def cell_symbol(grid: MaskedGrid, row: int, col: int) -> str:
    if not grid.is_active(row, col):
        return INACTIVE_SYMBOL
    value = grid.get(row, col)
    return EMPTY_SYMBOL if value is None else str(value)


def format_grid(grid: MaskedGrid) -> str:
    width = grid.cols
    header_cells = [f"{c:>2}" for c in range(width)]
    lines = ["    " + " ".join(header_cells)]
    lines.append("    " + "-" * (3 * width - 1))
    for r in range(grid.rows):
        row_cells = [cell_symbol(grid, r, c) for c in range(width)]
        row_render = " ".join(f"{symbol:>2}" for symbol in row_cells)
        lines.append(f"{r:>2} | {row_render}")
    return "\n".join(lines)


def pretty_print_grid(grid: MaskedGrid, *, label: Optional[str] = None, stream=None) -> None:
    """Print the grid in a human-friendly format."""

    stream = stream or sys.stdout
    if label:
        print(label, file=stream)
    print(format_grid(grid), file=stream)


def format_word_paths(paths: Iterable[WordPath]) -> str:
    lines = []
    for path in paths:
        trail = " -> ".join(f"({pos.row},{pos.col})" for pos in path.positions)
        lines.append(f"  {path.word:<10} {path.score:>3}  {trail}")
    return "\n".join(lines)
