"""Segment-aware gravity for masked grids.

A column is split into independent segments by its inactive cells. Values
fall toward the high-row end of their own segment and never pass through an
inactive cell, which is what makes cross, plus and stencil boards work.
"""

from __future__ import annotations

from typing import Dict, Iterator, List, Tuple

from ..core.models import ColumnMove, Position
from ..utils.logger import get_logger
from .grid import MaskedGrid


LOGGER = get_logger(__name__)


def column_segments(grid: MaskedGrid, col: int) -> Iterator[Tuple[int, int]]:
    """Yield ``(top, bottom)`` row bounds of each active segment, bottom segment first."""

    seg_end = grid.rows - 1
    while seg_end >= 0:
        if not grid.is_active(seg_end, col):
            seg_end -= 1
            continue
        seg_start = seg_end
        while seg_start - 1 >= 0 and grid.is_active(seg_start - 1, col):
            seg_start -= 1
        yield seg_start, seg_end
        seg_end = seg_start - 1


def compact_column(grid: MaskedGrid, col: int) -> List[ColumnMove]:
    """Slide the values of ``col`` down inside each segment and report the moves."""

    moves: List[ColumnMove] = []
    for seg_start, seg_end in column_segments(grid, col):
        write = seg_end
        for read in range(seg_end, seg_start - 1, -1):
            value = grid.get(read, col)
            if value is None:
                continue
            if write != read:
                grid.set(write, col, value)
                grid.set(read, col, None)
                moves.append(ColumnMove(from_row=read, to_row=write))
            write -= 1
        for row in range(write, seg_start - 1, -1):
            grid.set(row, col, None)
    if moves:
        LOGGER.debug("Column %s compacted with %s moves", col, len(moves))
    return moves


def columns_with_empty_cells(grid: MaskedGrid) -> List[int]:
    """Ascending list of columns holding at least one active empty cell."""

    return sorted({pos.col for pos in grid.empty_positions()})


def compact_all(grid: MaskedGrid) -> Dict[int, List[ColumnMove]]:
    return {col: compact_column(grid, col) for col in columns_with_empty_cells(grid)}


def empty_top_positions(grid: MaskedGrid) -> List[Position]:
    """Empty cells sitting at the top of a segment, in column-major order.

    After compaction every empty cell is at the top of its segment, so this is
    exactly the set of cells a refill has to cover.
    """

    positions: List[Position] = []
    for col in range(grid.cols):
        segments = sorted(column_segments(grid, col))
        for seg_start, seg_end in segments:
            for row in range(seg_start, seg_end + 1):
                if grid.get(row, col) is not None:
                    break
                positions.append(Position(row, col))
    return positions
