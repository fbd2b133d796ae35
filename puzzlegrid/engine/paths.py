"""Helpers for 8-directional paths of positions."""

from __future__ import annotations

from typing import List, Optional, Sequence

from ..core.constants import ADJACENT_STEPS
from ..core.models import Position

LetterCells = Sequence[Sequence[Optional[str]]]


def are_adjacent(first: Position, second: Position) -> bool:
    """True for distinct positions that touch, diagonals included."""

    row_diff = abs(first.row - second.row)
    col_diff = abs(first.col - second.col)
    return row_diff <= 1 and col_diff <= 1 and (row_diff, col_diff) != (0, 0)


def is_valid_path(path: Sequence[Position]) -> bool:
    """Non-empty, each step adjacent to the previous one, no position reused."""

    if not path:
        return False
    if any(not are_adjacent(a, b) for a, b in zip(path, path[1:])):
        return False
    return len(set(path)) == len(path)


def can_extend_path(path: Sequence[Position], candidate: Position) -> bool:
    if not path:
        return True
    return are_adjacent(path[-1], candidate) and candidate not in path


def in_bounds(pos: Position, rows: int, cols: int) -> bool:
    return 0 <= pos.row < rows and 0 <= pos.col < cols


def adjacent_positions(pos: Position, rows: int, cols: int) -> List[Position]:
    """In-bounds neighbours of ``pos`` in row-major order."""

    neighbours = (pos.offset(dr, dc) for dr, dc in ADJACENT_STEPS)
    return [n for n in neighbours if in_bounds(n, rows, cols)]


def build_word_from_path(cells: LetterCells, path: Sequence[Position]) -> str:
    """Concatenate the uppercased letters under ``path``; empty cells contribute nothing."""

    letters: List[str] = []
    for pos in path:
        if 0 <= pos.row < len(cells) and 0 <= pos.col < len(cells[pos.row]):
            letter = cells[pos.row][pos.col]
            if letter:
                letters.append(letter.upper())
    return "".join(letters)


def shared_positions(first: Sequence[Position], second: Sequence[Position]) -> List[Position]:
    lookup = set(first)
    return [pos for pos in second if pos in lookup]


def manhattan_distance(first: Position, second: Position) -> int:
    return abs(first.row - second.row) + abs(first.col - second.col)


def chebyshev_distance(first: Position, second: Position) -> int:
    return max(abs(first.row - second.row), abs(first.col - second.col))
