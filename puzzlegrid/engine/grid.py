"""Masked two-dimensional cell store."""

from __future__ import annotations

from typing import Generic, Iterator, List, Optional, Sequence, TypeVar

from ..core.constants import Bounds
from ..core.exceptions import ConfigurationError
from ..core.models import Position
from .shapes import ShapeFunction


T = TypeVar("T")


class MaskedGrid(Generic[T]):
    """Fixed ``rows x cols`` grid with an optional shape predicate.

    Values live in a flat list indexed by ``row * cols + col``. Coordinates
    outside the bounds or rejected by the shape are treated as permanently
    empty: ``get`` returns ``None`` and ``set`` does nothing, so callers can
    probe neighbours at the edges without checking first.
    """

    def __init__(self, rows: int, cols: int, shape: Optional[ShapeFunction] = None) -> None:
        if rows <= 0 or cols <= 0:
            raise ConfigurationError(f"Grid dimensions must be positive, got {rows}x{cols}")
        self.bounds = Bounds(rows=rows, cols=cols)
        self._cells: List[Optional[T]] = [None] * (rows * cols)
        self._shape: Optional[ShapeFunction] = shape

    # ------------------------------------------------------------------
    # Shape
    # ------------------------------------------------------------------
    @property
    def rows(self) -> int:
        return self.bounds.rows

    @property
    def cols(self) -> int:
        return self.bounds.cols

    @property
    def shape(self) -> Optional[ShapeFunction]:
        return self._shape

    def set_shape(self, shape: Optional[ShapeFunction]) -> None:
        """Swap the shape predicate, dropping values on cells that became inactive."""

        self._shape = shape
        for row in range(self.rows):
            for col in range(self.cols):
                if not self.is_active(row, col):
                    self._cells[self._index(row, col)] = None

    def is_valid_position(self, row: int, col: int) -> bool:
        return self.bounds.contains(row, col)

    def is_active(self, row: int, col: int) -> bool:
        if not self.bounds.contains(row, col):
            return False
        if self._shape is None:
            return True
        return bool(self._shape(row, col, self.rows, self.cols))

    # ------------------------------------------------------------------
    # Cell access
    # ------------------------------------------------------------------
    def _index(self, row: int, col: int) -> int:
        return row * self.cols + col

    def get(self, row: int, col: int) -> Optional[T]:
        if not self.is_active(row, col):
            return None
        return self._cells[self._index(row, col)]

    def set(self, row: int, col: int, value: Optional[T]) -> None:
        if self.is_active(row, col):
            self._cells[self._index(row, col)] = value

    def is_empty(self, row: int, col: int) -> bool:
        """True for an active cell without a value."""
        return self.is_active(row, col) and self.get(row, col) is None

    def clear(self) -> None:
        self._cells = [None] * (self.rows * self.cols)

    def load_rows(self, rows: Sequence[Sequence[Optional[T]]]) -> None:
        """Copy a nested row list into the grid; inactive cells stay empty."""

        if len(rows) != self.rows or any(len(line) != self.cols for line in rows):
            raise ConfigurationError(f"Expected a {self.rows}x{self.cols} layout")
        self.clear()
        for r, line in enumerate(rows):
            for c, value in enumerate(line):
                self.set(r, c, value)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def active_positions(self) -> Iterator[Position]:
        for row in range(self.rows):
            for col in range(self.cols):
                if self.is_active(row, col):
                    yield Position(row, col)

    def empty_positions(self) -> List[Position]:
        return [pos for pos in self.active_positions() if self.get(pos.row, pos.col) is None]

    def occupied_positions(self) -> List[Position]:
        return [pos for pos in self.active_positions() if self.get(pos.row, pos.col) is not None]

    def get_as_array(self) -> List[List[Optional[T]]]:
        """Defensive row-major snapshot of every cell as seen through ``get``."""

        return [[self.get(r, c) for c in range(self.cols)] for r in range(self.rows)]

    def copy(self) -> MaskedGrid[T]:
        clone: MaskedGrid[T] = MaskedGrid(self.rows, self.cols, self._shape)
        clone._cells = list(self._cells)
        return clone

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MaskedGrid):
            return NotImplemented
        return self.bounds == other.bounds and self.get_as_array() == other.get_as_array()

    def __repr__(self) -> str:
        return f"MaskedGrid(rows={self.rows}, cols={self.cols}, filled={len(self.occupied_positions())})"
