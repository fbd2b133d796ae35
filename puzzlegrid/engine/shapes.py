"""Board shape predicates.

A shape decides whether ``(row, col)`` is part of the playable board for a
grid of ``rows x cols``. Inactive cells never hold a value and act as solid
walls for gravity.
"""

from __future__ import annotations

from typing import Callable, Dict, List, Optional, Union

from ..core.exceptions import ConfigurationError

ShapeFunction = Callable[[int, int, int, int], bool]


def rectangle(row: int, col: int, rows: int, cols: int) -> bool:
    return True


def cross(row: int, col: int, rows: int, cols: int) -> bool:
    return row == rows // 2 or col == cols // 2


def plus(row: int, col: int, rows: int, cols: int) -> bool:
    center_row = rows // 2
    center_col = cols // 2
    if row == center_row or col == center_col:
        return True
    return abs(row - center_row) <= 1 and abs(col - center_col) <= 1


def parse_stencil(text: str) -> List[List[bool]]:
    """Turn an ``X``/``.`` picture into a boolean matrix."""

    lines = [line.split() for line in text.strip().splitlines() if line.strip()]
    if not lines:
        raise ConfigurationError("Stencil is empty")
    width = len(lines[0])
    matrix: List[List[bool]] = []
    for index, tokens in enumerate(lines):
        if len(tokens) != width:
            raise ConfigurationError(f"Stencil row {index} has {len(tokens)} cells, expected {width}")
        row: List[bool] = []
        for token in tokens:
            if token not in ("X", "."):
                raise ConfigurationError(f"Unknown stencil symbol {token!r}")
            row.append(token == "X")
        matrix.append(row)
    return matrix


def stencil(text: str) -> ShapeFunction:
    """Build a shape from a stencil; a grid of any other size is fully inactive."""

    matrix = parse_stencil(text)
    height = len(matrix)
    width = len(matrix[0])

    def predicate(row: int, col: int, rows: int, cols: int) -> bool:
        if rows != height or cols != width:
            return False
        return matrix[row][col]

    return predicate


ROUNDED_5X5 = """
    . X X X .
    X X X X X
    X X X X X
    X X X X X
    . X X X .
"""

custom_shape = stencil(ROUNDED_5X5)

SHAPES: Dict[str, ShapeFunction] = {
    "rectangle": rectangle,
    "cross": cross,
    "plus": plus,
    "custom": custom_shape,
}


def resolve_shape(shape: Union[str, ShapeFunction, None]) -> Optional[ShapeFunction]:
    """Map a catalog name or caller predicate to a shape function."""

    if shape is None or callable(shape):
        return shape
    try:
        return SHAPES[shape.lower()]
    except KeyError:
        raise ConfigurationError(
            f"Unknown shape {shape!r}; expected one of {sorted(SHAPES)}"
        ) from None
