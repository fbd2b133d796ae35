"""Tile-matching ("match-3") rules on top of a masked integer grid."""

from __future__ import annotations

import random
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Callable, Dict, Iterator, List, Optional, Sequence, Set, Union

from ..core.constants import (
    DEFAULT_TILE_TYPES,
    MAX_CASCADES,
    MAX_GENERATION_ATTEMPTS,
    MAX_TILE_TYPES,
    MIN_TILE_TYPES,
    ORTHOGONAL_STEPS,
    MatchDirection,
)
from ..core.exceptions import ConfigurationError
from ..core.models import CascadeResult, ColumnMove, Position, TileGridStats, TileMatch, TileMove
from ..utils.logger import get_logger, log_board
from . import gravity
from .grid import MaskedGrid
from .shapes import ShapeFunction, resolve_shape


LOGGER = get_logger(__name__)

TileGrid = MaskedGrid[int]
ShapeSpec = Union[str, ShapeFunction, None]


@dataclass
class TileGridConfig:
    """Configuration values driving a tile board."""

    rows: int
    cols: int
    tile_types: int = DEFAULT_TILE_TYPES
    max_attempts: int = MAX_GENERATION_ATTEMPTS
    max_cascades: int = MAX_CASCADES
    rng_seed: Optional[int] = None

    def __post_init__(self) -> None:
        if self.rows <= 0 or self.cols <= 0:
            raise ConfigurationError(f"Grid dimensions must be positive, got {self.rows}x{self.cols}")
        self.tile_types = max(MIN_TILE_TYPES, min(MAX_TILE_TYPES, self.tile_types))
        if self.max_attempts < 1:
            raise ConfigurationError("max_attempts must be at least 1")


# ----------------------------------------------------------------------
# Pure helpers
# ----------------------------------------------------------------------
def _collect_runs(grid: TileGrid, direction: MatchDirection) -> List[TileMatch]:
    outer, inner = (grid.rows, grid.cols) if direction == MatchDirection.HORIZONTAL else (grid.cols, grid.rows)

    def at(line: int, offset: int) -> Optional[int]:
        if direction == MatchDirection.HORIZONTAL:
            return grid.get(line, offset)
        return grid.get(offset, line)

    def pos(line: int, offset: int) -> Position:
        if direction == MatchDirection.HORIZONTAL:
            return Position(line, offset)
        return Position(offset, line)

    runs: List[TileMatch] = []
    for line in range(outer):
        start = 0
        while start < inner:
            tile = at(line, start)
            end = start + 1
            while end < inner and tile is not None and at(line, end) == tile:
                end += 1
            if tile is not None and end - start >= 3:
                positions = tuple(pos(line, offset) for offset in range(start, end))
                runs.append(TileMatch(tile_type=tile, direction=direction, positions=positions))
            start = end
    return runs


def find_match_groups(grid: TileGrid) -> List[TileMatch]:
    """Every maximal horizontal run, then every maximal vertical run, of length 3+."""

    return _collect_runs(grid, MatchDirection.HORIZONTAL) + _collect_runs(grid, MatchDirection.VERTICAL)


def merge_match_positions(groups: Sequence[TileMatch]) -> List[Position]:
    seen: Set[Position] = set()
    matches: List[Position] = []
    for group in groups:
        for position in group.positions:
            if position not in seen:
                seen.add(position)
                matches.append(position)
    return matches


def find_matches(grid: TileGrid) -> List[Position]:
    """Union of matched positions; a cell in two runs is reported once."""

    return merge_match_positions(find_match_groups(grid))


def are_orthogonally_adjacent(row1: int, col1: int, row2: int, col2: int) -> bool:
    return abs(row1 - row2) + abs(col1 - col2) == 1


def would_create_match_at(grid: TileGrid, row: int, col: int, tile_type: int) -> bool:
    """Local lookahead: would ``tile_type`` at ``(row, col)`` complete a run of three?

    Only the two neighbours in each axis direction are inspected, covering
    both a pair behind the cell and the cell landing between two equal tiles.
    """

    for dr, dc in ORTHOGONAL_STEPS:
        if grid.get(row + dr, col + dc) == tile_type and grid.get(row + 2 * dr, col + 2 * dc) == tile_type:
            return True
    if grid.get(row, col - 1) == tile_type and grid.get(row, col + 1) == tile_type:
        return True
    return grid.get(row - 1, col) == tile_type and grid.get(row + 1, col) == tile_type


@contextmanager
def swapped(grid: TileGrid, first: Position, second: Position) -> Iterator[None]:
    """Temporarily exchange two cells, restoring them on exit."""

    a = grid.get(first.row, first.col)
    b = grid.get(second.row, second.col)
    grid.set(first.row, first.col, b)
    grid.set(second.row, second.col, a)
    try:
        yield
    finally:
        grid.set(first.row, first.col, a)
        grid.set(second.row, second.col, b)


def would_swap_create_match(grid: TileGrid, first: Position, second: Position) -> bool:
    with swapped(grid, first, second):
        return bool(find_matches(grid))


def get_possible_moves(grid: TileGrid) -> List[TileMove]:
    """All orthogonal swaps (listed from both ends) that would produce a match."""

    moves: List[TileMove] = []
    for source in grid.occupied_positions():
        for dr, dc in ORTHOGONAL_STEPS:
            target = source.offset(dr, dc)
            if grid.get(target.row, target.col) is None:
                continue
            if would_swap_create_match(grid, source, target):
                moves.append(TileMove(source=source, target=target))
    return moves


def match_score(positions: Sequence[Position], tile_type: int) -> int:
    """Points for clearing one run: 10 per tile plus a bonus for higher tile types."""

    return 10 * len(positions) + tile_type * 2


# ----------------------------------------------------------------------
# Engine
# ----------------------------------------------------------------------
class TileMatchEngine:
    """Owns a tile board and applies match-3 rules to it."""

    def __init__(
        self,
        config: TileGridConfig,
        shape: ShapeSpec = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.config = config
        self.rng = rng or random.Random(config.rng_seed)
        self.grid: TileGrid = MaskedGrid(config.rows, config.cols, resolve_shape(shape))

    @property
    def tile_types(self) -> int:
        return self.config.tile_types

    # ------------------------------------------------------------------
    # Query surface
    # ------------------------------------------------------------------
    def get_cell(self, row: int, col: int) -> Optional[int]:
        return self.grid.get(row, col)

    def is_active(self, row: int, col: int) -> bool:
        return self.grid.is_active(row, col)

    def get_tot_rows(self) -> int:
        return self.grid.rows

    def get_tot_cols(self) -> int:
        return self.grid.cols

    def get_as_array(self) -> List[List[Optional[int]]]:
        return self.grid.get_as_array()

    def set_shape(self, shape: ShapeSpec) -> None:
        self.grid.set_shape(resolve_shape(shape))

    # ------------------------------------------------------------------
    # Generation
    # ------------------------------------------------------------------
    def create_new_tile(self) -> int:
        return self.rng.randint(1, self.tile_types)

    def create_valid_grid(self) -> None:
        """Fill every active cell so that the board starts without matches."""

        attempt = 0
        while True:
            attempt += 1
            self.grid.clear()
            for position in list(self.grid.active_positions()):
                tile = self.create_new_tile()
                tries = 1
                while tries < self.config.max_attempts and would_create_match_at(
                    self.grid, position.row, position.col, tile
                ):
                    tile = self.create_new_tile()
                    tries += 1
                self.grid.set(position.row, position.col, tile)

            leftover = find_matches(self.grid)
            if not leftover:
                break
            LOGGER.warning(
                "Generated board still has %s matched tiles, regenerating (attempt %s)",
                len(leftover),
                attempt,
            )
        LOGGER.info("Created %sx%s tile board after %s attempt(s)", self.grid.rows, self.grid.cols, attempt)
        log_board(LOGGER, self.grid, "Tile board")

    # ------------------------------------------------------------------
    # Matching
    # ------------------------------------------------------------------
    def find_matches(self) -> List[Position]:
        return find_matches(self.grid)

    def find_match_groups(self) -> List[TileMatch]:
        return find_match_groups(self.grid)

    def would_create_match_at(self, row: int, col: int, tile_type: int) -> bool:
        return would_create_match_at(self.grid, row, col, tile_type)

    def swap_tiles(self, row1: int, col1: int, row2: int, col2: int) -> bool:
        """Swap two neighbouring tiles if, and only if, the swap creates a match."""

        if not self.grid.is_active(row1, col1) or not self.grid.is_active(row2, col2):
            return False
        if not are_orthogonally_adjacent(row1, col1, row2, col2):
            return False
        first, second = Position(row1, col1), Position(row2, col2)
        tile1 = self.grid.get(row1, col1)
        tile2 = self.grid.get(row2, col2)
        if tile1 is None or tile2 is None:
            return False
        if not would_swap_create_match(self.grid, first, second):
            LOGGER.debug("Rejected swap %s <-> %s", first, second)
            return False
        self.grid.set(row1, col1, tile2)
        self.grid.set(row2, col2, tile1)
        return True

    def remove_matches(self, positions: Sequence[Position]) -> None:
        for pos in positions:
            self.grid.set(pos.row, pos.col, None)

    def get_possible_moves(self) -> List[TileMove]:
        return get_possible_moves(self.grid)

    def has_possible_moves(self) -> bool:
        return bool(self.get_possible_moves())

    # ------------------------------------------------------------------
    # Gravity and refill
    # ------------------------------------------------------------------
    def move_down_cells_at_col(self, col: int) -> List[ColumnMove]:
        return gravity.compact_column(self.grid, col)

    def get_columns_with_empty_cells(self) -> List[int]:
        return gravity.columns_with_empty_cells(self.grid)

    def apply_gravity(self) -> Dict[int, List[ColumnMove]]:
        return gravity.compact_all(self.grid)

    def fill_empty_top_cells(self) -> List[Position]:
        """Give every empty active cell a fresh tile; returns the filled positions."""

        filled = gravity.empty_top_positions(self.grid)
        for pos in filled:
            self.grid.set(pos.row, pos.col, self.create_new_tile())
        return filled

    def process_cascades(
        self,
        on_cascade: Optional[Callable[[List[Position]], None]] = None,
    ) -> CascadeResult:
        """Resolve matches until the board is stable or the cascade cap is exceeded."""

        result = CascadeResult()
        while True:
            groups = self.find_match_groups()
            if not groups:
                break
            matches = merge_match_positions(groups)
            LOGGER.debug("Found %s matched tiles (cascade %s)", len(matches), result.cascade_count)
            result.total_matches += len(matches)
            result.score += sum(match_score(group.positions, group.tile_type) for group in groups)
            result.removed.append(matches)
            if on_cascade is not None:
                on_cascade(matches)
            self.remove_matches(matches)
            self.apply_gravity()
            self.fill_empty_top_cells()
            result.cascade_count += 1
            if result.cascade_count > self.config.max_cascades:
                LOGGER.warning("Too many cascades (%s), stopping", result.cascade_count)
                result.hit_cascade_cap = True
                break

        result.no_moves_left = not self.has_possible_moves()
        if result.total_matches:
            LOGGER.info(
                "Match processing complete: %s matched tiles over %s cascade(s), %s points",
                result.total_matches,
                result.cascade_count,
                result.score,
            )
        return result

    # ------------------------------------------------------------------
    # Board state
    # ------------------------------------------------------------------
    def is_full(self) -> bool:
        return not self.grid.empty_positions()

    def is_valid(self) -> bool:
        return not self.find_matches()

    def stats(self) -> TileGridStats:
        counts: Dict[int, int] = {}
        for pos in self.grid.occupied_positions():
            tile = self.grid.get(pos.row, pos.col)
            counts[tile] = counts.get(tile, 0) + 1
        return TileGridStats(
            total_tiles=sum(1 for _ in self.grid.active_positions()),
            empty_tiles=len(self.grid.empty_positions()),
            tile_type_counts=counts,
            possible_moves=len(self.get_possible_moves()),
        )
