"""Word-search ("boggle" style) board built on a masked letter grid."""

from __future__ import annotations

import random
import time
from collections import Counter
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import AbstractSet, Callable, Dict, Iterable, Iterator, List, Mapping, Optional, Sequence, Union

from ..core.constants import (
    DEFAULT_LETTER_FREQUENCY,
    DEFAULT_MAX_WORD_LENGTH,
    DEFAULT_MIN_WORD_LENGTH,
    DEFAULT_RARE_LETTERS,
    EMPTY_CELL_SYMBOL,
    RejectionReason,
)
from ..core.exceptions import ConfigurationError
from ..core.models import ColumnMove, LetterGridStats, Position, ValidationResult, WordIntersection, WordPath
from ..data.dictionary import WordDictionary
from ..data.grid_cache import CacheConfig, GridCache
from ..data.letters import LetterGenerator
from ..data.normalization import normalize_letter
from ..data.scoring import LetterValueSystem, ScrabbleScorer
from ..utils.logger import get_logger, log_board
from . import gravity
from .grid import MaskedGrid
from .path_finder import (
    PathFinderOptions,
    WordPathFinder,
    filter_by_length,
    filter_longest,
    filter_rare_letters,
    pair_intersections,
)
from .shapes import ShapeFunction, resolve_shape
from .validator import WordValidator, check_length_window


LOGGER = get_logger(__name__)

LetterGrid = MaskedGrid[str]
ShapeSpec = Union[str, ShapeFunction, None]

# Symbols accepted as "no letter" by ``load_letters``.
BLANK_SYMBOLS = frozenset({"", ".", " ", EMPTY_CELL_SYMBOL})


@dataclass
class WordGridConfig:
    """Configuration values driving a letter board."""

    rows: int
    cols: int
    min_word_length: int = DEFAULT_MIN_WORD_LENGTH
    max_word_length: int = DEFAULT_MAX_WORD_LENGTH
    letter_frequency: Mapping[str, float] = field(default_factory=lambda: dict(DEFAULT_LETTER_FREQUENCY))
    common_words: AbstractSet[str] = field(default_factory=frozenset)
    letter_values: LetterValueSystem = "scrabble"
    cache: CacheConfig = field(default_factory=CacheConfig)
    max_words_per_position: int = 5
    prune_with_prefixes: bool = True
    rng_seed: Optional[int] = None

    def __post_init__(self) -> None:
        if self.rows <= 0 or self.cols <= 0:
            raise ConfigurationError(f"Grid dimensions must be positive, got {self.rows}x{self.cols}")
        check_length_window(self.min_word_length, self.max_word_length)
        if not self.letter_frequency:
            raise ConfigurationError("Letter frequency map cannot be empty")
        if self.max_words_per_position < 1:
            raise ConfigurationError("max_words_per_position must be at least 1")
        self.common_words = frozenset(word.upper() for word in self.common_words)


class WordSearchEngine:
    """Owns a letter board, its dictionary and the cached word search over it.

    Every mutation invalidates the result cache. Inside ``batch()`` the
    invalidation happens once, when the block exits.
    """

    def __init__(
        self,
        config: WordGridConfig,
        words: Union[WordDictionary, Iterable[str]] = (),
        shape: ShapeSpec = None,
        rng: Optional[random.Random] = None,
        clock: Optional[Callable[[], float]] = None,
    ) -> None:
        self.config = config
        self.rng = rng or random.Random(config.rng_seed)
        self.dictionary = words if isinstance(words, WordDictionary) else WordDictionary(words)
        self.letters = LetterGenerator(config.letter_frequency, rng=self.rng)
        self.scorer = ScrabbleScorer(config.letter_values)
        self.validator = WordValidator(
            self.dictionary,
            self.scorer,
            config.min_word_length,
            config.max_word_length,
            config.common_words,
        )
        self.path_finder = WordPathFinder(config.min_word_length, config.max_word_length)
        self.cache = GridCache(config.cache, clock or time.monotonic)
        self.grid: LetterGrid = MaskedGrid(config.rows, config.cols, resolve_shape(shape))
        self._batch_depth = 0

    # ------------------------------------------------------------------
    # Cache bookkeeping
    # ------------------------------------------------------------------
    def _changed(self) -> None:
        if self._batch_depth == 0:
            self.cache.invalidate()

    @contextmanager
    def batch(self) -> Iterator[WordSearchEngine]:
        """Group several mutations; the cache is invalidated once on exit."""

        self._batch_depth += 1
        try:
            yield self
        finally:
            self._batch_depth -= 1
            self._changed()

    def _prefix_check(self) -> Optional[Callable[[str], bool]]:
        return self.dictionary.has_prefix if self.config.prune_with_prefixes else None

    # ------------------------------------------------------------------
    # Query surface
    # ------------------------------------------------------------------
    def get_cell(self, row: int, col: int) -> Optional[str]:
        return self.grid.get(row, col)

    def is_active(self, row: int, col: int) -> bool:
        return self.grid.is_active(row, col)

    def get_tot_rows(self) -> int:
        return self.grid.rows

    def get_tot_cols(self) -> int:
        return self.grid.cols

    def get_as_array(self) -> List[List[Optional[str]]]:
        return self.grid.get_as_array()

    def get_columns_with_empty_cells(self) -> List[int]:
        return gravity.columns_with_empty_cells(self.grid)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------
    def set_shape(self, shape: ShapeSpec) -> None:
        self.grid.set_shape(resolve_shape(shape))
        self.cache.clear()

    def create_new_cell(self) -> str:
        return self.letters.generate_letter()

    def fill_with_random_letters(self) -> None:
        for pos in list(self.grid.active_positions()):
            self.grid.set(pos.row, pos.col, self.create_new_cell())
        LOGGER.info("Filled %sx%s letter board", self.grid.rows, self.grid.cols)
        log_board(LOGGER, self.grid, "Letter board")
        self._changed()

    def fill_empty_cells(self) -> List[Position]:
        filled = self.grid.empty_positions()
        for pos in filled:
            self.grid.set(pos.row, pos.col, self.create_new_cell())
        self._changed()
        return filled

    def clear(self) -> None:
        self.grid.clear()
        self._changed()

    def set_letter(self, row: int, col: int, letter: Optional[str]) -> bool:
        """Place ``letter`` (or clear with ``None``); False for inactive cells or non-letters."""

        if not self.grid.is_active(row, col):
            return False
        value = None
        if letter is not None:
            value = normalize_letter(letter)
            if value is None:
                return False
        self.grid.set(row, col, value)
        self._changed()
        return True

    def load_letters(self, rows: Sequence[Union[str, Sequence[Optional[str]]]]) -> None:
        """Replace the board with a layout such as ``["CA", "TS"]``.

        Blank cells may be written as ``.``, ``_``, a space or ``None``.
        """

        layout: List[List[Optional[str]]] = []
        for line in rows:
            cells: List[Optional[str]] = []
            for symbol in line:
                if symbol is None or symbol in BLANK_SYMBOLS:
                    cells.append(None)
                    continue
                letter = normalize_letter(symbol)
                if letter is None:
                    raise ConfigurationError(f"Invalid letter in layout: {symbol!r}")
                cells.append(letter)
            layout.append(cells)
        self.grid.load_rows(layout)
        self._changed()

    def remove_letters(self, positions: Iterable[Position]) -> None:
        for pos in positions:
            self.grid.set(pos.row, pos.col, None)
        self._changed()

    def swap_letters(self, row1: int, col1: int, row2: int, col2: int) -> bool:
        if not self.grid.is_active(row1, col1) or not self.grid.is_active(row2, col2):
            return False
        first = self.grid.get(row1, col1)
        self.grid.set(row1, col1, self.grid.get(row2, col2))
        self.grid.set(row2, col2, first)
        self._changed()
        return True

    def move_down_cells_at_col(self, col: int) -> List[ColumnMove]:
        moves = gravity.compact_column(self.grid, col)
        self._changed()
        return moves

    def fill_empty_top_cells(self) -> List[Position]:
        """Compact every column, then refill the cells left empty at the top."""

        with self.batch():
            gravity.compact_all(self.grid)
            filled = gravity.empty_top_positions(self.grid)
            for pos in filled:
                self.grid.set(pos.row, pos.col, self.create_new_cell())
        return filled

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------
    def _inactive_cell(self, path: Sequence[Position]) -> Optional[ValidationResult]:
        # Letter cells cannot tell a masked-out cell from a blank one, so the
        # shape is checked here before any wildcard slot is skipped.
        for pos in path:
            if self.grid.bounds.contains(pos.row, pos.col) and not self.grid.is_active(pos.row, pos.col):
                return ValidationResult.rejected(
                    RejectionReason.INACTIVE_CELL,
                    f"Position ({pos.row},{pos.col}) is not part of the board",
                )
        return None

    def validate_word_path(self, path: Sequence[Position]) -> ValidationResult:
        failure = self._inactive_cell(path)
        if failure is not None:
            return failure
        return self.validator.validate_word_path(self.get_as_array(), path)

    def validate_word_path_with_wildcards(
        self, path: Sequence[Position], wildcard_indices: Iterable[int]
    ) -> ValidationResult:
        failure = self._inactive_cell(path)
        if failure is not None:
            return failure
        return self.validator.validate_word_path_with_wildcards(self.get_as_array(), path, wildcard_indices)

    # ------------------------------------------------------------------
    # Search
    # ------------------------------------------------------------------
    def find_words_from_position(
        self, row: int, col: int, options: Optional[PathFinderOptions] = None
    ) -> List[WordPath]:
        """Words starting at ``(row, col)``; default-option results are cached per position."""

        cells = self.get_as_array()
        pos = Position(row, col)
        if options is None:
            cached = self.cache.get_position_words(pos, cells)
            if cached is not None:
                LOGGER.debug("Cache hit for position %s", pos.key)
                return list(cached)

        found = self.path_finder.find_words_from_position(
            cells,
            pos,
            self.dictionary.word_set(),
            self.scorer,
            options,
            self._prefix_check(),
        )
        if options is None:
            self.cache.set_position_words(pos, found, cells)
        return list(found)

    def find_all_possible_words(self) -> List[WordPath]:
        cells = self.get_as_array()
        cached = self.cache.get_all_words(cells)
        if cached is not None:
            LOGGER.debug("Cache hit for all words (%s)", len(cached))
            return list(cached)

        result = self.path_finder.find_all_possible_words(
            cells,
            self.dictionary.word_set(),
            self.scorer,
            per_position_limit=self.config.max_words_per_position,
            prefix_check=self._prefix_check(),
        )
        self.cache.set_all_words(result, cells)
        return list(result)

    def find_longest_words(self, max_results: int = 5) -> List[WordPath]:
        return filter_longest(self.find_all_possible_words(), max_results)

    def find_rare_letter_words(
        self, rare_letters: Iterable[str] = DEFAULT_RARE_LETTERS, max_results: int = 10
    ) -> List[WordPath]:
        return filter_rare_letters(self.find_all_possible_words(), rare_letters, max_results)

    def find_intersecting_words(self, max_results: int = 10) -> List[WordIntersection]:
        return pair_intersections(self.find_all_possible_words(), max_results)

    def find_paths_by_length(self, target_length: int, max_results: int = 20) -> List[WordPath]:
        if not self.config.min_word_length <= target_length <= self.config.max_word_length:
            return []
        return filter_by_length(self.find_all_possible_words(), target_length, max_results)

    def has_valid_words_from_position(self, row: int, col: int) -> bool:
        return self.path_finder.has_valid_words_from_position(
            self.get_as_array(),
            Position(row, col),
            self.dictionary.word_set(),
            self._prefix_check(),
        )

    def stats(self, include_words: bool = False) -> LetterGridStats:
        counts: Dict[str, int] = Counter(
            self.grid.get(pos.row, pos.col) for pos in self.grid.occupied_positions()
        )
        return LetterGridStats(
            total_letters=sum(counts.values()),
            empty_tiles=len(self.grid.empty_positions()),
            letter_counts=dict(counts),
            possible_words=len(self.find_all_possible_words()) if include_words else None,
        )
