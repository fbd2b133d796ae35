"""Word and path validation for letter grids."""

from __future__ import annotations

from itertools import product
from typing import AbstractSet, FrozenSet, Iterable, List, Optional, Sequence

from ..core.constants import ALPHABET, MAX_WILDCARDS, RejectionReason
from ..core.exceptions import ConfigurationError
from ..core.models import BatchValidation, PartialPathResult, Position, ValidationResult
from ..data.dictionary import WordDictionary
from ..data.scoring import ScrabbleScorer
from ..utils.logger import get_logger
from .paths import LetterCells, build_word_from_path, in_bounds, is_valid_path


LOGGER = get_logger(__name__)

WILDCARD = "?"


def check_length_window(min_length: int, max_length: int) -> None:
    if min_length < 1 or min_length > max_length:
        raise ConfigurationError(
            f"Invalid word length configuration: min={min_length}, max={max_length}"
        )


class WordValidator:
    """Checks traced paths and words against the dictionary and length window."""

    def __init__(
        self,
        dictionary: WordDictionary,
        scorer: ScrabbleScorer,
        min_length: int = 3,
        max_length: int = 8,
        common_words: Optional[AbstractSet[str]] = None,
    ) -> None:
        check_length_window(min_length, max_length)
        self.dictionary = dictionary
        self.scorer = scorer
        self.min_length = min_length
        self.max_length = max_length
        self.common_words: FrozenSet[str] = frozenset(w.upper() for w in (common_words or ()))

    # ------------------------------------------------------------------
    # Paths
    # ------------------------------------------------------------------
    def validate_path(self, path: Sequence[Position], rows: int, cols: int) -> ValidationResult:
        if not path:
            return ValidationResult.rejected(RejectionReason.EMPTY_PATH, "Empty path")
        for pos in path:
            if not in_bounds(pos, rows, cols):
                return ValidationResult.rejected(
                    RejectionReason.OUT_OF_BOUNDS,
                    f"Position out of bounds: ({pos.row},{pos.col})",
                )
        if not is_valid_path(path):
            return ValidationResult.rejected(
                RejectionReason.DISCONNECTED_PATH,
                "Invalid path - positions must be connected and not repeat",
            )
        return ValidationResult(is_valid=True)

    def _check_path(
        self,
        cells: LetterCells,
        path: Sequence[Position],
        skip: AbstractSet[int] = frozenset(),
    ) -> ValidationResult:
        rows = len(cells)
        cols = len(cells[0]) if rows else 0
        result = self.validate_path(path, rows, cols)
        if not result.is_valid:
            return result
        for index, pos in enumerate(path):
            if index not in skip and not cells[pos.row][pos.col]:
                return ValidationResult.rejected(
                    RejectionReason.EMPTY_CELL,
                    f"No letter at ({pos.row},{pos.col})",
                )
        return result

    def validate_word_path(self, cells: LetterCells, path: Sequence[Position]) -> ValidationResult:
        result = self._check_path(cells, path)
        if not result.is_valid:
            return result
        return self.validate_word(build_word_from_path(cells, path))

    def validate_word_path_with_wildcards(
        self,
        cells: LetterCells,
        path: Sequence[Position],
        wildcard_indices: Iterable[int],
    ) -> ValidationResult:
        """Resolve up to two wildcard slots in ``path`` to the best dictionary word."""

        wildcards = set(wildcard_indices)
        result = self._check_path(cells, path, skip=wildcards)
        if not result.is_valid:
            return result
        if any(index < 0 or index >= len(path) for index in wildcards):
            return ValidationResult.rejected(
                RejectionReason.INVALID_WILDCARD,
                f"Wildcard index outside path of length {len(path)}",
            )
        if len(wildcards) > MAX_WILDCARDS:
            LOGGER.warning("Too many wildcards (%s > %s)", len(wildcards), MAX_WILDCARDS)
            return ValidationResult.rejected(
                RejectionReason.TOO_MANY_WILDCARDS,
                f"Too many wildcards (max {MAX_WILDCARDS})",
            )

        pattern = "".join(
            WILDCARD if index in wildcards else cells[pos.row][pos.col].upper()
            for index, pos in enumerate(path)
        )
        length_failure = self._check_length(pattern)
        if length_failure is not None:
            return length_failure

        candidates = self.find_valid_words_for_pattern(pattern)
        if not candidates:
            return ValidationResult.rejected(
                RejectionReason.NO_WILDCARD_MATCH,
                "No valid words found for pattern",
                word=pattern,
            )
        best = self.select_best_word(candidates)
        return ValidationResult.ok(best, self.scorer.score(best))

    def find_valid_words_for_pattern(self, pattern: str) -> List[str]:
        """Dictionary words obtained by substituting every letter at each ``?``."""

        slots = [index for index, ch in enumerate(pattern) if ch == WILDCARD]
        if not slots:
            return [pattern] if self.dictionary.contains(pattern) else []
        if len(slots) > MAX_WILDCARDS:
            return []

        letters = list(pattern)
        found: List[str] = []
        for combo in product(ALPHABET, repeat=len(slots)):
            for index, letter in zip(slots, combo):
                letters[index] = letter
            candidate = "".join(letters)
            if self.dictionary.contains(candidate):
                found.append(candidate)
        return found

    def select_best_word(self, words: Sequence[str]) -> str:
        """Prefer a common word; otherwise the shortest, earliest candidate."""

        for word in words:
            if word in self.common_words:
                LOGGER.debug("Wildcard resolved to common word %s", word)
                return word
        return min(words, key=len)

    # ------------------------------------------------------------------
    # Words
    # ------------------------------------------------------------------
    def _check_length(self, word: str) -> Optional[ValidationResult]:
        if len(word) < self.min_length:
            return ValidationResult.rejected(
                RejectionReason.TOO_SHORT,
                f"Word too short (minimum {self.min_length} letters)",
                word=word,
            )
        if len(word) > self.max_length:
            return ValidationResult.rejected(
                RejectionReason.TOO_LONG,
                f"Word too long (maximum {self.max_length} letters)",
                word=word,
            )
        return None

    def validate_word(self, word: str) -> ValidationResult:
        normalized = word.strip().upper()
        length_failure = self._check_length(normalized)
        if length_failure is not None:
            return length_failure
        if not self.dictionary.contains(normalized):
            return ValidationResult.rejected(RejectionReason.NOT_A_WORD, "Not a valid word", word=normalized)
        return ValidationResult.ok(normalized, self.scorer.score(normalized))

    def validate_words(self, words: Iterable[str]) -> BatchValidation:
        results: List[ValidationResult] = []
        valid: List[str] = []
        invalid: List[str] = []
        total = 0
        for word in words:
            result = self.validate_word(word)
            results.append(result)
            if result.is_valid:
                valid.append(result.word)
                total += result.score
            else:
                invalid.append(word)
        return BatchValidation(results=results, valid_words=valid, invalid_words=invalid, total_score=total)

    def has_valid_prefix(self, prefix: str) -> bool:
        if not prefix:
            return True
        return self.dictionary.has_prefix(prefix)

    def validate_partial_path(self, cells: LetterCells, path: Sequence[Position]) -> PartialPathResult:
        if not path:
            return PartialPathResult(
                is_valid_path=False,
                current_word="",
                has_valid_prefix=True,
                could_be_valid=True,
                reason=RejectionReason.EMPTY_PATH,
            )
        result = self._check_path(cells, path)
        if not result.is_valid:
            return PartialPathResult(
                is_valid_path=False,
                current_word="",
                has_valid_prefix=False,
                could_be_valid=False,
                reason=result.reason,
            )
        current = build_word_from_path(cells, path)
        has_prefix = self.has_valid_prefix(current)
        return PartialPathResult(
            is_valid_path=True,
            current_word=current,
            has_valid_prefix=has_prefix,
            could_be_valid=has_prefix and len(path) <= self.max_length,
            reason=None if has_prefix else RejectionReason.NO_PREFIX,
        )
