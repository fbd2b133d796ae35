"""Weighted random letter sampling."""

from __future__ import annotations

import bisect
import random
from dataclasses import dataclass
from typing import Iterable, List, Mapping, Optional, Tuple

from ..core.constants import MAX_EXCLUSION_ATTEMPTS
from ..core.exceptions import ConfigurationError, LetterGenerationError
from ..utils.logger import get_logger
from .normalization import normalize_letter


LOGGER = get_logger(__name__)


@dataclass
class LetterGeneratorStats:
    total_letters: int
    total_weight: float
    most_common: str
    least_common: str
    average_weight: float


class LetterGenerator:
    """Draws letters according to a ``{letter: weight}`` table.

    Cumulative weights are computed once. A draw picks the first letter whose
    cumulative weight is greater than or equal to a uniform value in
    ``[0, total)``; when two cumulative values compare equal the earlier
    letter wins.
    """

    def __init__(self, frequency: Mapping[str, float], rng: Optional[random.Random] = None) -> None:
        if not frequency:
            raise ConfigurationError("Letter frequency map cannot be empty")
        self.rng = rng or random.Random()
        self._letters: List[str] = []
        self._cumulative: List[float] = []
        total = 0.0
        for key, weight in frequency.items():
            letter = normalize_letter(key)
            if letter is None:
                raise ConfigurationError(f"Frequency key must be a single letter: {key!r}")
            if letter in self._letters:
                raise ConfigurationError(f"Duplicate letter in frequency map: {letter}")
            if weight <= 0:
                raise ConfigurationError(f"Letter frequency must be positive: {letter}")
            total += weight
            self._letters.append(letter)
            self._cumulative.append(total)
        self.total_weight = total

    # ------------------------------------------------------------------
    # Sampling
    # ------------------------------------------------------------------
    def generate_letter(self) -> str:
        draw = self.rng.random() * self.total_weight
        index = bisect.bisect_left(self._cumulative, draw)
        # Guards float round-off at the top of the range.
        return self._letters[min(index, len(self._letters) - 1)]

    def generate_letters(self, count: int) -> List[str]:
        return [self.generate_letter() for _ in range(max(0, count))]

    def generate_unique_letters(self, count: int) -> List[str]:
        if count <= 0:
            return []
        if count > len(self._letters):
            raise LetterGenerationError(
                f"Cannot generate more unique letters than available: {count} > {len(self._letters)}"
            )
        result: List[str] = []
        used = set()
        while len(result) < count:
            letter = self.generate_letter()
            if letter not in used:
                used.add(letter)
                result.append(letter)
        return result

    def generate_letter_excluding(self, excluded: Iterable[str]) -> str:
        """Draw a letter outside ``excluded``, degrading to table order after repeated misses."""

        excluded_set = {letter.upper() for letter in excluded}
        if all(letter in excluded_set for letter in self._letters):
            return self.generate_letter()

        for _ in range(MAX_EXCLUSION_ATTEMPTS):
            letter = self.generate_letter()
            if letter not in excluded_set:
                return letter

        LOGGER.warning("Exclusion sampling exhausted %s attempts; using table order", MAX_EXCLUSION_ATTEMPTS)
        return next(letter for letter in self._letters if letter not in excluded_set)

    def weighted_sample(self, sample_size: int, allow_duplicates: bool = True) -> List[str]:
        if allow_duplicates:
            return self.generate_letters(sample_size)
        return self.generate_unique_letters(sample_size)

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------
    def probability(self, letter: str) -> float:
        try:
            index = self._letters.index(letter.upper())
        except ValueError:
            return 0.0
        previous = self._cumulative[index - 1] if index > 0 else 0.0
        return (self._cumulative[index] - previous) / self.total_weight

    def available_letters(self) -> List[str]:
        return list(self._letters)

    def letters_by_frequency(self) -> List[Tuple[str, float]]:
        pairs = [(letter, self.probability(letter)) for letter in self._letters]
        return sorted(pairs, key=lambda item: item[1], reverse=True)

    def stats(self) -> LetterGeneratorStats:
        ranked = self.letters_by_frequency()
        return LetterGeneratorStats(
            total_letters=len(self._letters),
            total_weight=self.total_weight,
            most_common=ranked[0][0],
            least_common=ranked[-1][0],
            average_weight=self.total_weight / len(self._letters),
        )
