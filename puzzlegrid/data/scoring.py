"""Letter value tables and word scoring."""

from __future__ import annotations

import math
from typing import Dict, Mapping, Optional, Sequence, Union

from ..core.constants import ALPHABET, SCRABBLE_LETTER_VALUES
from ..core.exceptions import ConfigurationError
from ..core.models import TileMultiplier

LetterValueSystem = Union[str, Mapping[str, float]]


class LetterValueTable:
    """Point value per letter; letters missing from the table are worth 1."""

    def __init__(self, system: LetterValueSystem = "scrabble") -> None:
        if isinstance(system, str):
            if system == "scrabble":
                values: Dict[str, float] = dict(SCRABBLE_LETTER_VALUES)
            elif system == "uniform":
                values = {letter: 1 for letter in ALPHABET}
            else:
                raise ConfigurationError(f"Unknown letter value system: {system!r}")
        else:
            values = {letter.upper(): value for letter, value in system.items()}
        self._values = values

    def value(self, letter: str) -> float:
        return self._values.get(letter.upper()) or 1


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


class ScrabbleScorer:
    """Scores words from letter values with optional per-position multipliers."""

    def __init__(self, values: Union[LetterValueTable, LetterValueSystem, None] = None) -> None:
        if isinstance(values, LetterValueTable):
            self.values = values
        else:
            self.values = LetterValueTable(values if values is not None else "scrabble")

    def score(self, word: str, multipliers: Optional[Sequence[Optional[TileMultiplier]]] = None) -> int:
        total = 0.0
        word_multiplier = 1.0
        for index, letter in enumerate(word):
            value = self.values.value(letter)
            mult = multipliers[index] if multipliers and index < len(multipliers) else None
            if mult is not None:
                value *= mult.letter_multiplier
                word_multiplier *= mult.word_multiplier
            total += value
        return round_half_up(total * word_multiplier)

    def letter_value(self, letter: str) -> float:
        return self.values.value(letter)
