"""Shared constants and enumerations for the puzzle grid engines."""

from __future__ import annotations

import string
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Tuple


class MatchDirection(str, Enum):
    """Axis along which a tile run was found."""

    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"


class CacheStrategyName(str, Enum):
    """Eviction strategies supported by the grid cache."""

    MEMORY = "memory"
    LRU = "lru"


class RejectionReason(str, Enum):
    """Why a word path or word was refused."""

    EMPTY_PATH = "EMPTY_PATH"
    OUT_OF_BOUNDS = "OUT_OF_BOUNDS"
    DISCONNECTED_PATH = "DISCONNECTED_PATH"
    EMPTY_CELL = "EMPTY_CELL"
    INACTIVE_CELL = "INACTIVE_CELL"
    TOO_SHORT = "TOO_SHORT"
    TOO_LONG = "TOO_LONG"
    NOT_A_WORD = "NOT_A_WORD"
    INVALID_WILDCARD = "INVALID_WILDCARD"
    TOO_MANY_WILDCARDS = "TOO_MANY_WILDCARDS"
    NO_WILDCARD_MATCH = "NO_WILDCARD_MATCH"
    NO_PREFIX = "NO_PREFIX"


ORTHOGONAL_STEPS: Tuple[Tuple[int, int], ...] = ((-1, 0), (1, 0), (0, -1), (0, 1))
# Row-major sweep of the 3x3 neighbourhood, centre excluded.
ADJACENT_STEPS: Tuple[Tuple[int, int], ...] = tuple(
    (dr, dc) for dr in (-1, 0, 1) for dc in (-1, 0, 1) if (dr, dc) != (0, 0)
)

ALPHABET = string.ascii_uppercase
EMPTY_CELL_SYMBOL = "_"

MIN_TILE_TYPES = 3
MAX_TILE_TYPES = 8
DEFAULT_TILE_TYPES = 5
MAX_GENERATION_ATTEMPTS = 50
MAX_CASCADES = 10
MAX_WILDCARDS = 2
MAX_EXCLUSION_ATTEMPTS = 50

DEFAULT_MIN_WORD_LENGTH = 3
DEFAULT_MAX_WORD_LENGTH = 8
DEFAULT_RARE_LETTERS: Tuple[str, ...] = ("Q", "X", "Z", "J")

DEFAULT_LETTER_FREQUENCY: Dict[str, float] = {
    "E": 12.7, "T": 9.1, "A": 8.2, "O": 7.5, "I": 7.0, "N": 6.7, "S": 6.3,
    "H": 6.1, "R": 6.0, "D": 4.3, "L": 4.0, "C": 2.8, "U": 2.8, "M": 2.4,
    "W": 2.4, "F": 2.2, "G": 2.0, "Y": 2.0, "P": 1.9, "B": 1.3, "V": 1.0,
    "K": 0.8, "J": 0.15, "X": 0.15, "Q": 0.10, "Z": 0.07,
}

SCRABBLE_LETTER_VALUES: Dict[str, int] = {
    "A": 1, "E": 1, "I": 1, "O": 1, "U": 1, "L": 1, "N": 1, "R": 1, "S": 1, "T": 1,
    "D": 2, "G": 2,
    "B": 3, "C": 3, "M": 3, "P": 3,
    "F": 4, "H": 4, "V": 4, "W": 4, "Y": 4,
    "K": 5,
    "J": 8, "X": 8,
    "Q": 10, "Z": 10,
}


@dataclass(frozen=True)
class Bounds:
    """Simple rectangle bounds helper."""

    rows: int
    cols: int

    def contains(self, row: int, col: int) -> bool:
        return 0 <= row < self.rows and 0 <= col < self.cols
