"""Data models shared by the tile and word engines."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from .constants import MatchDirection, RejectionReason


@dataclass(frozen=True, order=True)
class Position:
    """A ``(row, col)`` coordinate on a grid."""

    row: int
    col: int

    @property
    def key(self) -> str:
        return f"{self.row},{self.col}"

    def offset(self, dr: int, dc: int) -> Position:
        return Position(self.row + dr, self.col + dc)


@dataclass(frozen=True)
class ColumnMove:
    """A single value sliding down a column during compaction."""

    from_row: int
    to_row: int

    @property
    def gaps(self) -> int:
        return self.to_row - self.from_row


@dataclass(frozen=True)
class TileMove:
    """A candidate swap between two orthogonal neighbours."""

    source: Position
    target: Position


@dataclass(frozen=True)
class TileMatch:
    """A run of three or more identical tiles along one axis."""

    tile_type: int
    direction: MatchDirection
    positions: Tuple[Position, ...]

    def __len__(self) -> int:
        return len(self.positions)


@dataclass
class CascadeResult:
    """Outcome of resolving every match left on a tile board."""

    total_matches: int = 0
    cascade_count: int = 0
    no_moves_left: bool = False
    removed: List[List[Position]] = field(default_factory=list)
    hit_cascade_cap: bool = False
    score: int = 0


@dataclass(frozen=True)
class TileMultiplier:
    """Per-position score modifiers (letter and word multipliers)."""

    letter_multiplier: float = 1.0
    word_multiplier: float = 1.0


@dataclass(frozen=True)
class WordPath:
    """A word traced through adjacent cells together with its score."""

    positions: Tuple[Position, ...]
    word: str
    score: int

    def __len__(self) -> int:
        return len(self.positions)


@dataclass(frozen=True)
class WordIntersection:
    """Two found words that share at least one board position."""

    first: WordPath
    second: WordPath
    shared: Tuple[Position, ...]

    @property
    def combined_score(self) -> int:
        return self.first.score + self.second.score


@dataclass
class ValidationResult:
    """Result of validating a word or a path; ``reason`` is set on failure."""

    is_valid: bool
    word: str = ""
    score: int = 0
    reason: Optional[RejectionReason] = None
    message: Optional[str] = None

    @classmethod
    def ok(cls, word: str, score: int) -> ValidationResult:
        return cls(is_valid=True, word=word, score=score)

    @classmethod
    def rejected(cls, reason: RejectionReason, message: str, word: str = "") -> ValidationResult:
        return cls(is_valid=False, word=word, score=0, reason=reason, message=message)


@dataclass
class PartialPathResult:
    """Feedback for a path the player is still drawing."""

    is_valid_path: bool
    current_word: str
    has_valid_prefix: bool
    could_be_valid: bool
    reason: Optional[RejectionReason] = None


@dataclass
class BatchValidation:
    results: List[ValidationResult]
    valid_words: List[str]
    invalid_words: List[str]
    total_score: int


@dataclass
class TileGridStats:
    total_tiles: int
    empty_tiles: int
    tile_type_counts: Dict[int, int]
    possible_moves: int


@dataclass
class LetterGridStats:
    total_letters: int
    empty_tiles: int
    letter_counts: Dict[str, int]
    possible_words: Optional[int] = None
