"""Word list with trie-backed prefix search."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterable, List, Optional, Set

from ..utils.logger import get_logger
from .normalization import normalize_word
from .trie import Trie


LOGGER = get_logger(__name__)

BASIC_ENGLISH_WORDS = (
    # 3-letter words
    "THE", "AND", "FOR", "ARE", "BUT", "NOT", "YOU", "ALL", "CAN", "HER", "WAS", "ONE", "OUR",
    "HAD", "OUT", "DAY", "GET", "USE", "MAN", "NEW", "NOW", "OLD", "SEE", "HIM", "TWO", "HOW",
    "ITS", "WHO", "OIL", "SIT", "SET", "RUN", "EAT", "FAR", "SEA", "EYE", "BAD", "BIG", "BOX",
    "YES", "YET", "CAR", "JOB", "CAT", "DOG", "TEN", "TAN", "NET", "ATE", "TEA", "EAR", "ERA",
    # 4-letter words
    "THAT", "WITH", "HAVE", "THIS", "WILL", "YOUR", "FROM", "THEY", "KNOW", "WANT", "BEEN",
    "GOOD", "MUCH", "SOME", "TIME", "VERY", "WHEN", "COME", "HERE", "JUST", "LIKE", "LONG",
    "MAKE", "MANY", "OVER", "SUCH", "TAKE", "THAN", "THEM", "WELL", "WERE", "WORK", "YEAR",
    "BACK", "CALL", "CAME", "EACH", "EVEN", "FIND", "GIVE", "HAND", "HIGH", "KEEP", "LAST",
    "LEFT", "LIFE", "LIVE", "LOOK", "MADE", "MOST", "MOVE", "MUST", "NAME", "NEED", "NEXT",
    "OPEN", "PART", "PLAY", "SAID", "SAME", "SEEM", "SHOW", "SIDE", "TELL", "TURN", "USED",
    "WAYS", "WEEK", "WENT", "WHAT", "WORD", "CATS", "RATE", "TEAR", "SEAT", "EAST", "STAR",
    # 5-letter words
    "ABOUT", "AFTER", "AGAIN", "ASKED", "BEING", "BELOW", "COULD", "EVERY", "FIRST", "FOUND",
    "GREAT", "GROUP", "HOUSE", "LARGE", "PLACE", "RIGHT", "SHALL", "SMALL", "STATE", "STILL",
    "THOSE", "THREE", "UNDER", "WATER", "WHERE", "WHILE", "WORLD", "WOULD", "YOUNG",
)


@dataclass
class DictionaryStats:
    total_words: int = 0
    average_length: float = 0.0
    length_distribution: Dict[int, int] = field(default_factory=dict)
    shortest_word: Optional[str] = None
    longest_word: Optional[str] = None


class WordDictionary:
    """Normalized word set plus a trie over the same words.

    Input is uppercased; anything that is not purely alphabetic is dropped
    without error. The set answers membership, the trie answers prefixes.
    """

    def __init__(self, words: Iterable[str] = ()) -> None:
        self._trie = Trie()
        self._words: Set[str] = set()
        added = self.add_words(words)
        if added:
            LOGGER.info("Loaded %s words into dictionary", f"{added:,}")

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------
    @classmethod
    def basic_english(cls) -> WordDictionary:
        return cls(BASIC_ENGLISH_WORDS)

    def add_word(self, word: str) -> bool:
        normalized = normalize_word(word)
        if normalized is None or normalized in self._words:
            return False
        self._trie.insert(normalized)
        self._words.add(normalized)
        return True

    def add_words(self, words: Iterable[str]) -> int:
        return sum(1 for word in words if self.add_word(word))

    def clear(self) -> None:
        self._trie = Trie()
        self._words.clear()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def contains(self, word: str) -> bool:
        normalized = normalize_word(word)
        return normalized is not None and self._trie.search(normalized)

    def __contains__(self, word: object) -> bool:
        return isinstance(word, str) and self.contains(word)

    def has_prefix(self, prefix: str) -> bool:
        normalized = normalize_word(prefix)
        return normalized is not None and self._trie.starts_with(normalized)

    def words_with_prefix(self, prefix: str, max_results: int = 50) -> List[str]:
        normalized = normalize_word(prefix)
        if normalized is None:
            return []
        return self._trie.words_with_prefix(normalized, limit=max_results)

    def words_by_length(self, min_length: int, max_length: int) -> List[str]:
        return sorted(word for word in self._words if min_length <= len(word) <= max_length)

    def all_words(self) -> List[str]:
        return sorted(self._words)

    def word_set(self) -> FrozenSet[str]:
        return frozenset(self._words)

    @property
    def trie(self) -> Trie:
        return self._trie

    def size(self) -> int:
        return len(self._words)

    def __len__(self) -> int:
        return len(self._words)

    def is_empty(self) -> bool:
        return not self._words

    def stats(self) -> DictionaryStats:
        if not self._words:
            return DictionaryStats()
        ordered = sorted(self._words)
        lengths = Counter(len(word) for word in ordered)
        return DictionaryStats(
            total_words=len(ordered),
            average_length=sum(len(word) for word in ordered) / len(ordered),
            length_distribution=dict(sorted(lengths.items())),
            shortest_word=min(ordered, key=len),
            longest_word=max(ordered, key=len),
        )
