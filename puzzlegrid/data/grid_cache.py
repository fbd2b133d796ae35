"""Hash-keyed memoization of word-search results.

Results are only trusted while the grid they were computed from is
unchanged. ``GridCache`` remembers the structural hash of that grid: a read
is served only when the caller's current grid hashes to the same string, and
``invalidate`` forgets the hash entirely so nothing is served until fresh
results are stored.

Eviction is pluggable:

- ``MemoryCacheStrategy`` is a bounded map that drops the oldest inserted
  entry when full.
- ``LRUCacheStrategy`` reorders on read and drops the least recently used
  entry.

Both check the time-to-live lazily on read against an injected clock, so the
cache never runs a timer of its own.
"""

from __future__ import annotations

import time
from abc import ABC, abstractmethod
from collections import OrderedDict
from dataclasses import dataclass
from typing import Callable, Generic, List, Optional, Sequence, TypeVar

from ..core.constants import EMPTY_CELL_SYMBOL, CacheStrategyName
from ..core.exceptions import ConfigurationError
from ..core.models import Position, WordPath
from ..utils.logger import get_logger


LOGGER = get_logger(__name__)

V = TypeVar("V")
Clock = Callable[[], float]
Cells = Sequence[Sequence[object]]


@dataclass
class CacheConfig:
    """Options for the result cache."""

    strategy: CacheStrategyName = CacheStrategyName.MEMORY
    max_size: int = 100
    ttl_seconds: float = 300.0

    def __post_init__(self) -> None:
        try:
            self.strategy = CacheStrategyName(self.strategy)
        except ValueError:
            raise ConfigurationError(f"Unknown cache strategy: {self.strategy!r}") from None
        if self.max_size < 1:
            raise ConfigurationError("Cache max_size must be at least 1")
        if self.ttl_seconds <= 0:
            raise ConfigurationError("Cache ttl_seconds must be positive")


@dataclass
class CacheEntry(Generic[V]):
    value: V
    timestamp: float


@dataclass
class CacheStats:
    grid_hash: str
    position_cache_size: int
    has_all_words_cache: bool


class CacheStrategy(ABC, Generic[V]):
    """Bounded key/value store with lazy TTL expiry."""

    def __init__(self, config: CacheConfig, clock: Clock = time.monotonic) -> None:
        self.max_size = config.max_size
        self.ttl_seconds = config.ttl_seconds
        self.clock = clock
        self._entries: "OrderedDict[str, CacheEntry[V]]" = OrderedDict()

    def _live_entry(self, key: str) -> Optional[CacheEntry[V]]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self.clock() - entry.timestamp > self.ttl_seconds:
            del self._entries[key]
            return None
        return entry

    def _evict_oldest(self) -> None:
        evicted, _ = self._entries.popitem(last=False)
        LOGGER.debug("Evicted cache entry %s", evicted)

    @abstractmethod
    def get(self, key: str) -> Optional[V]:
        ...

    @abstractmethod
    def set(self, key: str, value: V) -> None:
        ...

    def clear(self) -> None:
        self._entries.clear()

    def size(self) -> int:
        return len(self._entries)

    def __len__(self) -> int:
        return self.size()

    def __contains__(self, key: object) -> bool:
        return key in self._entries


class MemoryCacheStrategy(CacheStrategy[V]):
    """Insertion-ordered map; reads do not affect eviction order."""

    def get(self, key: str) -> Optional[V]:
        entry = self._live_entry(key)
        return entry.value if entry is not None else None

    def set(self, key: str, value: V) -> None:
        if key not in self._entries and len(self._entries) >= self.max_size:
            self._evict_oldest()
        self._entries[key] = CacheEntry(value=value, timestamp=self.clock())


class LRUCacheStrategy(CacheStrategy[V]):
    """Least-recently-used eviction; a read marks the entry most recent."""

    def get(self, key: str) -> Optional[V]:
        entry = self._live_entry(key)
        if entry is None:
            return None
        self._entries.move_to_end(key)
        return entry.value

    def set(self, key: str, value: V) -> None:
        self._entries.pop(key, None)
        if len(self._entries) >= self.max_size:
            self._evict_oldest()
        self._entries[key] = CacheEntry(value=value, timestamp=self.clock())


def create_strategy(config: CacheConfig, clock: Clock = time.monotonic) -> CacheStrategy:
    if config.strategy == CacheStrategyName.LRU:
        return LRUCacheStrategy(config, clock)
    return MemoryCacheStrategy(config, clock)


class GridCache:
    """Per-position and whole-board word caches tied to one grid hash."""

    def __init__(self, config: Optional[CacheConfig] = None, clock: Clock = time.monotonic) -> None:
        self.config = config or CacheConfig()
        self._strategy: CacheStrategy[List[WordPath]] = create_strategy(self.config, clock)
        self._grid_hash = ""
        self._all_words: Optional[List[WordPath]] = None

    @staticmethod
    def generate_grid_hash(cells: Cells) -> str:
        """Row-major concatenation of cell values, ``_`` standing in for empty cells."""

        return "".join(
            EMPTY_CELL_SYMBOL if value is None else str(value)
            for row in cells
            for value in row
        )

    @property
    def grid_hash(self) -> str:
        return self._grid_hash

    def is_cache_valid(self, cells: Cells) -> bool:
        return self._grid_hash != "" and self._grid_hash == self.generate_grid_hash(cells)

    def invalidate(self) -> None:
        """Drop every cached result; nothing is valid until results are stored again."""

        self._all_words = None
        self._strategy.clear()
        self._grid_hash = ""

    clear = invalidate

    def _adopt(self, cells: Cells) -> None:
        current = self.generate_grid_hash(cells)
        if current != self._grid_hash:
            self._all_words = None
            self._strategy.clear()
            self._grid_hash = current

    # ------------------------------------------------------------------
    # Position results
    # ------------------------------------------------------------------
    @staticmethod
    def position_key(pos: Position) -> str:
        return pos.key

    def get_position_words(self, pos: Position, cells: Cells) -> Optional[List[WordPath]]:
        if not self.is_cache_valid(cells):
            return None
        return self._strategy.get(self.position_key(pos))

    def set_position_words(self, pos: Position, words: List[WordPath], cells: Cells) -> None:
        self._adopt(cells)
        self._strategy.set(self.position_key(pos), words)

    # ------------------------------------------------------------------
    # Whole-board results
    # ------------------------------------------------------------------
    def get_all_words(self, cells: Cells) -> Optional[List[WordPath]]:
        if not self.is_cache_valid(cells):
            return None
        return self._all_words

    def set_all_words(self, words: List[WordPath], cells: Cells) -> None:
        self._adopt(cells)
        self._all_words = words

    def stats(self) -> CacheStats:
        return CacheStats(
            grid_hash=self._grid_hash,
            position_cache_size=self._strategy.size(),
            has_all_words_cache=self._all_words is not None,
        )
