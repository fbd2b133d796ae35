import unittest

from puzzlegrid.core.constants import CacheStrategyName
from puzzlegrid.core.exceptions import ConfigurationError
from puzzlegrid.core.models import Position, WordPath
from puzzlegrid.data.grid_cache import (
    CacheConfig,
    GridCache,
    LRUCacheStrategy,
    MemoryCacheStrategy,
    create_strategy,
)


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


CELLS = [["C", "A"], ["T", None]]
OTHER_CELLS = [["C", "A"], ["T", "S"]]
CAT = WordPath(positions=(Position(0, 0), Position(0, 1), Position(1, 0)), word="CAT", score=5)


class StrategyTests(unittest.TestCase):
    def test_memory_strategy_evicts_oldest_insert(self) -> None:
        strategy = MemoryCacheStrategy(CacheConfig(max_size=2))
        strategy.set("a", 1)
        strategy.set("b", 2)
        self.assertEqual(strategy.get("a"), 1)
        strategy.set("c", 3)
        self.assertIsNone(strategy.get("a"))
        self.assertEqual(strategy.get("b"), 2)
        self.assertEqual(len(strategy), 2)

    def test_lru_strategy_evicts_least_recently_used(self) -> None:
        strategy = LRUCacheStrategy(CacheConfig(strategy="lru", max_size=2))
        strategy.set("a", 1)
        strategy.set("b", 2)
        self.assertEqual(strategy.get("a"), 1)
        strategy.set("c", 3)
        self.assertIsNone(strategy.get("b"))
        self.assertEqual(strategy.get("a"), 1)
        self.assertIn("c", strategy)

    def test_ttl_is_checked_lazily_on_read(self) -> None:
        clock = FakeClock()
        strategy = MemoryCacheStrategy(CacheConfig(ttl_seconds=10), clock)
        strategy.set("a", 1)
        clock.now = 10.0
        self.assertEqual(strategy.get("a"), 1)
        clock.now = 10.5
        self.assertEqual(strategy.size(), 1)
        self.assertIsNone(strategy.get("a"))
        self.assertEqual(strategy.size(), 0)

    def test_create_strategy_and_config_validation(self) -> None:
        self.assertIsInstance(create_strategy(CacheConfig(strategy="lru")), LRUCacheStrategy)
        self.assertIsInstance(create_strategy(CacheConfig()), MemoryCacheStrategy)
        self.assertEqual(CacheConfig(strategy="lru").strategy, CacheStrategyName.LRU)
        with self.assertRaises(ConfigurationError):
            CacheConfig(strategy="fifo")
        with self.assertRaises(ConfigurationError):
            CacheConfig(max_size=0)
        with self.assertRaises(ConfigurationError):
            CacheConfig(ttl_seconds=0)


class GridCacheTests(unittest.TestCase):
    def test_grid_hash_marks_empty_cells(self) -> None:
        self.assertEqual(GridCache.generate_grid_hash(CELLS), "CAT_")
        self.assertEqual(GridCache.generate_grid_hash([[1, None], [2, 3]]), "1_23")

    def test_validity_follows_stored_results(self) -> None:
        cache = GridCache()
        self.assertFalse(cache.is_cache_valid(CELLS))

        cache.set_all_words([CAT], CELLS)
        self.assertTrue(cache.is_cache_valid(CELLS))
        self.assertTrue(cache.is_cache_valid(CELLS))
        self.assertEqual(cache.get_all_words(CELLS), [CAT])
        self.assertEqual(cache.get_all_words(CELLS), [CAT])

        self.assertFalse(cache.is_cache_valid(OTHER_CELLS))
        self.assertIsNone(cache.get_all_words(OTHER_CELLS))

    def test_invalidate_forgets_everything(self) -> None:
        cache = GridCache()
        cache.set_all_words([CAT], CELLS)
        cache.set_position_words(Position(0, 0), [CAT], CELLS)
        cache.invalidate()
        self.assertFalse(cache.is_cache_valid(CELLS))
        self.assertEqual(cache.grid_hash, "")
        self.assertIsNone(cache.get_position_words(Position(0, 0), CELLS))
        stats = cache.stats()
        self.assertEqual(stats.position_cache_size, 0)
        self.assertFalse(stats.has_all_words_cache)

    def test_position_results(self) -> None:
        cache = GridCache()
        cache.set_position_words(Position(0, 0), [CAT], CELLS)
        self.assertEqual(cache.get_position_words(Position(0, 0), CELLS), [CAT])
        self.assertIsNone(cache.get_position_words(Position(1, 1), CELLS))
        self.assertIsNone(cache.get_position_words(Position(0, 0), OTHER_CELLS))
        self.assertEqual(cache.stats().grid_hash, "CAT_")

    def test_storing_for_a_new_grid_drops_old_results(self) -> None:
        cache = GridCache()
        cache.set_all_words([CAT], CELLS)
        cache.set_position_words(Position(0, 0), [], OTHER_CELLS)
        self.assertIsNone(cache.get_all_words(OTHER_CELLS))
        self.assertEqual(cache.get_position_words(Position(0, 0), OTHER_CELLS), [])

    def test_expired_position_results_are_misses(self) -> None:
        clock = FakeClock()
        cache = GridCache(CacheConfig(ttl_seconds=5), clock)
        cache.set_position_words(Position(0, 0), [CAT], CELLS)
        clock.now = 6.0
        self.assertIsNone(cache.get_position_words(Position(0, 0), CELLS))


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
