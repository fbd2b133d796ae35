import unittest
from unittest import mock

from puzzlegrid.core.constants import RejectionReason
from puzzlegrid.core.exceptions import ConfigurationError
from puzzlegrid.core.models import ColumnMove, Position
from puzzlegrid.data.dictionary import WordDictionary
from puzzlegrid.data.scoring import ScrabbleScorer
from puzzlegrid.engine.path_finder import PathFinderOptions, WordPathFinder
from puzzlegrid.engine.paths import (
    adjacent_positions,
    are_adjacent,
    build_word_from_path,
    can_extend_path,
    chebyshev_distance,
    is_valid_path,
    manhattan_distance,
)
from puzzlegrid.engine.validator import WordValidator
from puzzlegrid.engine.word_search import WordGridConfig, WordSearchEngine


C, A, T, S = Position(0, 0), Position(0, 1), Position(1, 0), Position(1, 1)


def cats_engine(words=("CAT", "CATS"), **config) -> WordSearchEngine:
    options = {"rows": 2, "cols": 2, "min_word_length": 3, "max_word_length": 4}
    options.update(config)
    engine = WordSearchEngine(WordGridConfig(**options), words)
    engine.load_letters(["CA", "TS"])
    return engine


class PathHelperTests(unittest.TestCase):
    def test_adjacency_includes_diagonals(self) -> None:
        self.assertTrue(are_adjacent(A, T))
        self.assertTrue(are_adjacent(C, S))
        self.assertFalse(are_adjacent(C, C))
        self.assertFalse(are_adjacent(C, Position(0, 2)))

    def test_path_shape(self) -> None:
        self.assertTrue(is_valid_path([C, A, T, S]))
        self.assertFalse(is_valid_path([]))
        self.assertFalse(is_valid_path([C, A, C]))
        self.assertFalse(is_valid_path([C, Position(2, 2)]))
        self.assertTrue(can_extend_path([C, A], T))
        self.assertFalse(can_extend_path([C, A], C))

    def test_neighbours_and_distances(self) -> None:
        self.assertEqual(adjacent_positions(C, 2, 2), [A, T, S])
        self.assertEqual(len(adjacent_positions(Position(1, 1), 3, 3)), 8)
        self.assertEqual(manhattan_distance(C, S), 2)
        self.assertEqual(chebyshev_distance(C, S), 1)

    def test_build_word_uppercases(self) -> None:
        self.assertEqual(build_word_from_path([["c", "a"], ["t", None]], [C, A, T, S]), "CAT")


class ValidationTests(unittest.TestCase):
    def test_full_path_validates_to_cats(self) -> None:
        engine = cats_engine()
        result = engine.validate_word_path([C, A, T, S])
        self.assertTrue(result.is_valid)
        self.assertEqual(result.word, "CATS")
        self.assertEqual(result.score, 6)

    def test_prefix_path_validates_to_cat(self) -> None:
        result = cats_engine().validate_word_path([C, A, T])
        self.assertTrue(result.is_valid)
        self.assertEqual(result.word, "CAT")
        self.assertEqual(result.score, 5)

    def test_rejections_carry_reason_and_message(self) -> None:
        engine = cats_engine()
        cases = [
            ([], RejectionReason.EMPTY_PATH),
            ([C, Position(2, 0)], RejectionReason.OUT_OF_BOUNDS),
            ([C, A, C], RejectionReason.DISCONNECTED_PATH),
            ([C, A], RejectionReason.TOO_SHORT),
            ([A, C, T], RejectionReason.NOT_A_WORD),
        ]
        for path, reason in cases:
            with self.subTest(reason=reason):
                result = engine.validate_word_path(path)
                self.assertFalse(result.is_valid)
                self.assertEqual(result.reason, reason)
                self.assertTrue(result.message)

    def test_path_through_empty_cell_is_rejected(self) -> None:
        engine = cats_engine()
        engine.remove_letters([S])
        result = engine.validate_word_path([C, A, T, S])
        self.assertEqual(result.reason, RejectionReason.EMPTY_CELL)

    def test_validator_word_checks(self) -> None:
        validator = WordValidator(WordDictionary(["cat", "cats"]), ScrabbleScorer(), 3, 4)
        self.assertEqual(validator.validate_word("catss").reason, RejectionReason.TOO_LONG)
        self.assertTrue(validator.validate_word(" cat ").is_valid)

        batch = validator.validate_words(["cat", "dog", "xx"])
        self.assertEqual(batch.valid_words, ["CAT"])
        self.assertEqual(batch.invalid_words, ["dog", "xx"])
        self.assertEqual(batch.total_score, 5)

    def test_validator_rejects_bad_length_window(self) -> None:
        with self.assertRaises(ConfigurationError):
            WordValidator(WordDictionary(), ScrabbleScorer(), 0, 4)
        with self.assertRaises(ConfigurationError):
            WordValidator(WordDictionary(), ScrabbleScorer(), 5, 4)

    def test_partial_paths(self) -> None:
        engine = cats_engine()
        cells = engine.get_as_array()
        partial = engine.validator.validate_partial_path(cells, [C, A])
        self.assertTrue(partial.is_valid_path)
        self.assertEqual(partial.current_word, "CA")
        self.assertTrue(partial.could_be_valid)

        dead_end = engine.validator.validate_partial_path(cells, [A, C])
        self.assertFalse(dead_end.has_valid_prefix)
        self.assertEqual(dead_end.reason, RejectionReason.NO_PREFIX)

        self.assertTrue(engine.validator.has_valid_prefix(""))


class WildcardTests(unittest.TestCase):
    def test_wildcard_prefers_common_words(self) -> None:
        engine = cats_engine(words=("CAT", "CAB", "CAR"), common_words={"car"})
        result = engine.validate_word_path_with_wildcards([C, A, T], [2])
        self.assertTrue(result.is_valid)
        self.assertEqual(result.word, "CAR")

    def test_wildcard_falls_back_to_first_shortest(self) -> None:
        engine = cats_engine(words=("CAT", "CAB", "CAR"))
        result = engine.validate_word_path_with_wildcards([C, A, T], [2])
        self.assertEqual(result.word, "CAB")
        self.assertEqual(result.score, 7)

    def test_wildcard_may_sit_on_an_empty_cell(self) -> None:
        engine = cats_engine()
        engine.remove_letters([T])
        result = engine.validate_word_path_with_wildcards([C, A, T, S], [2])
        self.assertEqual(result.word, "CATS")

    def test_wildcard_cannot_stand_on_an_inactive_cell(self) -> None:
        engine = WordSearchEngine(WordGridConfig(rows=3, cols=3), ("CAT",), shape="cross")
        engine.load_letters([".A.", "TCX", ".Y."])
        path = [Position(1, 1), Position(0, 1), Position(0, 0)]
        self.assertFalse(engine.is_active(0, 0))

        result = engine.validate_word_path_with_wildcards(path, [2])
        self.assertFalse(result.is_valid)
        self.assertEqual(result.reason, RejectionReason.INACTIVE_CELL)
        self.assertEqual(engine.validate_word_path(path).reason, RejectionReason.INACTIVE_CELL)
        active_path = [Position(1, 1), Position(0, 1), Position(1, 0)]
        self.assertEqual(engine.validate_word_path_with_wildcards(active_path, [2]).word, "CAT")

    def test_wildcard_misuse(self) -> None:
        engine = cats_engine()
        with self.assertLogs("puzzlegrid.engine.validator", level="WARNING"):
            too_many = engine.validate_word_path_with_wildcards([C, A, T], [0, 1, 2])
        self.assertEqual(too_many.reason, RejectionReason.TOO_MANY_WILDCARDS)
        outside = engine.validate_word_path_with_wildcards([C, A, T], [7])
        self.assertEqual(outside.reason, RejectionReason.INVALID_WILDCARD)

    def test_wildcard_without_candidates(self) -> None:
        engine = cats_engine(words=("DOG",))
        result = engine.validate_word_path_with_wildcards([C, A, T], [2])
        self.assertEqual(result.reason, RejectionReason.NO_WILDCARD_MATCH)
        self.assertEqual(result.word, "CA?")


class SearchTests(unittest.TestCase):
    def test_all_words_on_two_by_two_board(self) -> None:
        words = cats_engine().find_all_possible_words()
        self.assertEqual([path.word for path in words], ["CATS", "CAT"])
        self.assertEqual(words[0].positions, (C, A, T, S))

    def test_search_without_prefix_pruning_agrees(self) -> None:
        pruned = cats_engine().find_all_possible_words()
        exhaustive = cats_engine(prune_with_prefixes=False).find_all_possible_words()
        self.assertEqual(pruned, exhaustive)

    def test_words_from_position(self) -> None:
        engine = cats_engine()
        self.assertEqual([p.word for p in engine.find_words_from_position(0, 0)], ["CATS", "CAT"])
        self.assertEqual(engine.find_words_from_position(1, 1), [])
        limited = engine.find_words_from_position(0, 0, PathFinderOptions(max_results=1))
        self.assertEqual([p.word for p in limited], ["CATS"])
        excluded = engine.find_words_from_position(0, 0, PathFinderOptions(exclude_words={"CATS"}))
        self.assertEqual([p.word for p in excluded], ["CAT"])
        self.assertTrue(engine.has_valid_words_from_position(0, 0))
        self.assertFalse(engine.has_valid_words_from_position(1, 1))

    def test_derived_queries(self) -> None:
        engine = cats_engine()
        self.assertEqual([p.word for p in engine.find_longest_words()], ["CATS"])
        self.assertEqual([p.word for p in engine.find_paths_by_length(3)], ["CAT"])
        self.assertEqual(engine.find_paths_by_length(9), [])
        self.assertEqual(engine.find_rare_letter_words(), [])

        pairs = engine.find_intersecting_words()
        self.assertEqual(len(pairs), 1)
        self.assertEqual(pairs[0].shared, (C, A, T))
        self.assertEqual(pairs[0].combined_score, 11)

    def test_derived_queries_share_one_board_search(self) -> None:
        engine = cats_engine()
        with mock.patch.object(
            engine.path_finder,
            "find_all_possible_words",
            wraps=engine.path_finder.find_all_possible_words,
        ) as search:
            engine.find_longest_words()
            engine.find_paths_by_length(4)
            engine.find_rare_letter_words()
            engine.find_intersecting_words()
        self.assertEqual(search.call_count, 1)

    def test_rare_letter_words(self) -> None:
        engine = WordSearchEngine(WordGridConfig(rows=2, cols=2), ["zax"])
        engine.load_letters(["ZA", "XS"])
        self.assertEqual([p.word for p in engine.find_rare_letter_words()], ["ZAX"])
        self.assertEqual(engine.find_rare_letter_words(["Q"]), [])

    def test_path_finder_length_window(self) -> None:
        finder = WordPathFinder(3, 4)
        finder.set_length_constraints(1, 2)
        self.assertEqual(finder.stats()["max_length"], 2)
        with self.assertRaises(ConfigurationError):
            finder.set_length_constraints(3, 2)
        with self.assertRaises(ConfigurationError):
            WordPathFinder(0, 4)


class CacheBehaviourTests(unittest.TestCase):
    def test_repeated_search_is_served_from_cache(self) -> None:
        engine = cats_engine()
        finder = engine.path_finder
        with mock.patch.object(finder, "find_all_possible_words", wraps=finder.find_all_possible_words) as spy:
            first = engine.find_all_possible_words()
            self.assertTrue(engine.cache.is_cache_valid(engine.get_as_array()))
            second = engine.find_all_possible_words()
            self.assertTrue(engine.cache.is_cache_valid(engine.get_as_array()))
        self.assertEqual(first, second)
        self.assertEqual(spy.call_count, 1)

    def test_mutations_invalidate_cache(self) -> None:
        mutations = [
            lambda engine: engine.remove_letters([S]),
            lambda engine: engine.swap_letters(0, 0, 1, 1),
            lambda engine: engine.set_shape("cross"),
            lambda engine: engine.set_letter(0, 0, "b"),
            lambda engine: engine.move_down_cells_at_col(0),
        ]
        for mutate in mutations:
            engine = cats_engine()
            engine.find_all_possible_words()
            self.assertTrue(engine.cache.is_cache_valid(engine.get_as_array()))
            mutate(engine)
            self.assertFalse(engine.cache.is_cache_valid(engine.get_as_array()))

    def test_batch_invalidates_once_on_exit(self) -> None:
        engine = cats_engine()
        engine.find_all_possible_words()
        with engine.batch():
            engine.set_letter(0, 0, "B")
            engine.set_letter(0, 1, "E")
            self.assertNotEqual(engine.cache.grid_hash, "")
            self.assertFalse(engine.cache.is_cache_valid(engine.get_as_array()))
        self.assertEqual(engine.cache.grid_hash, "")

    def test_position_results_are_cached(self) -> None:
        engine = cats_engine()
        engine.find_words_from_position(0, 0)
        cached = engine.cache.get_position_words(C, engine.get_as_array())
        self.assertEqual([p.word for p in cached], ["CATS", "CAT"])


class BoardMutationTests(unittest.TestCase):
    def test_fill_with_random_letters(self) -> None:
        engine = WordSearchEngine(WordGridConfig(rows=3, cols=3, letter_frequency={"A": 100}), shape="cross")
        with self.assertLogs("puzzlegrid.engine.word_search", level="DEBUG") as logs:
            engine.fill_with_random_letters()
        dump = next(line for line in logs.output if "Letter board (3x3)" in line)
        self.assertIn(" 0 |  #  A  #", dump)
        self.assertEqual(engine.stats().letter_counts, {"A": 5})
        self.assertIsNone(engine.get_cell(0, 0))

    def test_fill_empty_top_cells_compacts_then_refills(self) -> None:
        engine = WordSearchEngine(WordGridConfig(rows=3, cols=1, letter_frequency={"Z": 1}))
        engine.load_letters(["A", ".", "B"])
        self.assertEqual(engine.get_columns_with_empty_cells(), [0])

        filled = engine.fill_empty_top_cells()

        self.assertEqual(filled, [Position(0, 0)])
        self.assertEqual(engine.get_as_array(), [["Z"], ["A"], ["B"]])
        self.assertEqual(engine.cache.grid_hash, "")

    def test_fill_empty_cells_leaves_letters(self) -> None:
        engine = WordSearchEngine(WordGridConfig(rows=1, cols=3, letter_frequency={"E": 1}))
        engine.load_letters(["A_B"])
        self.assertEqual(engine.fill_empty_cells(), [Position(0, 1)])
        self.assertEqual(engine.get_as_array(), [["A", "E", "B"]])

    def test_move_down_reports_moves(self) -> None:
        engine = WordSearchEngine(WordGridConfig(rows=3, cols=1))
        engine.load_letters(["A", ".", "."])
        self.assertEqual(engine.move_down_cells_at_col(0), [ColumnMove(from_row=0, to_row=2)])

    def test_set_letter_and_swap(self) -> None:
        engine = cats_engine()
        self.assertTrue(engine.set_letter(1, 1, "x"))
        self.assertEqual(engine.get_cell(1, 1), "X")
        self.assertFalse(engine.set_letter(1, 1, "7"))
        self.assertFalse(engine.set_letter(5, 5, "A"))
        self.assertTrue(engine.swap_letters(0, 0, 0, 1))
        self.assertEqual(engine.get_as_array(), [["A", "C"], ["T", "X"]])
        engine.clear()
        self.assertEqual(engine.stats().empty_tiles, 4)

    def test_load_letters_rejects_symbols(self) -> None:
        engine = cats_engine()
        with self.assertRaises(ConfigurationError):
            engine.load_letters(["C1", "TS"])

    def test_stats(self) -> None:
        stats = cats_engine().stats(include_words=True)
        self.assertEqual(stats.total_letters, 4)
        self.assertEqual(stats.letter_counts, {"C": 1, "A": 1, "T": 1, "S": 1})
        self.assertEqual(stats.possible_words, 2)

    def test_config_validation(self) -> None:
        with self.assertRaises(ConfigurationError):
            WordGridConfig(rows=2, cols=2, min_word_length=5, max_word_length=4)
        with self.assertRaises(ConfigurationError):
            WordGridConfig(rows=0, cols=2)
        with self.assertRaises(ConfigurationError):
            WordGridConfig(rows=2, cols=2, letter_frequency={})
        with self.assertRaises(ConfigurationError):
            WordGridConfig(rows=2, cols=2, max_words_per_position=0)


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
