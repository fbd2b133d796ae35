"""Depth-first discovery of dictionary words traced through a letter grid."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import AbstractSet, Callable, Dict, Iterable, Iterator, List, Optional, Sequence

from ..core.constants import DEFAULT_RARE_LETTERS
from ..core.models import Position, WordIntersection, WordPath
from ..data.scoring import ScrabbleScorer
from ..utils.logger import get_logger
from .paths import LetterCells, adjacent_positions, build_word_from_path, in_bounds, shared_positions
from .validator import check_length_window


LOGGER = get_logger(__name__)

PrefixCheck = Callable[[str], bool]


@dataclass
class PathFinderOptions:
    max_results: int = 10
    min_score: int = 0
    exclude_words: AbstractSet[str] = field(default_factory=frozenset)


# ----------------------------------------------------------------------
# Filters over an already computed word list (best score first)
# ----------------------------------------------------------------------
def filter_by_length(words: Sequence[WordPath], target_length: int, max_results: int = 20) -> List[WordPath]:
    return [path for path in words if len(path.word) == target_length][:max_results]


def filter_rare_letters(
    words: Sequence[WordPath],
    rare_letters: Iterable[str] = DEFAULT_RARE_LETTERS,
    max_results: int = 10,
) -> List[WordPath]:
    rare = {letter.upper() for letter in rare_letters}
    return [path for path in words if rare.intersection(path.word)][:max_results]


def filter_longest(words: Sequence[WordPath], max_results: int = 5) -> List[WordPath]:
    if not words:
        return []
    longest = max(len(path.word) for path in words)
    return [path for path in words if len(path.word) == longest][:max_results]


def pair_intersections(words: Sequence[WordPath], max_results: int = 10) -> List[WordIntersection]:
    """Every pair of words that share a board position, best combined score first."""

    pairs: List[WordIntersection] = []
    for i, first in enumerate(words):
        for second in words[i + 1:]:
            shared = shared_positions(first.positions, second.positions)
            if shared:
                pairs.append(WordIntersection(first=first, second=second, shared=tuple(shared)))
    pairs.sort(key=lambda pair: pair.combined_score, reverse=True)
    return pairs[:max_results]


def merge_best(paths: Iterable[WordPath]) -> List[WordPath]:
    """Keep the highest scoring path per word; ties keep the first one seen."""

    best: Dict[str, WordPath] = {}
    for path in paths:
        existing = best.get(path.word)
        if existing is None or existing.score < path.score:
            best[path.word] = path
    return sorted(best.values(), key=lambda path: path.score, reverse=True)


class WordPathFinder:
    """Explores 8-directional paths between ``min_length`` and ``max_length`` cells."""

    def __init__(self, min_length: int = 3, max_length: int = 8) -> None:
        check_length_window(min_length, max_length)
        self.min_length = min_length
        self.max_length = max_length

    def set_length_constraints(self, min_length: int, max_length: int) -> None:
        check_length_window(min_length, max_length)
        self.min_length = min_length
        self.max_length = max_length

    def stats(self) -> Dict[str, object]:
        return {
            "min_length": self.min_length,
            "max_length": self.max_length,
            "search_space": "8-directional adjacency",
        }

    # ------------------------------------------------------------------
    # Search
    # ------------------------------------------------------------------
    def _explore(
        self,
        cells: LetterCells,
        start: Position,
        word_set: AbstractSet[str],
        scorer: ScrabbleScorer,
        options: PathFinderOptions,
        prefix_check: Optional[PrefixCheck],
    ) -> List[WordPath]:
        rows = len(cells)
        cols = len(cells[0]) if rows else 0
        found: List[WordPath] = []

        def record(path: List[Position]) -> str:
            word = build_word_from_path(cells, path)
            if len(path) >= self.min_length and word in word_set and word not in options.exclude_words:
                score = scorer.score(word)
                if score >= options.min_score:
                    found.append(WordPath(positions=tuple(path), word=word, score=score))
            return word

        path: List[Position] = [start]
        visited = {start}
        word = record(path)
        if len(path) >= self.max_length or (prefix_check is not None and not prefix_check(word)):
            return found

        # One neighbour iterator per path cell; popping a frame backtracks one step.
        stack: List[Iterator[Position]] = [iter(adjacent_positions(start, rows, cols))]
        while stack:
            nxt = next(stack[-1], None)
            if nxt is None:
                stack.pop()
                visited.discard(path.pop())
                continue
            if nxt in visited or not cells[nxt.row][nxt.col]:
                continue
            path.append(nxt)
            visited.add(nxt)
            word = record(path)
            if len(path) < self.max_length and (prefix_check is None or prefix_check(word)):
                stack.append(iter(adjacent_positions(nxt, rows, cols)))
            else:
                visited.discard(path.pop())
        return found

    def find_words_from_position(
        self,
        cells: LetterCells,
        start: Position,
        word_set: AbstractSet[str],
        scorer: ScrabbleScorer,
        options: Optional[PathFinderOptions] = None,
        prefix_check: Optional[PrefixCheck] = None,
    ) -> List[WordPath]:
        """Words whose path begins at ``start``, highest score first.

        ``prefix_check`` lets the caller stop extending a path whose letters
        cannot begin any word; without it every path up to ``max_length`` is
        walked.
        """

        options = options or PathFinderOptions()
        rows = len(cells)
        cols = len(cells[0]) if rows else 0
        if not in_bounds(start, rows, cols) or not cells[start.row][start.col]:
            return []
        found = self._explore(cells, start, word_set, scorer, options, prefix_check)
        found.sort(key=lambda path: path.score, reverse=True)
        return found[: options.max_results]

    def find_all_possible_words(
        self,
        cells: LetterCells,
        word_set: AbstractSet[str],
        scorer: ScrabbleScorer,
        per_position_limit: int = 5,
        options: Optional[PathFinderOptions] = None,
        prefix_check: Optional[PrefixCheck] = None,
    ) -> List[WordPath]:
        options = options or PathFinderOptions()
        per_position = PathFinderOptions(
            max_results=per_position_limit,
            min_score=options.min_score,
            exclude_words=options.exclude_words,
        )
        collected: List[WordPath] = []
        for row in range(len(cells)):
            for col in range(len(cells[row])):
                collected.extend(
                    self.find_words_from_position(
                        cells, Position(row, col), word_set, scorer, per_position, prefix_check
                    )
                )
        merged = merge_best(collected)
        LOGGER.debug("Board search found %s paths, %s distinct words", len(collected), len(merged))
        return merged

    def has_valid_words_from_position(
        self,
        cells: LetterCells,
        start: Position,
        word_set: AbstractSet[str],
        prefix_check: Optional[PrefixCheck] = None,
    ) -> bool:
        found = self.find_words_from_position(
            cells, start, word_set, ScrabbleScorer(), PathFinderOptions(max_results=1), prefix_check
        )
        return bool(found)
