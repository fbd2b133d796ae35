"""Command line entrypoint for generating letter and tile boards."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from .data.dictionary import WordDictionary
from .data.grid_cache import CacheConfig
from .engine.match3 import TileGridConfig, TileMatchEngine
from .engine.shapes import SHAPES
from .engine.word_search import WordGridConfig, WordSearchEngine
from .utils.logger import configure_logging
from .utils.pretty import format_word_paths, pretty_print_grid


def parse_words_file(path: Path) -> List[str]:
    """Read words from a file, one entry per line. Blank lines and # comments are skipped."""
    entries: List[str] = []
    for line in path.read_text(encoding="utf-8").splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        entries.append(line)
    return entries


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Generate word-search and tile-matching puzzle boards",
    )
    parser.add_argument("--seed", type=int, default=None, help="Random seed for reproducibility")
    parser.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        help="Logging level (DEBUG, INFO, WARNING, ERROR)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    words = subparsers.add_parser("words", help="Fill a letter board and list the words it contains")
    words.add_argument("--rows", type=int, default=5, help="Grid height in cells")
    words.add_argument("--cols", type=int, default=5, help="Grid width in cells")
    words.add_argument("--shape", choices=sorted(SHAPES), default="rectangle", help="Board shape")
    words.add_argument(
        "--words-file",
        type=Path,
        metavar="FILE",
        help="File with one word per line (# comments and blank lines ignored); "
        "defaults to a small built-in English list",
    )
    words.add_argument("--min-length", type=int, default=3, help="Shortest word to report")
    words.add_argument("--max-length", type=int, default=8, help="Longest word to report")
    words.add_argument("--top", type=int, default=10, help="How many words to print")
    words.add_argument(
        "--cache-strategy",
        choices=["memory", "lru"],
        default="memory",
        help="Eviction strategy for the result cache",
    )
    words.add_argument("--output", type=Path, help="Optional path to JSON output")

    tiles = subparsers.add_parser("tiles", help="Generate a match-free tile board")
    tiles.add_argument("--rows", type=int, default=8, help="Grid height in cells")
    tiles.add_argument("--cols", type=int, default=8, help="Grid width in cells")
    tiles.add_argument("--shape", choices=sorted(SHAPES), default="rectangle", help="Board shape")
    tiles.add_argument("--tile-types", type=int, default=5, help="Number of tile types (3-8)")
    return parser


def run_words(args: argparse.Namespace, stream) -> int:
    if args.words_file:
        dictionary = WordDictionary(parse_words_file(args.words_file))
    else:
        dictionary = WordDictionary.basic_english()

    config = WordGridConfig(
        rows=args.rows,
        cols=args.cols,
        min_word_length=args.min_length,
        max_word_length=args.max_length,
        cache=CacheConfig(strategy=args.cache_strategy),
        rng_seed=args.seed,
    )
    engine = WordSearchEngine(config, dictionary, shape=args.shape)
    engine.fill_with_random_letters()
    found = engine.find_all_possible_words()

    pretty_print_grid(engine.grid, label="Letter board", stream=stream)
    print(file=stream)
    print(f"Words found: {len(found)}", file=stream)
    if found:
        print(format_word_paths(found[: args.top]), file=stream)

    if args.output:
        payload: Dict[str, Any] = {
            "grid": engine.get_as_array(),
            "words": [
                {
                    "word": path.word,
                    "score": path.score,
                    "positions": [[pos.row, pos.col] for pos in path.positions],
                }
                for path in found
            ],
        }
        args.output.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")
    return 0


def run_tiles(args: argparse.Namespace, stream) -> int:
    config = TileGridConfig(rows=args.rows, cols=args.cols, tile_types=args.tile_types, rng_seed=args.seed)
    engine = TileMatchEngine(config, shape=args.shape)
    engine.create_valid_grid()
    moves = engine.get_possible_moves()

    pretty_print_grid(engine.grid, label="Tile board", stream=stream)
    print(file=stream)
    print(f"Possible moves: {len(moves)}", file=stream)
    if moves:
        hint = moves[0]
        print(
            f"Hint: swap ({hint.source.row},{hint.source.col}) with ({hint.target.row},{hint.target.col})",
            file=stream,
        )
    return 0


def main(argv: Optional[List[str]] = None, stream=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    level = getattr(logging, args.log_level.upper(), logging.INFO)
    configure_logging(level)
    stream = stream or sys.stdout

    if args.command == "words":
        if args.min_length < 1 or args.min_length > args.max_length:
            parser.error("--min-length must be at least 1 and not above --max-length")
        return run_words(args, stream)
    return run_tiles(args, stream)


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
