"""Grid puzzle engines for tile-matching and word-search games.

This package exposes the public API surface via:

- ``puzzlegrid.engine.grid.MaskedGrid``: shape-masked cell store shared by both games.
- ``puzzlegrid.engine.match3.TileMatchEngine``: match-3 board generation, swaps and cascades.
- ``puzzlegrid.engine.word_search.WordSearchEngine``: letter boards, path validation and cached word search.
- ``puzzlegrid.data.dictionary.WordDictionary``: normalized word list with trie-backed prefixes.
"""

from .data.dictionary import WordDictionary
from .engine.grid import MaskedGrid
from .engine.match3 import TileGridConfig, TileMatchEngine
from .engine.word_search import WordGridConfig, WordSearchEngine

__all__ = [
    "MaskedGrid",
    "TileGridConfig",
    "TileMatchEngine",
    "WordDictionary",
    "WordGridConfig",
    "WordSearchEngine",
]

__version__ = "0.1.0"
