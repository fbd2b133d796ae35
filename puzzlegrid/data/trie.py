"""Prefix trie stored as an arena of integer-indexed nodes."""

from __future__ import annotations

from typing import Dict, List, Optional


class Trie:
    """Prefix trie for fast word and prefix checks.

    Node ``i`` is described by ``_children[i]`` (letter to child index) and
    ``_terminal[i]``. Index 0 is the root. Nodes are never removed.
    """

    __slots__ = ("_children", "_terminal", "_word_count")

    def __init__(self) -> None:
        self._children: List[Dict[str, int]] = [{}]
        self._terminal: List[bool] = [False]
        self._word_count = 0

    def insert(self, word: str) -> bool:
        """Add ``word``; returns False for the empty string or a duplicate."""

        if not word:
            return False
        node = 0
        for ch in word:
            child = self._children[node].get(ch)
            if child is None:
                child = len(self._children)
                self._children.append({})
                self._terminal.append(False)
                self._children[node][ch] = child
            node = child
        if self._terminal[node]:
            return False
        self._terminal[node] = True
        self._word_count += 1
        return True

    def search(self, word: str) -> bool:
        if not word:
            return False
        node = self._walk(word)
        return node is not None and self._terminal[node]

    def starts_with(self, prefix: str) -> bool:
        return self._walk(prefix) is not None

    def words_with_prefix(self, prefix: str, limit: Optional[int] = None) -> List[str]:
        """Words below ``prefix`` in lexicographic order, at most ``limit`` of them."""

        start = self._walk(prefix)
        if start is None:
            return []
        results: List[str] = []
        stack = [(start, prefix)]
        while stack:
            node, text = stack.pop()
            if self._terminal[node]:
                results.append(text)
                if limit is not None and len(results) >= limit:
                    break
            for ch in sorted(self._children[node], reverse=True):
                stack.append((self._children[node][ch], text + ch))
        return results

    @property
    def node_count(self) -> int:
        return len(self._children)

    def __len__(self) -> int:
        return self._word_count

    def __contains__(self, word: object) -> bool:
        return isinstance(word, str) and self.search(word)

    def _walk(self, text: str) -> Optional[int]:
        node = 0
        for ch in text:
            child = self._children[node].get(ch)
            if child is None:
                return None
            node = child
        return node
