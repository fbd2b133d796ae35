"""Shared helpers for word normalization."""

from __future__ import annotations

import re
from typing import Optional

WORD_RE = re.compile(r"^[A-Z]+$")


def normalize_word(text: object) -> Optional[str]:
    """Return the uppercase form of ``text``, or ``None`` if it is not purely A-Z."""

    if not text or not isinstance(text, str):
        return None
    normalized = text.strip().upper()
    if not WORD_RE.match(normalized):
        return None
    return normalized


def normalize_letter(text: object) -> Optional[str]:
    normalized = normalize_word(text)
    if normalized is None or len(normalized) != 1:
        return None
    return normalized


__all__ = ["normalize_word", "normalize_letter", "WORD_RE"]
