"""Shannon entropy calculator."""

from __future__ import annotations

import math
from collections import Counter


def shannon_entropy(s: str) -> float:
    """Compute Shannon entropy (bits per character) of string *s*.

    H = log₂(L) − (1/L) · Σ c · log₂(c)  over the counts c of unique characters.

    The empty string has no information content and returns 0.0.
    """
    if not s:
        return 0.0
    total = len(s)
    weighted = sum(c * math.log2(c) for c in Counter(s).values())
    return math.log2(total) - weighted / total
