"""Rule data model — compiled compound rule and its match semantics."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from gitdetect.exploit.registry import ExploitFn
from gitdetect.scanner.entropy import shannon_entropy

# Named group that narrows a target match to the reported value
TARGET_GROUP_NAME = "suspect"


def _collect(pattern: re.Pattern[str], text: str) -> List[str]:
    """Values of every non-overlapping match of *pattern* in *text*.

    Uses the ``suspect`` group when the pattern defines one, the whole
    match otherwise. A ``suspect`` group that did not participate yields ''.
    """
    if TARGET_GROUP_NAME in pattern.groupindex:
        return [m.group(TARGET_GROUP_NAME) or "" for m in pattern.finditer(text)]
    return [m.group(0) for m in pattern.finditer(text)]


@dataclass(frozen=True)
class Rule:
    """A compiled detection rule.

    A value is reported when a ``target`` regex matches, the value's entropy
    reaches ``entropy`` (0 disables the check) and no ``except`` regex
    matches anywhere on the line.
    """

    target: Tuple[re.Pattern[str], ...]
    except_: Tuple[re.Pattern[str], ...] = ()
    entropy: float = 0.0
    tag: str = ""
    exploit_fn: Optional[str] = None
    exploit: Optional[ExploitFn] = field(default=None, repr=False, compare=False)

    def match(self, text: str) -> Tuple[List[str], bool]:
        """Return (accepted values, matched).

        *matched* is True when any target regex matched, even if every
        candidate was later rejected by entropy or exclusion.
        """
        candidates: List[str] = []
        matched = False
        for pattern in self.target:
            values = _collect(pattern, text)
            if values:
                matched = True
                candidates.extend(values)

        if not candidates or self.matches_exclusion(text):
            return [], matched

        return [c for c in candidates if self.passes_entropy(c)], matched

    def passes_entropy(self, value: str) -> bool:
        # Empty captures are never secrets, regardless of threshold
        if not value:
            return False
        return self.entropy == 0 or shannon_entropy(value) >= self.entropy

    def matches_exclusion(self, text: str) -> bool:
        return _search_any(text, self.except_)


def _search_any(text: str, patterns: Sequence[re.Pattern[str]]) -> bool:
    return any(p.search(text) for p in patterns)
