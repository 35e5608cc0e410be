"""Secret identity — the fingerprint used to deduplicate detections."""

from __future__ import annotations

import hashlib


def secret_id(file_name: str, value: str) -> str:
    """Return the hex MD5 digest of *file_name* + *value*.

    Stable across runs; the rule and line number are deliberately not part
    of the identity, so the same value found twice in one file is one defect.
    """
    return hashlib.md5((file_name + value).encode("utf-8")).hexdigest()
