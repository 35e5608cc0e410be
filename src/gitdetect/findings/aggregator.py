"""Defect aggregation — collapse secret occurrences into per-file defects."""

from __future__ import annotations

import os
from typing import Iterable, Tuple

from gitdetect.exploit.registry import run_exploit
from gitdetect.findings.models import Defect, FileDefects, Report, Secret


def relative_filename(file_name: str, root_dir: str) -> str:
    """Return *file_name* relative to *root_dir* (root prefix and one separator removed)."""
    if not file_name.startswith(root_dir):
        return file_name
    rel = file_name[len(root_dir):]
    if rel[:1] in (os.sep, "/"):
        rel = rel[1:]
    return rel


def add_instance(file_defects: FileDefects, file_name: str, secret: Secret) -> Tuple[Defect, bool]:
    """Record *secret* under *file_name*.

    The first occurrence of a fingerprint creates a Defect; later ones
    append their line number to it. Returns (defect, is_new).
    """
    defects = file_defects.defects.setdefault(file_name, [])
    for defect in defects:
        if defect.secret_id == secret.id:
            defect.lines.append(secret.line_number)
            return defect, False

    defect = Defect(secret_id=secret.id, tag=secret.rule.tag, lines=[secret.line_number])
    defects.append(defect)
    return defect, True


def reduce_and_exploit(report: Report, secrets: Iterable[Secret], scan_root: str) -> FileDefects:
    """Consolidate *secrets* of one scanned tree into FileDefects.

    *secrets* must arrive in walk order, then line order, then rule order.
    Each new defect bumps ``report.defect_count`` and runs the rule's
    exploit hook exactly once.
    """
    file_defects = FileDefects()

    for secret in secrets:
        file_name = relative_filename(secret.file_name, scan_root)
        defect, is_new = add_instance(file_defects, file_name, secret)
        if is_new:
            report.defect_count += 1
            defect.additional_info = run_exploit(secret)

    return file_defects
