"""Core scan engine — walks a directory and runs every rule over every line.

Exception safety: unexpected failures are re-raised as ScanError with a
message that never contains a matched secret value.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterable, Iterator, List, Optional, Tuple

from rich.console import Console

from gitdetect.findings.models import Secret

if TYPE_CHECKING:
    from gitdetect.rules.models import Rule

logger = logging.getLogger(__name__)

_stdout = Console(highlight=False, soft_wrap=True)


class ScanError(Exception):
    """Raised when a source tree cannot be scanned (never contains secret values)."""


def walk_files(root_dir: str) -> Iterator[str]:
    """Yield every file below *root_dir* in a stable (sorted) order."""

    def _on_error(exc: OSError) -> None:
        logger.warning("Unresolvable path %s: %s", exc.filename, exc.strerror)

    for dirpath, dirnames, filenames in os.walk(root_dir, onerror=_on_error):
        dirnames.sort()
        for filename in sorted(filenames):
            yield os.path.join(dirpath, filename)


def read_lines(path: str) -> Iterator[Tuple[int, str]]:
    """Yield (line_number, text) for *path*, numbered from 1, newline stripped."""
    with open(path, encoding="utf-8", errors="replace", newline="\n") as fh:
        for line_number, line in enumerate(fh, 1):
            yield line_number, line.rstrip("\r\n")


@dataclass
class FileScanner:
    """Tests the lines of every file under ``root_dir`` against ``rules``.

    With ``debug_print_secrets`` set, lines that produced a secret are
    printed to stdout.
    """

    rules: List["Rule"] = field(default_factory=list)
    root_dir: str = ""
    debug_print_secrets: bool = False

    def scan(self, root_dir: Optional[str] = None) -> List[Secret]:
        """Scan every file under *root_dir* (default ``self.root_dir``)."""
        if root_dir is not None:
            self.root_dir = root_dir
        repo_secrets: List[Secret] = []
        try:
            for path in walk_files(self.root_dir):
                repo_secrets.extend(self.scan_file(path))
        except ScanError:
            raise
        except Exception as exc:
            found = len(repo_secrets)
            repo_secrets.clear()
            raise ScanError(
                f"Internal scanner error in {self.root_dir} after {found} secrets "
                f"({type(exc).__name__}). Secrets have been scrubbed from this error."
            ) from None
        return repo_secrets

    def scan_file(self, path: str) -> List[Secret]:
        """Scan one file; an unreadable file yields no secrets."""
        try:
            return self.scan_lines(path, read_lines(path))
        except OSError as exc:
            logger.warning("Error opening file %s: %s", path, exc.strerror or exc)
            return []

    def scan_lines(self, path: str, lines: Iterable[Tuple[int, str]]) -> List[Secret]:
        """Run every rule, in order, over each (line_number, text) of *path*."""
        secrets: List[Secret] = []
        for line_number, line in lines:
            for rule in self.rules:
                values, _ = rule.match(line)
                if not values:
                    continue
                if self.debug_print_secrets:
                    _stdout.print(f"{path}, line, {line_number}: {line}", markup=False)
                secrets.extend(Secret.create(path, v, line_number, rule) for v in values)
        return secrets
