"""FileRepository protocol — a source of file trees to scan."""

from __future__ import annotations

from typing import Protocol

from gitdetect.findings.models import Report


class FileRepository(Protocol):
    def scan(self, report: Report) -> None:
        """Scan every tree this repository provides into *report*.

        Long-running implementations should save the report as they go so
        partial results are visible before the scan completes. Raises
        ScanError when nothing could be scanned.
        """
        ...
