"""Local filesystem source — scans one directory tree."""

from __future__ import annotations

import logging
from pathlib import Path

from gitdetect.findings.aggregator import reduce_and_exploit
from gitdetect.findings.models import FileRepo, Report
from gitdetect.scanner.engine import FileScanner, ScanError

logger = logging.getLogger(__name__)


class LocalFileRepository:
    """Scans ``file_scanner.root_dir`` on the local filesystem."""

    def __init__(self, file_scanner: FileScanner) -> None:
        self.file_scanner = file_scanner

    def scan(self, report: Report) -> None:
        root_dir = self.file_scanner.root_dir
        logger.info("Starting local scan of %s", root_dir)

        if not Path(root_dir).is_dir():
            raise ScanError(f"Local scan directory doesn't exist: {root_dir}")

        secrets = self.file_scanner.scan()
        if secrets:
            defects = reduce_and_exploit(report, secrets, root_dir)
            report.add_defects(FileRepo(local_dir=root_dir), defects)
