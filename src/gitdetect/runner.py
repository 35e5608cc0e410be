"""Scan orchestration — compile rules, pick a file repository, fill the report."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

from gitdetect.config.schema import ScanParameters
from gitdetect.exploit import ExploitRegistry, default_registry
from gitdetect.findings.models import Report
from gitdetect.repos.base import FileRepository
from gitdetect.repos.localfs import LocalFileRepository
from gitdetect.rules.compiler import load_detection_rules
from gitdetect.rules.models import Rule
from gitdetect.scanner.engine import FileScanner

logger = logging.getLogger(__name__)


def initialize_file_repository(params: ScanParameters, rules: List[Rule]) -> FileRepository:
    """Return a LocalFileRepository when a local directory is given, else a GitHub one."""
    file_scanner = FileScanner(
        rules=rules,
        root_dir=params.local_scan_dir,
        debug_print_secrets=params.debug_print_secrets,
    )
    if params.is_local_scan:
        return LocalFileRepository(file_scanner)

    from gitdetect.repos.github import GithubFileRepository

    if params.last_modified_cutoff > 0:
        logger.info(
            "Scanning only repositories that were updated in the last %d days",
            params.last_modified_cutoff,
        )
    return GithubFileRepository(
        file_scanner,
        access_token=params.access_token,
        work_dir=params.output_dir,
        hostname=params.github_hostname,
        repo_name=params.repo_name,
        last_modified_cutoff=params.last_modified_cutoff,
    )


def start_scanning(
    params: ScanParameters,
    report: Report,
    exploits: Optional[ExploitRegistry] = None,
) -> Report:
    """Compile the configured rules and scan into *report*.

    Raises ConfigError before anything is scanned when the rules are
    invalid, and ScanError when the source could not be scanned; *report*
    keeps whatever was gathered up to that point.
    """
    registry = exploits if exploits is not None else default_registry()
    rules = load_detection_rules(Path(params.config_filename), registry)
    repository = initialize_file_repository(params, rules)
    repository.scan(report)
    logger.info("Total number of defects: -%d-", report.defect_count)
    return report
