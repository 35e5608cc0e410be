"""YAML reporter — persists the defect report to defectReport.yaml."""

from __future__ import annotations

from dataclasses import asdict
from pathlib import Path
from typing import Any, Dict, List

import yaml

from gitdetect.findings.models import Defect, FileRepo, Report

REPORT_FILENAME = "defectReport.yaml"


def _repo_to_dict(repo: FileRepo) -> Dict[str, Any]:
    return {
        k.replace("_", "-"): v for k, v in asdict(repo).items() if v not in (None, "")
    }


def _defect_to_dict(defect: Defect) -> Dict[str, Any]:
    # the fingerprint stays internal
    data: Dict[str, Any] = {"lines": list(defect.lines), "tag": defect.tag}
    if defect.additional_info:
        data["additional-info"] = defect.additional_info
    return data


def to_dict(report: Report) -> Dict[str, Any]:
    """Convert Report to a YAML-serialisable dict."""
    repositories: List[Dict[str, Any]] = []
    for repo, file_defects in report.repositories.items():
        repositories.append({
            "repository": _repo_to_dict(repo),
            "files": {
                file_name: [_defect_to_dict(d) for d in defects]
                for file_name, defects in file_defects
            },
        })
    return {"defect-count": report.defect_count, "repositories": repositories}


def render(report: Report) -> str:
    """Return the report as a YAML document."""
    return yaml.safe_dump(to_dict(report), sort_keys=False, default_flow_style=None)


def save_report(report: Report) -> Path:
    """Write the report to ``<output_dir>/defectReport.yaml``; return the path."""
    path = Path(report.output_dir) / REPORT_FILENAME
    path.write_text(render(report), encoding="utf-8")
    return path
