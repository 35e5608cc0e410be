"""Finding data models — secrets, defects and the scan report."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Dict, Iterator, List, Optional, Tuple

from gitdetect.findings.identity import secret_id

if TYPE_CHECKING:
    from gitdetect.rules.models import Rule


@dataclass(frozen=True)
class Secret:
    """A single detected occurrence of a rule match at one line."""

    file_name: str
    value: str
    line_number: int
    rule: "Rule"
    id: str = ""

    @classmethod
    def create(cls, file_name: str, value: str, line_number: int, rule: "Rule") -> "Secret":
        return cls(
            file_name=file_name,
            value=value,
            line_number=line_number,
            rule=rule,
            id=secret_id(file_name, value),
        )


@dataclass
class Defect:
    """Every occurrence of one secret value in one file."""

    secret_id: str
    tag: str
    lines: List[int] = field(default_factory=list)
    additional_info: Optional[str] = None


@dataclass
class FileDefects:
    """Defects of one scanned tree, keyed by file path relative to its root."""

    defects: Dict[str, List[Defect]] = field(default_factory=dict)

    def __iter__(self) -> Iterator[Tuple[str, List[Defect]]]:
        return iter(self.defects.items())

    def __len__(self) -> int:
        return len(self.defects)

    def get(self, file_name: str) -> List[Defect]:
        return self.defects.get(file_name, [])


@dataclass(frozen=True)
class FileRepo:
    """Descriptor of a scanned source tree."""

    id: Optional[int] = None  # GitHub
    org: Optional[str] = None  # GitHub
    name: Optional[str] = None  # GitHub
    branch: Optional[str] = None  # GitHub
    head: Optional[str] = None  # GitHub
    last_push: Optional[str] = None  # GitHub
    local_dir: Optional[str] = None  # local scan

    @property
    def label(self) -> str:
        if self.local_dir:
            return self.local_dir
        label = f"{self.org}/{self.name}"
        return f"{label}@{self.branch}" if self.branch else label


@dataclass
class Report:
    """All defects found during this run, across every scanned tree."""

    output_dir: Path = field(default_factory=Path.cwd)
    repositories: Dict[FileRepo, FileDefects] = field(default_factory=dict)
    defect_count: int = 0

    def add_defects(self, repo: FileRepo, file_defects: FileDefects) -> None:
        self.repositories[repo] = file_defects
