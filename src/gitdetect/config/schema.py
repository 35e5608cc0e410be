"""Configuration schema — dataclasses for rule configuration and scan parameters."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

DEFAULT_GITHUB_HOSTNAME = "github.com"


@dataclass
class RuleConfig:
    """One entry of ``secret-detection-rules`` as written in the YAML file.

    Patterns are kept as raw strings; ``gitdetect.rules.compiler`` turns
    them into a compiled :class:`~gitdetect.rules.models.Rule`.
    """

    target: List[str] = field(default_factory=list)  # regex
    except_: List[str] = field(default_factory=list)  # regex
    entropy: float = 0.0  # 0 disables the entropy check
    tag: str = ""
    exploit_fn: Optional[str] = None


@dataclass
class ScanParameters:
    """Everything the scan command needs, after CLI parsing."""

    config_filename: str = ""
    access_token: str = ""
    output_dir: str = ""
    github_hostname: str = DEFAULT_GITHUB_HOSTNAME
    repo_name: str = ""  # <owner>/<name>[/<branch>], blank = whole host
    last_modified_cutoff: int = 0  # days, 0 = scan always
    local_scan_dir: str = ""
    debug_print_secrets: bool = False

    @property
    def is_local_scan(self) -> bool:
        return bool(self.local_scan_dir)
