"""Load the YAML rule configuration and validate scan parameters."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, List

import yaml

from gitdetect.config.schema import RuleConfig, ScanParameters

RULES_SECTION = "secret-detection-rules"


class ConfigError(Exception):
    """Raised when configuration is malformed, unreadable or invalid."""


# Normalised YAML key -> RuleConfig field
_RULE_KEYS = {
    "target": "target",
    "except": "except_",
    "entropy": "entropy",
    "tag": "tag",
    "exploitfn": "exploit_fn",
}


def _normalise_key(key: Any) -> str:
    return str(key).lower().replace("-", "").replace("_", "")


def _as_pattern_list(value: Any, field_name: str, index: int) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, list) and all(isinstance(v, str) for v in value):
        return list(value)
    raise ConfigError(f"Rule #{index}: '{field_name}' must be a list of regex strings")


def _build_rule_config(entry: Any, index: int) -> RuleConfig:
    """Build a RuleConfig from one YAML mapping, ignoring unknown keys."""
    if not isinstance(entry, dict):
        raise ConfigError(f"Rule #{index} is not a mapping")

    values: Dict[str, Any] = {}
    for key, value in entry.items():
        field_name = _RULE_KEYS.get(_normalise_key(key))
        if field_name is not None:
            values[field_name] = value

    try:
        entropy = float(values.get("entropy") or 0.0)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Rule #{index}: 'Entropy' must be a number") from exc

    exploit_fn = values.get("exploit_fn") or None
    return RuleConfig(
        target=_as_pattern_list(values.get("target"), "Target", index),
        except_=_as_pattern_list(values.get("except_"), "Except", index),
        entropy=entropy,
        tag=str(values.get("tag") or ""),
        exploit_fn=str(exploit_fn) if exploit_fn is not None else None,
    )


def parse_rule_configs(text: str) -> List[RuleConfig]:
    """Parse YAML *text* into RuleConfig entries (configuration order)."""
    try:
        raw = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse rule configuration: {exc}") from exc

    if raw is None:
        return []
    if not isinstance(raw, dict):
        raise ConfigError("Rule configuration must be a mapping")

    entries = raw.get(RULES_SECTION) or []
    if not isinstance(entries, list):
        raise ConfigError(f"'{RULES_SECTION}' must be a list")
    return [_build_rule_config(entry, i) for i, entry in enumerate(entries, 1)]


def load_rule_configs(path: Path) -> List[RuleConfig]:
    """Read and parse the rule configuration file at *path*."""
    try:
        text = Path(path).read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Failure reading rule configuration file {path}: {exc}") from exc
    return parse_rule_configs(text)


def validate_parameters(params: ScanParameters) -> ScanParameters:
    """Check CLI parameters, fill in defaults. Raises ConfigError."""
    if not params.output_dir:
        params.output_dir = os.getcwd()
    elif not Path(params.output_dir).is_dir():
        raise ConfigError(f"Output directory doesn't exist: {params.output_dir}")

    if not params.config_filename:
        raise ConfigError("Configuration file not specified")

    if params.is_local_scan:
        return params

    if not params.access_token:
        raise ConfigError("Access token not specified")

    if params.repo_name:
        parts = params.repo_name.split("/")
        if len(parts) not in (2, 3) or not all(parts[:2]):
            raise ConfigError(
                "Invalid parameter, repo-name must be in the format <owner>/<name>[/<branch>]"
            )

    if params.last_modified_cutoff < 0:
        raise ConfigError("Invalid parameter, last-modified-cutoff cannot be less than 0")

    return params
