"""Configuration loading, schema, and defaults."""

from gitdetect.config.loader import (
    ConfigError,
    load_rule_configs,
    parse_rule_configs,
    validate_parameters,
)
from gitdetect.config.schema import RuleConfig, ScanParameters

__all__ = [
    "ConfigError",
    "RuleConfig",
    "ScanParameters",
    "load_rule_configs",
    "parse_rule_configs",
    "validate_parameters",
]
