"""Rule compiler — turns RuleConfig entries into compiled Rules, failing fast."""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import List, Sequence, Tuple

from gitdetect.config.loader import ConfigError, load_rule_configs
from gitdetect.config.schema import RuleConfig
from gitdetect.exploit.registry import ExploitRegistry
from gitdetect.rules.models import Rule

logger = logging.getLogger(__name__)


def _compile_patterns(patterns: Sequence[str], kind: str, tag: str) -> Tuple[re.Pattern[str], ...]:
    compiled = []
    for pattern in patterns:
        try:
            compiled.append(re.compile(pattern))
        except re.error as exc:
            raise ConfigError(f"Illegal {kind} regexp {pattern!r} in rule '{tag}': {exc}") from exc
    return tuple(compiled)


def compile_rule(config: RuleConfig, exploits: ExploitRegistry) -> Rule:
    """Compile a single configuration rule.

    The exploit name is resolved here so detection never looks it up by name.
    """
    tag = config.tag
    if not config.target:
        raise ConfigError(f"Rule '{tag}' has no Target regexp")
    if config.entropy < 0:
        raise ConfigError(f"Rule '{tag}' has a negative Entropy threshold")

    exploit = exploits.resolve(config.exploit_fn) if config.exploit_fn else None

    return Rule(
        target=_compile_patterns(config.target, "Target", tag),
        except_=_compile_patterns(config.except_, "Except", tag),
        entropy=config.entropy,
        tag=tag,
        exploit_fn=config.exploit_fn,
        exploit=exploit,
    )


def compile_rules(configs: Sequence[RuleConfig], exploits: ExploitRegistry) -> List[Rule]:
    """Compile every rule, preserving configuration order."""
    return [compile_rule(c, exploits) for c in configs]


def load_detection_rules(path: Path, exploits: ExploitRegistry) -> List[Rule]:
    """Read, parse and compile the rule configuration file at *path*."""
    rules = compile_rules(load_rule_configs(path), exploits)
    if not rules:
        raise ConfigError(f"No secret-detection-rules defined in {path}")
    logger.info("Loaded %d detection rule(s) from %s", len(rules), path)
    return rules
