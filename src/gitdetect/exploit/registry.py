"""Exploit registry — named verification hooks resolved at rule-compile time."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable, Dict, List, Optional

from gitdetect.config.loader import ConfigError

if TYPE_CHECKING:
    from gitdetect.findings.models import Secret

logger = logging.getLogger(__name__)

# (secret_value, file_path) -> opaque payload; raise to signal failure
ExploitFn = Callable[[str, str], str]


class ExploitError(Exception):
    """Raised by an exploit hook when verification could not complete."""


class UnknownExploitError(ConfigError):
    """Raised when a rule names an exploit that is not registered."""


class ExploitRegistry:
    """Fixed mapping of exploit name -> hook, populated at startup."""

    def __init__(self) -> None:
        self._exploits: Dict[str, ExploitFn] = {}

    def register(self, name: str, fn: ExploitFn) -> None:
        self._exploits[name] = fn

    def resolve(self, name: str) -> ExploitFn:
        try:
            return self._exploits[name]
        except KeyError:
            known = ", ".join(self.names()) or "none"
            raise UnknownExploitError(
                f"ExploitFn '{name}' as configured was not found (registered: {known})"
            ) from None

    def names(self) -> List[str]:
        return sorted(self._exploits)

    def __contains__(self, name: object) -> bool:
        return name in self._exploits

    def __len__(self) -> int:
        return len(self._exploits)


def run_exploit(secret: "Secret") -> Optional[str]:
    """Run the rule's exploit hook for *secret*, if it has one.

    Returns the hook's payload, or None when the rule has no hook or the
    hook failed. A failing hook is logged and never aborts the scan.
    """
    rule = secret.rule
    if rule.exploit is None:
        return None
    try:
        return rule.exploit(secret.value, secret.file_name)
    except Exception as exc:  # hooks talk to the network; any failure is non-fatal
        logger.warning("ExploitFn %s failed for %s: %s", rule.exploit_fn, secret.file_name, exc)
        return None
