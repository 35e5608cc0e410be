"""Exploit hooks — optional verification that a detected secret is live."""

from __future__ import annotations

from typing import Optional

from gitdetect.exploit.aws import AWS_STS_EXPLOIT, AWSExploiter, AWSInfo, AWSSTSExploit
from gitdetect.exploit.registry import (
    ExploitError,
    ExploitFn,
    ExploitRegistry,
    UnknownExploitError,
    run_exploit,
)


def default_registry(aws_exploiter: Optional[AWSExploiter] = None) -> ExploitRegistry:
    """Build the registry of every exploit shipped with gitdetect."""
    registry = ExploitRegistry()
    registry.register(AWS_STS_EXPLOIT, AWSSTSExploit(aws_exploiter))
    return registry


__all__ = [
    "AWS_STS_EXPLOIT",
    "AWSExploiter",
    "AWSInfo",
    "AWSSTSExploit",
    "ExploitError",
    "ExploitFn",
    "ExploitRegistry",
    "UnknownExploitError",
    "default_registry",
    "run_exploit",
]
