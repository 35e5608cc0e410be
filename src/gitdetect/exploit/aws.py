"""AWS verification hook — checks a detected secret access key against STS."""

from __future__ import annotations

import json
import logging
import re
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import List, Optional, Protocol

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from gitdetect.exploit.registry import ExploitError

logger = logging.getLogger(__name__)

AWS_STS_EXPLOIT = "AWSSTSExploit"

_ACCESS_KEY_ID_RE = re.compile(r"(?<![A-Z0-9])((?:AKIA|ASIA|AGPA|AIDA|AROA)[A-Z0-9]{16})(?![A-Z0-9])")


@dataclass(frozen=True)
class AWSInfo:
    """Caller identity of a live AWS credential."""

    account: str
    arn: str
    user_id: str


class AWSExploiter(Protocol):
    def access_aws(self, key_id: str, key_secret: str) -> Optional[AWSInfo]:
        """Return the identity behind the key pair, or None if it is not live."""
        ...


class STSExploiter:
    """AWSExploiter backed by ``sts:GetCallerIdentity``."""

    def __init__(self, region_name: str = "us-east-1") -> None:
        self.region_name = region_name

    def access_aws(self, key_id: str, key_secret: str) -> Optional[AWSInfo]:
        client = boto3.client(
            "sts",
            aws_access_key_id=key_id,
            aws_secret_access_key=key_secret,
            region_name=self.region_name,
        )
        try:
            response = client.get_caller_identity()
        except ClientError as exc:
            logger.debug("STS rejected key id %s: %s", key_id, exc.response.get("Error", {}).get("Code"))
            return None
        except BotoCoreError as exc:
            raise ExploitError(f"STS call failed: {exc}") from exc
        return AWSInfo(
            account=response.get("Account", ""),
            arn=response.get("Arn", ""),
            user_id=response.get("UserId", ""),
        )


def find_access_key_ids(text: str) -> List[str]:
    """Return the distinct AWS access key IDs in *text*, in order of appearance."""
    seen: List[str] = []
    for key_id in _ACCESS_KEY_ID_RE.findall(text):
        if key_id not in seen:
            seen.append(key_id)
    return seen


class AWSSTSExploit:
    """Pair a detected secret access key with the key IDs in its file.

    The secret is tried with every access key ID found in the same file;
    the first live identity is returned as a JSON document.
    """

    def __init__(self, exploiter: Optional[AWSExploiter] = None) -> None:
        self.exploiter: AWSExploiter = exploiter or STSExploiter()

    def __call__(self, secret_value: str, file_path: str) -> str:
        try:
            text = Path(file_path).read_text(encoding="utf-8", errors="replace")
        except OSError as exc:
            raise ExploitError(f"Cannot read {file_path}: {exc}") from exc

        key_ids = find_access_key_ids(text)
        if not key_ids:
            raise ExploitError(f"No AWS access key id found in {file_path}")

        for key_id in key_ids:
            info = self.exploiter.access_aws(key_id, secret_value)
            if info is not None:
                return json.dumps(asdict(info))

        raise ExploitError(f"No live AWS credential for {len(key_ids)} key id(s) in {file_path}")
