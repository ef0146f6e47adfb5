"""Caller identity lookup through boto3 STS.

The dependency check uses this to confirm that credentials are usable
without shelling out to ``aws sts get-caller-identity``.  The session
honours the usual ``AWS_PROFILE`` / ``AWS_DEFAULT_REGION`` environment.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CallerIdentity:
    """Result of ``sts:GetCallerIdentity``."""

    account_id: str
    arn: str
    user_id: str = ""

    @property
    def username(self) -> str:
        return extract_username(self.arn)


def get_caller_identity(
    region: Optional[str] = None,
    profile: Optional[str] = None,
) -> CallerIdentity:
    """Return the identity behind the active credentials.

    Raises :class:`RuntimeError` on credential / network failures.
    """
    try:
        session = boto3.Session(profile_name=profile, region_name=region)
        identity = session.client("sts").get_caller_identity()
    except (BotoCoreError, ClientError) as exc:
        raise RuntimeError(f"AWS credentials invalid or inaccessible: {exc}") from exc

    logger.debug("Caller identity: %s", identity.get("Arn"))
    return CallerIdentity(
        account_id=identity["Account"],
        arn=identity["Arn"],
        user_id=identity.get("UserId", ""),
    )


def extract_username(arn: str) -> str:
    """Extract the IAM user or role-session name from an ARN.

    Examples::

        arn:aws:iam::123456789012:user/alice        → alice
        arn:aws:sts::123456789012:assumed-role/r/s   → s
        arn:aws:iam::123456789012:root               → root
    """
    parts = arn.split("/")
    if len(parts) >= 2:
        return parts[-1]
    return arn.rsplit(":", maxsplit=1)[-1]
