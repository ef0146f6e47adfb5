"""Dependency-check result models."""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List

from pydantic import BaseModel, Field


class CheckStatus(str, Enum):
    """Outcome of a single dependency check."""

    PASS = "PASS"
    WARN = "WARN"
    FAIL = "FAIL"


class CheckResult(BaseModel):
    """A single dependency check result.

    Attributes:
        id: Dotted identifier, e.g. ``tool.kubectl`` or ``aws.credentials``.
        status: PASS, WARN, or FAIL.
        details: Structured data such as version or account id.
        remediation: Human-readable fix suggestion.  Empty when status is PASS.
    """

    id: str
    status: CheckStatus
    details: Dict[str, Any] = Field(default_factory=dict)
    remediation: str = ""


class DependencyReport(BaseModel):
    """All checks from one ``check-deps`` run."""

    checks: List[CheckResult] = Field(default_factory=list)

    @property
    def passed(self) -> bool:
        """True when **no** check has FAIL status."""
        return not any(c.status == CheckStatus.FAIL for c in self.checks)

    @property
    def has_warnings(self) -> bool:
        return any(c.status == CheckStatus.WARN for c in self.checks)

    @property
    def failed_checks(self) -> List[CheckResult]:
        return [c for c in self.checks if c.status == CheckStatus.FAIL]

    @property
    def warned_checks(self) -> List[CheckResult]:
        return [c for c in self.checks if c.status == CheckStatus.WARN]
