"""Tool availability: the ``ensure_tool`` capability and dependency checks.

:func:`ensure_tool` is what the dispatcher calls before executing a
command.  :func:`check_dependencies` builds the ``check-deps`` report:
the AWS CLI and working credentials are required, everything else only
produces warnings.
"""

from __future__ import annotations

import logging
import re
import shutil
from pathlib import Path
from typing import Callable, List, Optional

from awsu import ui
from awsu.aws.context import CallerIdentity, get_caller_identity
from awsu.config.models import AUTO_INSTALL_ENV_VARS, Settings
from awsu.dispatch.runner import run_command
from awsu.tools import host, installers
from awsu.tools.models import CheckResult, CheckStatus, DependencyReport
from awsu.tools.registry import OPTIONAL_TOOLS, TOOLS, ToolSpec, get_tool

logger = logging.getLogger(__name__)

_VERSION_RE = re.compile(r"v?(\d+\.\d+\.\d+)")

CREDENTIALS_REMEDIATION = "\n".join(
    [
        "Configure AWS credentials using one of the following methods:",
        "  1. Run: aws configure",
        "  2. Set environment variables: AWS_ACCESS_KEY_ID, AWS_SECRET_ACCESS_KEY",
        "  3. Use AWS SSO: aws sso login",
        "  4. Use IAM roles (if running on EC2/ECS/Lambda)",
    ]
)

IdentityLookup = Callable[[], CallerIdentity]


# ---------------------------------------------------------------------------
# Lookup helpers
# ---------------------------------------------------------------------------


def locate(spec: ToolSpec) -> Optional[str]:
    """Return the binary's path, looking in its private bin dir too."""
    if spec.bin_dir is not None:
        directory = spec.bin_dir()
        if directory.is_dir():
            host.prepend_path(directory)
    return shutil.which(spec.binary)


def tool_version(spec: ToolSpec) -> str:
    result = run_command([spec.binary, *spec.version_args])
    match = _VERSION_RE.search(f"{result.stdout}\n{result.stderr}")
    return match.group(1) if match else ""


def install_hint(spec: ToolSpec) -> str:
    lines = [f"Install {spec.display}: {spec.docs_url}"]
    env_var = AUTO_INSTALL_ENV_VARS.get(spec.name)
    if spec.install is not None and env_var:
        lines.append(f"To disable auto-installation, set: export {env_var}=false")
    return "\n".join(lines)


def _try_install(spec: ToolSpec, settings: Settings) -> Optional[str]:
    if spec.install is None or not settings.auto_install_enabled(spec.name):
        return None
    ui.step(f"Attempting to install {spec.display} automatically...")
    if not spec.install():
        return None
    return locate(spec)


# ---------------------------------------------------------------------------
# ensure_tool
# ---------------------------------------------------------------------------


def ensure_tool(name: str, settings: Settings) -> bool:
    """Return ``True`` when *name* is available, installing it if allowed."""
    spec = get_tool(name)
    if spec is None:
        return shutil.which(name) is not None
    if locate(spec):
        return True

    ui.fail(f"{spec.display} is not installed")
    if _try_install(spec, settings):
        return True
    for line in install_hint(spec).splitlines():
        ui.info(line)
    return False


# ---------------------------------------------------------------------------
# Individual checks
# ---------------------------------------------------------------------------


def check_tool(spec: ToolSpec, settings: Settings, *, install: bool = True) -> CheckResult:
    path = locate(spec)
    if path is None and install:
        path = _try_install(spec, settings)

    if path:
        return CheckResult(
            id=f"tool.{spec.name}",
            status=CheckStatus.PASS,
            details={"name": spec.display, "path": path, "version": tool_version(spec)},
        )

    remediation = install_hint(spec)
    if spec.purpose:
        remediation = f"{spec.purpose}\n{remediation}"
    return CheckResult(
        id=f"tool.{spec.name}",
        status=CheckStatus.FAIL if spec.required else CheckStatus.WARN,
        details={"name": spec.display},
        remediation=remediation,
    )


def check_credentials(lookup: Optional[IdentityLookup] = None) -> CheckResult:
    """Verify credentials with ``sts:GetCallerIdentity``."""
    try:
        identity = (lookup or get_caller_identity)()
    except RuntimeError as exc:
        logger.debug("Credential check failed: %s", exc)
        return CheckResult(
            id="aws.credentials",
            status=CheckStatus.FAIL,
            details={"name": "AWS credentials", "error": str(exc)},
            remediation=CREDENTIALS_REMEDIATION,
        )
    return CheckResult(
        id="aws.credentials",
        status=CheckStatus.PASS,
        details={
            "name": "AWS credentials",
            "account_id": identity.account_id,
            "arn": identity.arn,
            "user": identity.username,
        },
    )


def check_kubectl_alias(settings: Settings, home: Optional[Path] = None) -> Optional[CheckResult]:
    """Make sure ``alias k=kubectl`` is configured (skipped without kubectl)."""
    if not settings.auto_install_enabled("kubectl-alias") or shutil.which("kubectl") is None:
        return None
    rc = host.bashrc(home)
    try:
        configured = "alias k=kubectl" in rc.read_text(encoding="utf-8")
    except FileNotFoundError:
        configured = False
    if not configured:
        configured = installers.setup_kubectl_alias(home)
    return CheckResult(
        id="shell.kubectl_alias",
        status=CheckStatus.PASS if configured else CheckStatus.WARN,
        details={"name": "kubectl alias 'k'", "profile": str(rc)},
        remediation="" if configured else f"Run: source {rc} or restart your terminal",
    )


# ---------------------------------------------------------------------------
# Report
# ---------------------------------------------------------------------------


def check_dependencies(
    settings: Settings,
    *,
    quiet: bool = False,
    identity_lookup: Optional[IdentityLookup] = None,
    home: Optional[Path] = None,
) -> DependencyReport:
    """Run the required checks and, unless *quiet*, the optional ones."""
    checks: List[CheckResult] = [
        check_tool(TOOLS["aws"], settings),
        check_credentials(identity_lookup),
    ]
    if not quiet:
        for name in OPTIONAL_TOOLS:
            result = check_tool(TOOLS[name], settings)
            checks.append(result)
            if name == "fzf" and result.status is CheckStatus.PASS:
                installers.setup_fzf_config(home)
        alias = check_kubectl_alias(settings, home)
        if alias is not None:
            checks.append(alias)
    return DependencyReport(checks=checks)


def print_report(report: DependencyReport, *, quiet: bool = False) -> None:
    for check in report.checks:
        name = check.details.get("name", check.id)
        if check.status is CheckStatus.PASS:
            if "account_id" in check.details:
                ui.ok(f"{name} configured (Account: {check.details['account_id']})")
                ui.detail("Identity", check.details.get("arn", ""))
                if check.details.get("user"):
                    ui.detail("User", check.details["user"])
            elif check.details.get("version"):
                ui.ok(f"{name} version: {check.details['version']}")
            else:
                ui.ok(f"{name} is available")
            continue
        if check.status is CheckStatus.FAIL:
            if check.id == "aws.credentials":
                ui.fail("AWS credentials not configured or invalid")
            else:
                ui.fail(f"{name} is not installed")
        elif not quiet:
            ui.warn(f"{name} is not installed (optional)")
        else:
            continue
        for line in check.remediation.splitlines():
            ui.info(line)

    if not report.passed:
        ui.fail("Some required dependencies are missing. Please fix the errors above.")
    elif not quiet:
        ui.ok("All required dependencies are available")
