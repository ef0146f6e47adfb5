"""Commands whose execution is more than one ``aws`` call.

Handlers take over the execute path of a catalog entry (``handler=`` on the
command definition).  Show mode still renders through the generic path, except
where :data:`SHOW_RENDERERS` provides the lines to print.
"""

from __future__ import annotations

import logging
from typing import Callable, Dict, List, Optional

from awsu import ui
from awsu.dispatch.invocation import Confirm, Invocation, confirm_destructive
from awsu.dispatch.runner import CommandResult
from awsu.errors import EXIT_SUCCESS, ExternalCommandFailed

logger = logging.getLogger(__name__)

Runner = Callable[..., CommandResult]
Handler = Callable[..., int]

_TRUE_VALUES = {"true"}
_FALSE_VALUES = {"false"}
_EMPTY_IDS = {"", "None", "null"}


def _fail(result: CommandResult, message: str) -> ExternalCommandFailed:
    ui.fail(message)
    return ExternalCommandFailed(result.command, result.returncode, result.stderr)


# ---------------------------------------------------------------------------
# EKS auto mode
# ---------------------------------------------------------------------------


def _automode_query(inv: Invocation, query: str, output: str) -> List[str]:
    values = inv.display_values()
    return [
        "aws", "eks", "describe-cluster",
        "--name", values["cluster"],
        "--region", values["region"],
        "--query", query,
        "--output", output,
    ]


def current_automode(inv: Invocation, runner: Runner) -> CommandResult:
    """Query ``cluster.autoModeConfig.enabled`` for the invocation's cluster."""
    return runner(_automode_query(inv, "cluster.autoModeConfig.enabled", "text"))


def automode_status(inv: Invocation, *, runner: Runner, confirm: Confirm) -> int:
    ui.step(inv.message(inv.spec.announce))
    result = runner(inv.argv())
    if not result.success:
        raise _fail(result, "Failed to query cluster information")

    enabled = result.stdout.strip()
    lowered = enabled.lower()
    if lowered in _TRUE_VALUES:
        ui.ok("Auto mode is ENABLED")
    elif lowered in _FALSE_VALUES:
        ui.warn("Auto mode is DISABLED")
    elif enabled == "None":
        ui.warn("Auto mode is not explicitly configured (enabled: None)")
        ui.info("Auto mode configuration exists but the 'enabled' field is not set")
        ui.info("You may need to explicitly enable or disable auto mode for this cluster")
    elif lowered in {"null", ""}:
        config = runner(_automode_query(inv, "cluster.autoModeConfig", "json"))
        body = config.stdout.strip() if config.success else ""
        if body in {"", "null", "{}"}:
            ui.warn("Auto mode configuration is not available for this cluster")
            ui.info(
                "Auto mode is only available for EKS clusters created with "
                "Kubernetes version 1.27 or later"
            )
        else:
            ui.warn(f"Auto mode status: {enabled or 'unknown'}")
            ui.info(f"autoModeConfig: {body}")
    else:
        ui.warn(f"Auto mode status: {enabled}")
        ui.info("Unexpected return value. Please check the cluster configuration.")
    return EXIT_SUCCESS


def _report_update(inv: Invocation, result: CommandResult) -> None:
    update_id = result.stdout.strip()
    if update_id not in _EMPTY_IDS:
        ui.detail("Update ID", update_id)
    ui.info(inv.message("Check progress with: eks-automode-status {cluster} -r {region}"))


def automode_enable(inv: Invocation, *, runner: Runner, confirm: Confirm) -> int:
    ui.step(inv.message(inv.spec.announce))
    current = current_automode(inv, runner)
    if current.success and current.stdout.strip().lower() in _TRUE_VALUES:
        ui.warn(inv.message("Auto mode is already enabled for cluster: {cluster}"))
        return EXIT_SUCCESS

    result = runner(inv.argv())
    if not result.success:
        raise _fail(result, "Failed to enable auto mode")
    ui.ok("Auto mode enable request submitted successfully")
    _report_update(inv, result)
    return EXIT_SUCCESS


def automode_disable(inv: Invocation, *, runner: Runner, confirm: Confirm) -> int:
    current = current_automode(inv, runner)
    if current.success and current.stdout.strip().lower() in _FALSE_VALUES:
        ui.warn(inv.message("Auto mode is already disabled for cluster: {cluster}"))
        return EXIT_SUCCESS

    confirm_destructive(inv, confirm)

    ui.step(inv.message(inv.spec.announce))
    result = runner(inv.argv())
    if not result.success:
        raise _fail(result, "Failed to disable auto mode")
    ui.ok("Auto mode disable request submitted successfully")
    ui.warn("The cluster update is in progress. Resources managed by auto mode will be terminated.")
    _report_update(inv, result)
    ui.info(
        "After disabling auto mode, you may need to manually delete security "
        "groups created by auto mode:"
    )
    ui.plain(
        inv.message(
            "  aws ec2 describe-security-groups "
            "--filters Name=tag:eks:eks-cluster-name,Values={cluster} "
            "--query 'SecurityGroups[*].[GroupId,GroupName]'"
        )
    )
    return EXIT_SUCCESS


# ---------------------------------------------------------------------------
# ECR login
# ---------------------------------------------------------------------------

ACCOUNT_ID_ARGV = ["aws", "sts", "get-caller-identity", "--query", "Account", "--output", "text"]


def registry_host(account_id: str, region: str) -> str:
    return f"{account_id}.dkr.ecr.{region}.amazonaws.com"


def docker_login_argv(registry: str) -> List[str]:
    return ["docker", "login", "--username", "AWS", "--password-stdin", registry]


def ecr_login_show(inv: Invocation) -> List[str]:
    region = inv.display_values()["region"]
    account = "$(" + " ".join(ACCOUNT_ID_ARGV) + ")"
    login = " ".join(docker_login_argv(registry_host(account, region)))
    return ["# Get ECR login password", f"{inv.command_text()} | {login}"]


def ecr_login(inv: Invocation, *, runner: Runner, confirm: Confirm) -> int:
    ui.step(inv.message(inv.spec.announce))

    account = runner(ACCOUNT_ID_ARGV)
    if not account.success or not account.stdout.strip():
        raise _fail(account, "Unable to determine AWS account ID")

    password = runner(inv.argv())
    if not password.success:
        raise _fail(password, "Failed to get ECR login password")

    registry = registry_host(account.stdout.strip(), inv.display_values()["region"])
    login = runner(docker_login_argv(registry), input=password.stdout)
    if not login.success:
        raise _fail(login, f"docker login to {registry} failed")

    ui.ok(inv.spec.success_message)
    return EXIT_SUCCESS


# ---------------------------------------------------------------------------
# Registries
# ---------------------------------------------------------------------------

HANDLERS: Dict[str, Handler] = {
    "automode_status": automode_status,
    "automode_enable": automode_enable,
    "automode_disable": automode_disable,
    "ecr_login": ecr_login,
}

SHOW_RENDERERS: Dict[str, Callable[[Invocation], List[str]]] = {
    "ecr_login": ecr_login_show,
}


def get_handler(key: Optional[str]) -> Optional[Handler]:
    return HANDLERS.get(key) if key else None
