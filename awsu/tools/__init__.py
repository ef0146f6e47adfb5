"""External tool collaborators: detection, dependency checks and installers."""

from awsu.tools.checks import (
    check_credentials,
    check_dependencies,
    check_kubectl_alias,
    check_tool,
    ensure_tool,
    print_report,
)
from awsu.tools.installers import install_k8s_tools
from awsu.tools.models import CheckResult, CheckStatus, DependencyReport
from awsu.tools.registry import TOOLS, ToolSpec, get_tool

__all__ = [
    "CheckResult",
    "CheckStatus",
    "DependencyReport",
    "TOOLS",
    "ToolSpec",
    "check_credentials",
    "check_dependencies",
    "check_kubectl_alias",
    "check_tool",
    "ensure_tool",
    "get_tool",
    "install_k8s_tools",
    "print_report",
]
