"""Table of external tools awsu knows how to find, check and install."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, Optional, Tuple

from awsu.tools import installers


@dataclass(frozen=True)
class ToolSpec:
    """One external binary.

    Attributes:
        name: Key used by catalog ``tools=`` and auto-install toggles.
        binary: Executable looked up on ``PATH``.
        display: Name used in messages.
        docs_url: Manual install instructions.
        install: Installer, or ``None`` when awsu cannot install it.
        required: Missing → FAIL in the dependency report (else WARN).
        bin_dir: Private bin directory added to ``PATH`` before lookup.
        version_args: Arguments printing the version.
        purpose: Extra line shown when the tool is missing.
    """

    name: str
    binary: str
    display: str
    docs_url: str
    install: Optional[Callable[[], bool]] = None
    required: bool = False
    bin_dir: Optional[Callable[[], Path]] = None
    version_args: Tuple[str, ...] = ("--version",)
    purpose: str = ""


TOOLS: Dict[str, ToolSpec] = {
    spec.name: spec
    for spec in (
        ToolSpec(
            name="aws",
            binary="aws",
            display="AWS CLI",
            docs_url="https://aws.amazon.com/cli/",
            install=installers.install_aws_cli,
            required=True,
        ),
        ToolSpec(
            name="jq",
            binary="jq",
            display="jq",
            docs_url="https://stedolan.github.io/jq/download/",
            purpose="Handy for filtering the JSON printed by describe commands",
        ),
        ToolSpec(
            name="docker",
            binary="docker",
            display="docker",
            docs_url="https://docs.docker.com/get-docker/",
            purpose="The 'ecr-login' command requires docker",
        ),
        ToolSpec(
            name="kubectl",
            binary="kubectl",
            display="kubectl",
            docs_url="https://kubernetes.io/docs/tasks/tools/",
            install=installers.install_kubectl,
            version_args=("version", "--client"),
        ),
        ToolSpec(
            name="krew",
            binary="kubectl-krew",
            display="krew",
            docs_url="https://krew.sigs.k8s.io/",
            install=installers.install_krew,
            bin_dir=installers.krew_bin,
            version_args=("version",),
        ),
        ToolSpec(
            name="helm",
            binary="helm",
            display="Helm",
            docs_url="https://helm.sh/docs/intro/install/",
            install=installers.install_helm,
            version_args=("version", "--short"),
        ),
        ToolSpec(
            name="kustomize",
            binary="kustomize",
            display="Kustomize",
            docs_url="https://kustomize.io/",
            install=installers.install_kustomize,
            version_args=("version",),
        ),
        ToolSpec(
            name="tfenv",
            binary="tfenv",
            display="tfenv",
            docs_url="https://github.com/tfutils/tfenv",
            install=installers.install_tfenv,
            bin_dir=lambda: installers.tfenv_root() / "bin",
        ),
        ToolSpec(
            name="packer",
            binary="packer",
            display="Packer",
            docs_url="https://www.packer.io/downloads",
            install=installers.install_packer,
            version_args=("version",),
        ),
        ToolSpec(
            name="fzf",
            binary="fzf",
            display="fzf",
            docs_url="https://github.com/junegunn/fzf",
            install=installers.install_fzf,
            bin_dir=lambda: installers.fzf_root() / "bin",
        ),
    )
}

#: Optional tools in the order ``check-deps`` reports them.
OPTIONAL_TOOLS: Tuple[str, ...] = (
    "jq",
    "docker",
    "kubectl",
    "krew",
    "helm",
    "kustomize",
    "tfenv",
    "packer",
    "fzf",
)

#: Tools ``install-k8s-tools`` installs, in order.
K8S_TOOLS: Tuple[str, ...] = ("kubectl", "krew", "helm", "kustomize")


def get_tool(name: str) -> Optional[ToolSpec]:
    return TOOLS.get(name)
