"""Installers for the AWS CLI and adjacent developer tools (Ubuntu only).

Each ``install_*`` function returns ``True`` when the tool is usable
afterwards and ``False`` otherwise; progress and problems are printed
through :mod:`awsu.ui`.  Downloads go through :mod:`requests`, external
steps (``sudo install``, ``git clone``, ``krew install``) through
:func:`awsu.dispatch.runner.run_command`.
"""

from __future__ import annotations

import logging
import shutil
import stat
import tarfile
import tempfile
import zipfile
from pathlib import Path
from typing import List, Optional, Sequence

import requests

from awsu import ui
from awsu.dispatch.runner import run_command
from awsu.errors import UnsupportedHost
from awsu.tools import host

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

INSTALL_DIR = Path("/usr/local/bin")
HTTP_TIMEOUT = 30

AWS_CLI_URL = "https://awscli.amazonaws.com/awscli-exe-linux-{arch}.zip"
KUBECTL_STABLE_URL = "https://dl.k8s.io/release/stable.txt"
KUBECTL_URL = "https://dl.k8s.io/release/{version}/bin/linux/{arch}/kubectl"
KREW_URL = "https://github.com/kubernetes-sigs/krew/releases/latest/download/krew-linux_{arch}.tar.gz"
HELM_SCRIPT_URL = "https://raw.githubusercontent.com/helm/helm/main/scripts/get-helm-3"
KUSTOMIZE_RELEASES = "kubernetes-sigs/kustomize"
KUSTOMIZE_FALLBACK = "v5.4.1"
KUSTOMIZE_URL = (
    "https://github.com/kubernetes-sigs/kustomize/releases/download/"
    "kustomize%2F{version}/kustomize_{version}_linux_{arch}.tar.gz"
)
PACKER_RELEASES = "hashicorp/packer"
PACKER_FALLBACK = "1.10.0"
PACKER_URL = "https://releases.hashicorp.com/packer/{version}/packer_{version}_linux_{arch}.zip"
TFENV_REPO = "https://github.com/tfutils/tfenv.git"
FZF_REPO = "https://github.com/junegunn/fzf.git"

KUBECTL_PLUGINS = ("ns", "ctx", "history", "images")

KREW_PROFILE_LINE = 'export PATH="${KREW_ROOT:-$HOME/.krew}/bin:$PATH"'
FZF_OPTS = "--height 40% --layout=reverse --border"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def krew_bin() -> Path:
    return host.tool_root("KREW_ROOT", ".krew") / "bin"


def tfenv_root() -> Path:
    return host.tool_root("TFENV_ROOT", ".tfenv")


def fzf_root() -> Path:
    return host.tool_root("FZF_ROOT", ".fzf")


def download(url: str, dest: Path) -> Path:
    """Stream *url* into *dest*.

    Raises :class:`requests.RequestException` on HTTP / network errors.
    """
    logger.debug("Downloading %s -> %s", url, dest)
    with requests.get(url, stream=True, timeout=HTTP_TIMEOUT) as response:
        response.raise_for_status()
        with dest.open("wb") as fh:
            for chunk in response.iter_content(chunk_size=1 << 16):
                fh.write(chunk)
    return dest


def fetch_text(url: str) -> str:
    response = requests.get(url, timeout=HTTP_TIMEOUT)
    response.raise_for_status()
    return response.text.strip()


def latest_release(repo: str, fallback: str, *, strip_prefix: str = "") -> str:
    """Return the latest GitHub release tag of *repo*, or *fallback*."""
    url = f"https://api.github.com/repos/{repo}/releases/latest"
    try:
        response = requests.get(url, timeout=HTTP_TIMEOUT)
        response.raise_for_status()
        tag = str(response.json().get("tag_name") or "")
    except (requests.RequestException, ValueError) as exc:
        logger.debug("Release lookup for %s failed: %s", repo, exc)
        tag = ""
    if strip_prefix and tag.startswith(strip_prefix):
        tag = tag[len(strip_prefix):]
    return tag or fallback


def _ok(cmd: Sequence[str], *, capture: bool = True) -> bool:
    result = run_command(cmd, capture=capture)
    if not result.success:
        ui.warn(f"{result.command} failed (rc={result.returncode})")
        if result.stderr:
            ui.info(result.stderr.splitlines()[-1])
    return result.success


def _sudo_install(src: Path, name: str) -> bool:
    return _ok(["sudo", "install", "-m", "0755", str(src), str(INSTALL_DIR / name)])


def _preflight(display: str) -> Optional[str]:
    """Check the host and return the artifact architecture, or ``None``."""
    try:
        host.require_ubuntu()
        return host.machine_arch()
    except (UnsupportedHost, ValueError) as exc:
        ui.fail(str(exc))
        ui.warn(f"Cannot install {display} automatically on this host")
        return None


def _ensure_apt_package(binary: str, package: Optional[str] = None) -> bool:
    if shutil.which(binary):
        return True
    ui.step(f"{binary} not found, installing...")
    return _ok(["sudo", "apt-get", "update", "-qq"], capture=False) and _ok(
        ["sudo", "apt-get", "install", "-y", package or binary], capture=False
    )


# ---------------------------------------------------------------------------
# AWS CLI
# ---------------------------------------------------------------------------


def install_aws_cli() -> bool:
    """Install AWS CLI v2 with the official bundle and ``sudo ./aws/install``."""
    if _preflight("AWS CLI") is None:
        return False
    arch = host.machine_arch(aws_cli=True)
    if not _ensure_apt_package("unzip"):
        return False

    url = AWS_CLI_URL.format(arch=arch)
    ui.step(f"Downloading AWS CLI v2 from {url}...")
    with tempfile.TemporaryDirectory() as tmp:
        workdir = Path(tmp)
        try:
            archive = download(url, workdir / "awscliv2.zip")
        except requests.RequestException as exc:
            ui.fail(f"Failed to download AWS CLI: {exc}")
            return False
        if not _ok(["unzip", "-q", str(archive), "-d", str(workdir)]):
            ui.fail("Failed to extract AWS CLI archive")
            return False
        ui.step("Installing AWS CLI (this may require sudo password)...")
        if not _ok(["sudo", str(workdir / "aws" / "install"), "--update"], capture=False):
            ui.fail("Failed to install AWS CLI automatically")
            ui.info("Official installation guide: https://docs.aws.amazon.com/cli/latest/userguide/getting-started-install.html")
            return False

    host.prepend_path(INSTALL_DIR)
    if shutil.which("aws") is None:
        ui.warn("AWS CLI installation completed but 'aws' command not found in PATH")
        return False
    ui.ok("AWS CLI installed successfully")
    return True


# ---------------------------------------------------------------------------
# Kubernetes tools
# ---------------------------------------------------------------------------


def install_kubectl() -> bool:
    arch = _preflight("kubectl")
    if arch is None:
        return False
    ui.step("Installing kubectl...")
    with tempfile.TemporaryDirectory() as tmp:
        try:
            version = fetch_text(KUBECTL_STABLE_URL)
            binary = download(KUBECTL_URL.format(version=version, arch=arch), Path(tmp) / "kubectl")
        except requests.RequestException as exc:
            ui.fail(f"Failed to download kubectl: {exc}")
            return False
        if not _sudo_install(binary, "kubectl"):
            return False
    ui.ok(f"kubectl {version} installed successfully")
    return True


def install_krew() -> bool:
    """Install krew and add its bin dir to PATH and the shell profile."""
    arch = _preflight("krew")
    if arch is None:
        return False
    if shutil.which("kubectl") is None:
        ui.warn("kubectl is required for krew installation")
        return False

    ui.step("Installing krew...")
    with tempfile.TemporaryDirectory() as tmp:
        workdir = Path(tmp)
        try:
            archive = download(KREW_URL.format(arch=arch), workdir / "krew.tar.gz")
        except requests.RequestException as exc:
            ui.fail(f"Failed to download krew: {exc}")
            return False
        with tarfile.open(archive, "r:gz") as tar:
            tar.extractall(workdir, filter="data")
        if not _ok([str(workdir / f"krew-linux_{arch}"), "install", "krew"], capture=False):
            return False

    host.prepend_path(krew_bin())
    profile = host.shell_profile()
    host.append_block(profile, "KREW_ROOT", ["# krew (kubectl plugin manager)", KREW_PROFILE_LINE])
    ui.ok("krew installed successfully")
    ui.info(f"Added to shell profile ({profile}). Restart your terminal or run: source {profile}")
    return True


def install_helm() -> bool:
    if _preflight("Helm") is None:
        return False
    ui.step("Installing Helm...")
    with tempfile.TemporaryDirectory() as tmp:
        try:
            script = download(HELM_SCRIPT_URL, Path(tmp) / "get-helm-3")
        except requests.RequestException as exc:
            ui.fail(f"Failed to download the Helm installer: {exc}")
            return False
        if not _ok(["bash", str(script)], capture=False):
            return False
    if shutil.which("helm") is None:
        ui.warn("Failed to install Helm")
        return False
    ui.ok("Helm installed successfully")
    return True


def install_kustomize() -> bool:
    arch = _preflight("Kustomize")
    if arch is None:
        return False
    version = latest_release(
        KUSTOMIZE_RELEASES, KUSTOMIZE_FALLBACK, strip_prefix="kustomize/"
    )
    ui.step(f"Installing Kustomize {version}...")
    with tempfile.TemporaryDirectory() as tmp:
        workdir = Path(tmp)
        try:
            archive = download(
                KUSTOMIZE_URL.format(version=version, arch=arch), workdir / "kustomize.tar.gz"
            )
        except requests.RequestException as exc:
            ui.fail(f"Failed to download Kustomize: {exc}")
            return False
        with tarfile.open(archive, "r:gz") as tar:
            tar.extract("kustomize", workdir, filter="data")
        if not _sudo_install(workdir / "kustomize", "kustomize"):
            return False
    ui.ok(f"Kustomize {version} installed successfully")
    return True


def install_kubectl_plugins(plugins: Sequence[str] = KUBECTL_PLUGINS) -> List[str]:
    """Install krew plugins; return the ones that installed."""
    if shutil.which("kubectl") is None:
        ui.warn("kubectl is required for plugin installation")
        return []
    host.prepend_path(krew_bin())
    if shutil.which("kubectl-krew") is None:
        ui.step("krew not found, installing krew first...")
        if not install_krew():
            return []

    ui.step("Installing kubectl plugins...")
    installed: List[str] = []
    for plugin in plugins:
        if run_command(["kubectl", "krew", "install", plugin]).success:
            ui.ok(f"Installed plugin: {plugin}")
            installed.append(plugin)
        else:
            ui.warn(f"Failed to install plugin: {plugin}")
    failed = len(plugins) - len(installed)
    if installed:
        ui.ok(f"Installed {len(installed)} kubectl plugin(s)")
    if failed:
        ui.warn(f"Failed to install {failed} plugin(s)")
    return installed


def setup_kubectl_alias(home: Optional[Path] = None) -> bool:
    """Add ``alias k=kubectl`` and kubectl completion to ``~/.bashrc``."""
    if shutil.which("kubectl") is None:
        ui.warn("kubectl is required for 'k' alias setup")
        return False
    rc = host.bashrc(home)
    host.append_block(rc, "alias k=kubectl", ["# kubectl alias", "alias k=kubectl"])
    host.append_block(
        rc,
        "source <(kubectl completion bash)",
        [
            "# kubectl bash completion",
            "source <(kubectl completion bash)",
            "complete -F __start_kubectl k",
        ],
    )
    ui.ok("kubectl alias 'k' configured with autocompletion")
    ui.info(f"Restart your terminal or run: source {rc}")
    return True


# ---------------------------------------------------------------------------
# Terraform / Packer / fzf
# ---------------------------------------------------------------------------


def _clone_or_pull(repo: str, target: Path, *, shallow: bool = False) -> bool:
    if not _ensure_apt_package("git"):
        return False
    if target.is_dir():
        ui.info(f"{target} already exists, updating...")
        return _ok(["git", "-C", str(target), "pull"])
    cmd = ["git", "clone"]
    if shallow:
        cmd += ["--depth", "1"]
    return _ok([*cmd, repo, str(target)])


def install_tfenv() -> bool:
    if _preflight("tfenv") is None:
        return False
    root = tfenv_root()
    ui.step("Installing tfenv...")
    if not _clone_or_pull(TFENV_REPO, root):
        ui.warn("Failed to install tfenv")
        return False
    host.prepend_path(root / "bin")
    ui.ok("tfenv installed successfully")
    ui.info('Add to your shell profile: export PATH="${TFENV_ROOT:-$HOME/.tfenv}/bin:$PATH"')
    ui.info("Install Terraform: tfenv install latest")
    return True


def install_packer() -> bool:
    arch = _preflight("Packer")
    if arch is None:
        return False
    version = latest_release(PACKER_RELEASES, PACKER_FALLBACK, strip_prefix="v")
    ui.step(f"Installing Packer {version}...")
    with tempfile.TemporaryDirectory() as tmp:
        workdir = Path(tmp)
        try:
            archive = download(PACKER_URL.format(version=version, arch=arch), workdir / "packer.zip")
        except requests.RequestException as exc:
            ui.fail(f"Failed to download Packer: {exc}")
            return False
        with zipfile.ZipFile(archive) as zf:
            binary = Path(zf.extract("packer", workdir))
        binary.chmod(binary.stat().st_mode | stat.S_IXUSR)
        if not _sudo_install(binary, "packer"):
            return False
    ui.ok(f"Packer {version} installed successfully")
    return True


def install_fzf(home: Optional[Path] = None) -> bool:
    if _preflight("fzf") is None:
        return False
    root = fzf_root()
    ui.step("Installing fzf...")
    if not _clone_or_pull(FZF_REPO, root, shallow=True):
        ui.warn("Failed to install fzf")
        return False
    if not _ok(["bash", str(root / "install"), "--bin"]):
        ui.warn("fzf install script failed, but repository cloned")
        return False
    host.prepend_path(root / "bin")
    host.append_block(
        host.bashrc(home),
        "fzf.bash",
        ["# fzf key bindings and completion", "[ -f ~/.fzf.bash ] && source ~/.fzf.bash"],
    )
    ui.ok("fzf installed successfully")
    ui.info("Key bindings: Ctrl+R (history), Ctrl+T (file search), Alt+C (cd)")
    return True


def setup_fzf_config(home: Optional[Path] = None) -> bool:
    """Write fzf defaults and preview aliases to ``~/.bashrc`` once."""
    if shutil.which("fzf") is None:
        return False
    changed = host.append_block(
        host.bashrc(home),
        "# fzf aliases and functions",
        [
            "# fzf aliases and functions",
            f"export FZF_DEFAULT_OPTS='{FZF_OPTS}'",
            "export FZF_CTRL_T_OPTS=\"--preview 'bat --color=always --style=header,grid --line-range :300 {}'\"",
            "alias fzfv='fzf --preview \"bat --color=always --style=header,grid --line-range :300 {}\"'",
            "alias fzfg='fzf --preview \"git diff {}\"'",
        ],
    )
    if changed:
        ui.ok("fzf configuration completed")
    return True


# ---------------------------------------------------------------------------
# Bundles
# ---------------------------------------------------------------------------


def install_k8s_tools(*, plugins: bool = False, home: Optional[Path] = None) -> bool:
    """Install kubectl, krew, helm and kustomize; optionally krew plugins.

    Individual failures are reported and do not stop the remaining
    installs.  Returns ``True`` when every tool installed.
    """
    ui.phase("Installing Kubernetes tools")
    steps = (
        ("kubectl", install_kubectl),
        ("krew", install_krew),
        ("Helm", install_helm),
        ("Kustomize", install_kustomize),
    )
    failed = []
    for display, install in steps:
        if not install():
            ui.warn(f"Failed to install {display}")
            failed.append(display)

    if plugins:
        install_kubectl_plugins()
    setup_kubectl_alias(home)

    if failed:
        ui.warn(f"Kubernetes tools installed with failures: {', '.join(failed)}")
    else:
        ui.ok("Kubernetes tools installation complete")
    ui.info("You may need to restart your terminal or reload your shell profile")
    return not failed
