"""Host inspection and shell-profile helpers for the installers.

Only Ubuntu hosts are supported.  Everything here is a small, separately
testable function; paths default to the real system locations but can be
overridden.
"""

from __future__ import annotations

import logging
import os
import platform
from pathlib import Path
from typing import Dict, Iterable, Mapping, Optional

from awsu.errors import UnsupportedHost

logger = logging.getLogger(__name__)

OS_RELEASE = Path("/etc/os-release")

#: ``uname -m`` → release-artifact architecture.
ARCH_MAP: Dict[str, str] = {
    "x86_64": "amd64",
    "amd64": "amd64",
    "aarch64": "arm64",
    "arm64": "arm64",
}

#: ``uname -m`` → AWS CLI v2 bundle architecture.
AWS_CLI_ARCH_MAP: Dict[str, str] = {
    "x86_64": "x86_64",
    "amd64": "x86_64",
    "aarch64": "aarch64",
    "arm64": "aarch64",
}


# ---------------------------------------------------------------------------
# OS detection
# ---------------------------------------------------------------------------


def read_os_release(path: Path = OS_RELEASE) -> Dict[str, str]:
    """Parse ``/etc/os-release`` into a dict (empty when unreadable)."""
    try:
        text = path.read_text(encoding="utf-8")
    except OSError:
        return {}
    fields: Dict[str, str] = {}
    for line in text.splitlines():
        key, sep, value = line.partition("=")
        if sep:
            fields[key.strip()] = value.strip().strip('"')
    return fields


def is_ubuntu(path: Path = OS_RELEASE) -> bool:
    fields = read_os_release(path)
    return any("ubuntu" in fields.get(key, "").lower() for key in ("ID", "ID_LIKE", "NAME"))


def detected_os(path: Path = OS_RELEASE) -> str:
    return read_os_release(path).get("NAME") or "unknown"


def require_ubuntu(path: Path = OS_RELEASE) -> None:
    """Raise :class:`UnsupportedHost` unless running on Ubuntu."""
    if not is_ubuntu(path):
        raise UnsupportedHost(detected_os(path))


# ---------------------------------------------------------------------------
# Architecture
# ---------------------------------------------------------------------------


def machine_arch(machine: Optional[str] = None, *, aws_cli: bool = False) -> str:
    """Map ``uname -m`` to the architecture name used in download URLs.

    Raises :class:`ValueError` for unsupported architectures.
    """
    raw = (machine or platform.machine()).lower()
    table = AWS_CLI_ARCH_MAP if aws_cli else ARCH_MAP
    try:
        return table[raw]
    except KeyError:
        raise ValueError(f"Unsupported architecture: {raw}") from None


# ---------------------------------------------------------------------------
# Paths
# ---------------------------------------------------------------------------


def tool_root(env_var: str, default_dir: str, environ: Optional[Mapping[str, str]] = None) -> Path:
    """Return ``$<env_var>`` or ``~/<default_dir>``."""
    env = os.environ if environ is None else environ
    value = env.get(env_var, "")
    return Path(value).expanduser() if value else Path.home() / default_dir


def prepend_path(directory: Path) -> None:
    """Put *directory* at the front of this process's ``PATH`` (once)."""
    current = os.environ.get("PATH", "")
    entries = current.split(os.pathsep) if current else []
    text = str(directory)
    if text in entries:
        return
    os.environ["PATH"] = os.pathsep.join([text, *entries])
    logger.debug("PATH += %s", text)


# ---------------------------------------------------------------------------
# Shell profile
# ---------------------------------------------------------------------------


def shell_profile(
    environ: Optional[Mapping[str, str]] = None,
    home: Optional[Path] = None,
) -> Path:
    """Pick the profile file new PATH lines are appended to.

    zsh → ``~/.zshrc``; otherwise ``~/.bash_profile`` when it exists,
    else ``~/.bashrc``.
    """
    env = os.environ if environ is None else environ
    base = home or Path.home()
    shell = Path(env.get("SHELL", "")).name
    if shell == "zsh":
        return base / ".zshrc"
    if (base / ".bash_profile").is_file():
        return base / ".bash_profile"
    return base / ".bashrc"


def bashrc(home: Optional[Path] = None) -> Path:
    return (home or Path.home()) / ".bashrc"


def append_block(path: Path, marker: str, lines: Iterable[str]) -> bool:
    """Append *lines* to *path* unless *marker* already occurs in it.

    Returns ``True`` when the file was changed.
    """
    try:
        existing = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        existing = ""
    if marker in existing:
        return False
    block = "\n" + "\n".join(lines) + "\n"
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("a", encoding="utf-8") as fh:
        fh.write(block)
    logger.debug("Appended %d line(s) to %s", len(block.splitlines()) - 1, path)
    return True
