"""Subprocess wrapper for the external ``aws`` (and ``docker``) binaries.

Wraps each invocation as a subprocess so awsu never reimplements AWS CLI
behaviour.  Captured runs return stdout/stderr and, when stdout is JSON,
the parsed body; streamed runs inherit the terminal so long-running
commands such as ``aws logs tail --follow`` print as they go.
"""

from __future__ import annotations

import json
import logging
import os
import shlex
import subprocess
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

from awsu.errors import EXIT_TOOLCHAIN

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Result dataclass
# ---------------------------------------------------------------------------


@dataclass
class CommandResult:
    """Outcome of one external command invocation."""

    command: str
    returncode: int
    stdout: str = ""
    stderr: str = ""
    json_body: Any = None
    success: bool = False

    @property
    def json_ok(self) -> bool:
        return self.json_body is not None


# ---------------------------------------------------------------------------
# Runner
# ---------------------------------------------------------------------------


def run_command(
    argv: Sequence[str],
    *,
    capture: bool = True,
    input: Optional[str] = None,
    extra_env: Optional[Dict[str, str]] = None,
) -> CommandResult:
    """Run *argv* and return a :class:`CommandResult`.

    With ``capture=False`` the child writes straight to the terminal and
    only the exit status is recorded.  A missing binary is reported as
    return code 4 rather than raised.
    """
    cmd: List[str] = list(argv)
    env = {**os.environ}
    if extra_env:
        env.update(extra_env)

    text = shlex.join(cmd)
    logger.debug("Running: %s", text)

    try:
        proc = subprocess.run(
            cmd,
            capture_output=capture,
            input=input,
            text=True,
            env=env,
        )
    except FileNotFoundError:
        return CommandResult(
            command=text,
            returncode=EXIT_TOOLCHAIN,
            stderr=f"{cmd[0]} not found on PATH",
        )

    result = CommandResult(
        command=text,
        returncode=proc.returncode,
        stdout=(proc.stdout or "").strip() if capture else "",
        stderr=(proc.stderr or "").strip() if capture else "",
        success=proc.returncode == 0,
    )

    if result.stdout:
        try:
            result.json_body = json.loads(result.stdout)
        except json.JSONDecodeError:
            result.json_body = None

    if not result.success:
        logger.debug(
            "Command failed (rc=%d): %s | stderr: %s",
            result.returncode,
            text,
            result.stderr or "(no stderr)",
        )
    return result
