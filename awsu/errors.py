"""Error taxonomy shared by the parser, dispatcher and tool collaborators.

Every error carries the exit code the CLI should terminate with, so the
entry point can map any :class:`AwsuError` to a process status without
knowing its concrete type.
"""

from __future__ import annotations

# Exit codes
EXIT_SUCCESS = 0
EXIT_VALIDATION_FAILURE = 1
EXIT_TOOLCHAIN = 4
EXIT_INTERRUPTED = 130


class AwsuError(Exception):
    """Base class for all user-facing errors."""

    exit_code: int = EXIT_VALIDATION_FAILURE


# ---------------------------------------------------------------------------
# Usage errors (bad command line): always exit 1
# ---------------------------------------------------------------------------


class UsageError(AwsuError):
    """The command line could not be turned into a valid invocation."""


class MissingValue(UsageError):
    """A value-taking flag was given without a value."""

    def __init__(self, flag: str) -> None:
        super().__init__(f"{flag} requires a value")
        self.flag = flag


class UnknownOption(UsageError):
    """A token starting with ``-`` is not a recognized option."""

    def __init__(self, token: str) -> None:
        super().__init__(f"Unknown option: {token}")
        self.token = token


class UnexpectedArgument(UsageError):
    """A positional argument has no parameter to bind to."""

    def __init__(self, token: str) -> None:
        super().__init__(f"Unexpected argument: {token}")
        self.token = token


class MissingRequiredParameter(UsageError):
    """A required parameter resolved to an empty value."""

    def __init__(self, name: str, label: str = "") -> None:
        super().__init__(f"{label or name} is required")
        self.name = name


# ---------------------------------------------------------------------------
# Execution errors
# ---------------------------------------------------------------------------


class ExternalCommandFailed(AwsuError):
    """The wrapped tool exited non-zero; its code is passed through."""

    def __init__(self, command: str, returncode: int, stderr: str = "") -> None:
        detail = f": {stderr}" if stderr else ""
        super().__init__(f"Command failed (rc={returncode}): {command}{detail}")
        self.command = command
        self.returncode = returncode
        self.stderr = stderr
        self.exit_code = returncode or EXIT_VALIDATION_FAILURE


class ConfirmationDeclined(AwsuError):
    """The operator did not answer ``yes`` to a destructive operation."""

    exit_code = EXIT_SUCCESS

    def __init__(self, operation: str) -> None:
        super().__init__(f"Operation cancelled: {operation}")
        self.operation = operation


class ToolUnavailable(AwsuError):
    """A required binary is missing and could not be installed."""

    exit_code = EXIT_TOOLCHAIN

    def __init__(self, tool: str) -> None:
        super().__init__(f"{tool} is not installed")
        self.tool = tool


class UnsupportedHost(AwsuError):
    """The host OS is not one the tool supports."""

    def __init__(self, detected: str) -> None:
        super().__init__(f"This tool only supports Ubuntu (detected: {detected})")
        self.detected = detected
