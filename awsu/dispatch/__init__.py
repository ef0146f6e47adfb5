"""Command dispatch: resolve, render or execute catalog commands."""

from awsu.dispatch.dispatcher import (
    dispatch,
    execute,
    prepare,
    print_help,
    render_lines,
    resolve_params,
    validate,
)
from awsu.dispatch.invocation import Invocation, Mode, build_argv
from awsu.dispatch.runner import CommandResult, run_command

__all__ = [
    "CommandResult",
    "Invocation",
    "Mode",
    "build_argv",
    "dispatch",
    "execute",
    "prepare",
    "print_help",
    "render_lines",
    "resolve_params",
    "run_command",
    "validate",
]
