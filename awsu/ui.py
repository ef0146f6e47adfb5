"""Colorized console output for awsu commands.

Thin wrapper around :mod:`rich` that degrades gracefully when stdout
is not a TTY (e.g. piped, CI, cron).  All user-facing status messages
should flow through this module; ``logger.*`` calls are kept for
debug tracing only.
"""

from __future__ import annotations

from typing import Iterable, Sequence

from rich.console import Console
from rich.markup import escape
from rich.table import Table

# Shared console: auto-detects TTY; force_terminal=None lets Rich decide.
console = Console(stderr=False, force_terminal=None)

# ── Symbols ────────────────────────────────────────────────────────────────

_PASS = "[bold green]✓[/]"
_FAIL = "[bold red]✗[/]"
_WARN = "[bold yellow]⚠[/]"
_ARROW = "[bold cyan]›[/]"
_DOT = "[dim]·[/]"

# ── Headers ────────────────────────────────────────────────────────────────


def phase(title: str) -> None:
    """Print a bold section header (e.g. ``EKS``, ``DEPENDENCIES``)."""
    console.print()
    console.print(f"[bold blue]── {escape(title)} ──[/]")


# ── Status lines ───────────────────────────────────────────────────────────


def ok(msg: str) -> None:
    """Green checkmark + message."""
    console.print(f"  {_PASS} {escape(msg)}")


def fail(msg: str) -> None:
    """Red cross + message."""
    console.print(f"  {_FAIL} [red]{escape(msg)}[/]")


def warn(msg: str) -> None:
    """Yellow warning + message."""
    console.print(f"  {_WARN} [yellow]{escape(msg)}[/]")


def step(msg: str) -> None:
    """Cyan arrow + action message (in-progress)."""
    console.print(f"  {_ARROW} {escape(msg)}")


def info(msg: str) -> None:
    """Dim dot + informational message."""
    console.print(f"  {_DOT} [dim]{escape(msg)}[/]")


def detail(key: str, value: str) -> None:
    """Key-value pair, indented."""
    console.print(f"    [bold]{escape(key)}[/]: {escape(value)}")


def error_msg(msg: str) -> None:
    """Bold red error message (not indented)."""
    console.print(f"[bold red]ERROR:[/] {escape(msg)}", soft_wrap=True)


def plain(text: str) -> None:
    """Print *text* verbatim: no markup, no highlighting."""
    console.print(text, markup=False, highlight=False, soft_wrap=True)


def usage(line: str) -> None:
    """Print a ``Usage:`` line."""
    console.print(f"Usage: {escape(line)}", highlight=False, soft_wrap=True)


# ── Show mode ──────────────────────────────────────────────────────────────


def show_command(commands: Sequence[str]) -> None:
    """Print the rendered command line(s) for copy/paste."""
    title = "AWS CLI Command:" if len(commands) == 1 else "AWS CLI Commands:"
    console.print(f"[green]{title}[/]")
    for cmd in commands:
        console.print(f"  {escape(cmd)}", highlight=False, soft_wrap=True)
    console.print()
    console.print(
        "[blue]You can copy and run this command directly, "
        "or share it with your colleagues.[/]"
    )


# ── Structured output ──────────────────────────────────────────────────────


def json_body(text: str) -> None:
    """Pretty-print a JSON document."""
    console.print_json(text)


def table(headers: Sequence[str], rows: Iterable[Sequence[str]]) -> None:
    """Render *rows* as a simple table."""
    tbl = Table(show_header=True, header_style="bold", box=None, pad_edge=False)
    for header in headers:
        tbl.add_column(header)
    for row in rows:
        tbl.add_row(*(escape(str(cell)) for cell in row))
    console.print(tbl)


# ── Interaction ────────────────────────────────────────────────────────────


def ask_yes(question: str) -> bool:
    """Prompt for confirmation; only an exact ``yes`` counts.

    A closed or exhausted stdin reads as an empty answer.
    """
    try:
        answer = console.input(f"{escape(question)} (yes/no): ")
    except EOFError:
        console.print()
        return False
    return answer.strip() == "yes"
