"""Generic interpreter for catalog commands.

``dispatch()`` is the single entry point: parse the raw tokens against
the command's options, resolve parameters, decide the mode once and then
print help, render the command line, or execute it.

Parameter resolution order for each logical parameter:

1. the explicit flag (``-c demo``),
2. the positional at the parameter's index; a positional whose
   parameter was also given by flag is ignored,
3. the default (settings-derived or literal).

Positionals left over after binding are appended to ``--filters`` on
commands that accept filters and are an error everywhere else.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Sequence

from awsu import ui
from awsu.catalog.models import CommandSpec, OutputMode
from awsu.config.models import Settings
from awsu.dispatch.formatters import FORMATTERS
from awsu.dispatch.handlers import SHOW_RENDERERS, Runner, get_handler
from awsu.dispatch.invocation import (
    Confirm,
    EnsureTool,
    Invocation,
    Mode,
    confirm_destructive,
)
from awsu.dispatch.runner import run_command
from awsu.errors import (
    EXIT_SUCCESS,
    ExternalCommandFailed,
    MissingRequiredParameter,
    ToolUnavailable,
    UnexpectedArgument,
)
from awsu.options.parser import ParsedOptions, parse_args

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Preparation
# ---------------------------------------------------------------------------


def resolve_params(
    spec: CommandSpec, parsed: ParsedOptions, settings: Settings
) -> Dict[str, Any]:
    """Map every parameter of *spec* to its value for this call.

    Raises:
        UnexpectedArgument: A positional has nothing to bind to.
    """
    slots = {p.positional: p for p in spec.params if p.positional is not None}
    bound: Dict[str, Any] = {}
    remaining: List[str] = []
    for index, token in enumerate(parsed.positionals):
        p = slots.get(index)
        if p is None:
            remaining.append(token)
        elif parsed.is_explicit(p.dest):
            logger.debug("%s: %s given by flag, ignoring positional %r", spec.name, p.name, token)
        else:
            bound[p.name] = token

    values: Dict[str, Any] = {}
    for p in spec.params:
        if p.name in bound:
            value = bound[p.name]
        else:
            value = parsed.get(p.dest)
            if value is None:
                value = p.default_value(settings)
        values[p.name] = value

    if remaining:
        if not spec.accepts_filters:
            raise UnexpectedArgument(remaining[0])
        target = next(p for p in spec.params if p.is_list)
        values[target.name] = [*(values.get(target.name) or []), *remaining]

    return values


def validate(spec: CommandSpec, values: Dict[str, Any]) -> None:
    """Raise :class:`MissingRequiredParameter` for the first empty required value."""
    for p in spec.required_params:
        if values.get(p.name) in (None, "", []):
            raise MissingRequiredParameter(p.name, p.label)


def prepare(spec: CommandSpec, tokens: Sequence[str], settings: Settings) -> Invocation:
    """Parse *tokens* and decide the mode.

    Help short-circuits before any resolution or validation.
    """
    parsed = parse_args(tokens, spec.options(), spec.option_defaults(settings))
    if parsed.help:
        return Invocation(spec=spec, mode=Mode.HELP, options=parsed)

    values = resolve_params(spec, parsed, settings)
    validate(spec, values)
    mode = Mode.SHOW if parsed.show else Mode.EXECUTE
    logger.debug("%s: mode=%s values=%s", spec.name, mode.value, values)
    return Invocation(spec=spec, mode=mode, options=parsed, values=values)


# ---------------------------------------------------------------------------
# Help / show
# ---------------------------------------------------------------------------


def render_lines(inv: Invocation) -> List[str]:
    """Lines printed in show mode; normally the single ``aws`` command."""
    renderer = SHOW_RENDERERS.get(inv.spec.handler or "")
    if renderer is not None:
        return renderer(inv)
    return [inv.command_text()]


def print_help(spec: CommandSpec, settings: Settings) -> None:
    ui.usage(spec.usage())
    ui.plain("")
    ui.plain(spec.summary)
    ui.plain("")
    ui.plain("Options:")
    for p in spec.params:
        if p.option is None:
            continue
        text = p.option.help or p.label
        default = p.default_value(settings)
        if p.required and default is None:
            text += " (required)"
        elif default:
            text += f" (default: {default})"
        ui.plain(f"  {p.option.display:<28}{text}")
    for opt in spec.options()[-2:]:
        ui.plain(f"  {opt.display:<28}{opt.help}")
    if spec.destructive:
        ui.plain("")
        ui.plain("This operation asks for confirmation before it runs.")
    if spec.examples:
        ui.plain("")
        ui.plain("Examples:")
        for example in spec.examples:
            ui.plain(f"  {example}")
    ui.plain("")
    ui.plain(f"AWS Documentation: {spec.docs_url}")


# ---------------------------------------------------------------------------
# Execute
# ---------------------------------------------------------------------------


def execute(
    inv: Invocation,
    *,
    runner: Runner,
    confirm: Confirm,
    ensure_tool: EnsureTool,
) -> int:
    spec = inv.spec
    for tool in spec.tools:
        if not ensure_tool(tool):
            raise ToolUnavailable(tool)

    handler = get_handler(spec.handler)
    if handler is not None:
        return handler(inv, runner=runner, confirm=confirm)

    if spec.destructive:
        confirm_destructive(inv, confirm)

    if spec.announce:
        ui.step(inv.message(spec.announce))

    formatter = FORMATTERS.get(spec.formatter or "")
    capture = spec.output is OutputMode.JSON or formatter is not None
    result = runner(inv.argv(), capture=capture)

    if not result.success:
        if spec.failure_hint:
            ui.warn(inv.message(spec.failure_hint))
        raise ExternalCommandFailed(result.command, result.returncode, result.stderr)

    if formatter is not None:
        formatter(result, inv)
    elif capture:
        if result.json_ok:
            ui.json_body(result.stdout)
        elif result.stdout:
            ui.plain(result.stdout)

    if spec.success_message:
        ui.ok(inv.message(spec.success_message))
    return EXIT_SUCCESS


def dispatch(
    spec: CommandSpec,
    tokens: Sequence[str],
    settings: Settings,
    *,
    ensure_tool: EnsureTool,
    runner: Runner = run_command,
    confirm: Confirm = ui.ask_yes,
) -> int:
    """Run one catalog command end to end and return its exit code.

    Usage errors, declined confirmations, missing tools and failed
    external commands propagate as :class:`~awsu.errors.AwsuError`.
    """
    inv = prepare(spec, tokens, settings)

    if inv.mode is Mode.HELP:
        print_help(spec, settings)
        return EXIT_SUCCESS

    if inv.mode is Mode.SHOW:
        ui.show_command(render_lines(inv))
        return EXIT_SUCCESS

    return execute(inv, runner=runner, confirm=confirm, ensure_tool=ensure_tool)
