"""CLI entry point for awsu, built on typer.

Every catalog entry becomes a subcommand whose raw tokens are handed to
:func:`awsu.dispatch.dispatch`; ``aws-help``, ``install-k8s-tools`` and
``check-deps`` are regular typer commands.

Usage::

    awsu eks-update-config -c my-cluster -r us-east-1
    awsu ec2-list --filters Name=instance-state-name,Values=running --show
    awsu check-deps --quiet
"""

from __future__ import annotations

import logging
import sys
from functools import partial
from typing import List, Sequence

import typer
from typer.core import TyperCommand

from awsu import __version__, ui
from awsu.catalog import CATALOG, CommandSpec, grouped
from awsu.config import AUTO_INSTALL_ENV_VARS, Settings, load_settings
from awsu.dispatch import dispatch
from awsu.errors import (
    EXIT_INTERRUPTED,
    EXIT_SUCCESS,
    EXIT_VALIDATION_FAILURE,
    AwsuError,
    ConfirmationDeclined,
    UsageError,
)
from awsu.tools import check_dependencies, ensure_tool, install_k8s_tools, print_report
from awsu.tools.host import require_ubuntu

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="awsu",
    help="Shortcuts for common AWS CLI operations and developer tool setup.",
    add_completion=False,
    no_args_is_help=True,
)


class RawArgsCommand(TyperCommand):
    """Command that skips click parsing and keeps every token in ``ctx.args``.

    Catalog commands parse their own options (including ``--`` and
    ``-h``), so click must not consume anything.
    """

    def parse_args(self, ctx, args: List[str]) -> List[str]:  # type: ignore[override]
        ctx.args = list(args)
        return ctx.args


# ── Root callback (global options) ───────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        ui.plain(f"awsu {__version__}")
        raise typer.Exit(EXIT_SUCCESS)


@app.callback()
def _root_callback(
    ctx: typer.Context,
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging."),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show the version and exit.",
    ),
) -> None:
    """AWS CLI shortcuts and developer tool bootstrap."""
    if debug:
        logging.basicConfig(level=logging.DEBUG)

    try:
        settings = load_settings()
    except ValueError as exc:
        ui.error_msg(str(exc))
        raise typer.Exit(EXIT_VALIDATION_FAILURE) from exc

    if not settings.skip_host_check:
        try:
            require_ubuntu()
        except AwsuError as exc:
            ui.error_msg(str(exc))
            ui.info("Set AWSU_SKIP_HOST_CHECK=true to bypass this check")
            raise typer.Exit(exc.exit_code) from exc

    ctx.obj = settings


def _settings(ctx: typer.Context) -> Settings:
    return ctx.obj if isinstance(ctx.obj, Settings) else load_settings()


# ── Catalog commands ─────────────────────────────────────────────────────────


def run_catalog_command(spec: CommandSpec, tokens: Sequence[str], settings: Settings) -> int:
    """Dispatch one catalog command and map errors to exit codes."""
    try:
        return dispatch(
            spec,
            tokens,
            settings,
            ensure_tool=partial(ensure_tool, settings=settings),
        )
    except ConfirmationDeclined:
        ui.info("Operation cancelled")
        return EXIT_SUCCESS
    except UsageError as exc:
        ui.error_msg(str(exc))
        ui.usage(spec.usage())
        return exc.exit_code
    except AwsuError as exc:
        ui.error_msg(str(exc))
        return exc.exit_code
    except KeyboardInterrupt:
        ui.warn("Interrupted")
        return EXIT_INTERRUPTED


def _make_command(spec: CommandSpec):
    def command(ctx: typer.Context) -> None:
        raise typer.Exit(run_catalog_command(spec, ctx.args, _settings(ctx)))

    command.__name__ = spec.name.replace("-", "_")
    command.__doc__ = f"{spec.summary}. Run with -h for options."
    return command


def _register_catalog() -> None:
    for spec in CATALOG:
        app.command(
            name=spec.name,
            cls=RawArgsCommand,
            add_help_option=False,
            rich_help_panel=spec.group,
            context_settings={"ignore_unknown_options": True, "allow_extra_args": True},
        )(_make_command(spec))


_register_catalog()


# ── Host commands ────────────────────────────────────────────────────────────


@app.command("aws-help")
def aws_help(ctx: typer.Context) -> None:
    """List every AWS shortcut, grouped by service."""
    settings = _settings(ctx)
    ui.plain("AWS CLI shortcuts")
    for group, specs in grouped().items():
        ui.phase(group)
        for spec in specs:
            ui.plain(f"  {spec.name:<28}{spec.summary}")

    ui.phase("Tools")
    ui.plain(f"  {'install-k8s-tools':<28}Install kubectl, krew, helm and kustomize")
    ui.plain(f"  {'check-deps':<28}Check the AWS CLI, credentials and optional tools")

    ui.phase("Defaults")
    ui.detail("Region", f"{settings.default_region} (AWS_DEFAULT_REGION)")
    ui.detail("Cluster", f"{settings.default_cluster} (AWS_EKS_CLUSTER)")

    ui.phase("Auto-install toggles")
    for tool, var in AUTO_INSTALL_ENV_VARS.items():
        state = "on" if settings.auto_install_enabled(tool) else "off"
        ui.detail(var, state)

    ui.plain("")
    ui.plain("Every command accepts -h/--help and --show (print the AWS CLI command without running it).")


@app.command("install-k8s-tools")
def install_k8s_tools_cmd(
    plugins: bool = typer.Option(
        False,
        "--plugins",
        "-p",
        help="Also install kubectl plugins (ns, ctx, history, images).",
    ),
) -> None:
    """Install Kubernetes tools: kubectl, krew, helm, kustomize."""
    try:
        ok = install_k8s_tools(plugins=plugins)
    except KeyboardInterrupt:
        raise typer.Exit(EXIT_INTERRUPTED)
    raise typer.Exit(EXIT_SUCCESS if ok else EXIT_VALIDATION_FAILURE)


@app.command("check-deps")
def check_deps(
    ctx: typer.Context,
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="Only run required checks (also enabled by AWS_QUIET_CHECKS=true).",
    ),
) -> None:
    """Check the AWS CLI, credentials and optional developer tools.

    Exits 0 when the required dependencies are available, 1 otherwise.
    """
    settings = _settings(ctx)
    quiet_mode = quiet or settings.quiet_checks
    if not quiet_mode:
        ui.phase("Checking dependencies")
    report = check_dependencies(settings, quiet=quiet_mode)
    print_report(report, quiet=quiet_mode)
    raise typer.Exit(EXIT_SUCCESS if report.passed else EXIT_VALIDATION_FAILURE)


# ── Entry point ──────────────────────────────────────────────────────────────


def main() -> int:
    """Run the CLI and return an exit code."""
    try:
        app()
        return 0
    except SystemExit as exc:
        return exc.code if isinstance(exc.code, int) else 0


if __name__ == "__main__":
    sys.exit(main())
