"""Command-line entry point for stack-status."""

import logging
import os
import shutil

import click

from stack_status.cli.display import render_snapshot
from stack_status.cli.json_output import emit_json, emit_json_error
from stack_status.cli.json_schemas import snapshot_to_pydantic
from stack_status.cli.output import machine_output, user_output
from stack_status.cli.watch import run_watch_loop
from stack_status.core.context import StackStatusContext, create_context
from stack_status.core.errors import NotFound, ParseError
from stack_status.core.forest import StackSnapshot
from stack_status.core.snapshot import collect_snapshot

CONTEXT_SETTINGS = dict(help_option_names=["-h", "--help"])  # terse help flags

logger = logging.getLogger(__name__)


def _configure_logging(debug: bool) -> None:
    if debug or os.getenv("STACK_STATUS_DEBUG"):
        logging.basicConfig(level=logging.DEBUG, format="[DEBUG %(name)s:%(lineno)d] %(message)s")


def _terminal_width() -> int:
    return shutil.get_terminal_size(fallback=(100, 24)).columns


def _error(message: str) -> None:
    user_output(click.style("Error: ", fg="red") + message)


def _present(
    snapshot: StackSnapshot, *, output_json: bool, details: bool, footer: str | None
) -> None:
    if output_json:
        emit_json(snapshot_to_pydantic(snapshot).model_dump(mode="json"))
        return
    machine_output(
        render_snapshot(snapshot, details=details, width=_terminal_width(), footer=footer)
    )


def _run_once(
    app: StackStatusContext, *, branch: str | None, output_json: bool, details: bool
) -> None:
    try:
        snapshot = collect_snapshot(app, branch)
    except (ParseError, NotFound) as e:
        if output_json:
            emit_json_error(str(e), type(e).__name__)
        _error(str(e))
        raise SystemExit(1) from e

    if not snapshot.is_renderable:
        message = "Nothing to show: " + " ".join(snapshot.notices)
        if output_json:
            emit_json_error(message.strip(), "FetcherUnavailable")
        _error(message.strip())
        raise SystemExit(1)

    _present(snapshot, output_json=output_json, details=details, footer=None)


def _run_watch(
    app: StackStatusContext,
    *,
    branch: str | None,
    output_json: bool,
    details: bool,
    interval: int,
    exit_on_complete: bool,
) -> None:
    footer = f"Refreshing every {interval}s · Ctrl+C to quit"

    def render(snapshot: StackSnapshot) -> None:
        click.clear()
        _present(snapshot, output_json=output_json, details=details, footer=footer)

    def render_error(error: Exception) -> None:
        _error(str(error))

    try:
        run_watch_loop(
            app,
            interval=interval,
            branch_override=branch,
            exit_on_complete=exit_on_complete,
            render=render,
            render_error=render_error,
        )
    except KeyboardInterrupt:
        logger.debug("Watch mode interrupted")
        user_output()
        return

    user_output(click.style("All checks complete. Exiting watch mode.", fg="green"))


@click.command("stack-status", context_settings=CONTEXT_SETTINGS)
@click.option("-w", "--watch", is_flag=True, help="Continuously refresh status.")
@click.option(
    "-i",
    "--interval",
    type=click.IntRange(min=1),
    default=None,
    help="Refresh interval in seconds for --watch (default: 10, or refresh_interval from config).",
)
@click.option("-b", "--branch", default=None, help="Treat this branch as current.")
@click.option("--json", "output_json", is_flag=True, help="Output as JSON.")
@click.option("--mcp", "mcp_mode", is_flag=True, help="Run as an MCP server on stdio.")
@click.option("-d", "--details", is_flag=True, help="Show each CI check under its branch.")
@click.option(
    "--exit-on-complete",
    is_flag=True,
    help="With --watch, stop once no check is running or queued.",
)
@click.option("--debug", is_flag=True, help="Log external commands and fallbacks to stderr.")
@click.version_option(package_name="stack-status")
@click.pass_context
def cli(
    ctx: click.Context,
    watch: bool,
    interval: int | None,
    branch: str | None,
    output_json: bool,
    mcp_mode: bool,
    details: bool,
    exit_on_complete: bool,
    debug: bool,
) -> None:
    """Display Graphite stack status with live CI check progress."""
    _configure_logging(debug)

    # Only create context if not already provided (e.g., by tests)
    if ctx.obj is None:
        try:
            ctx.obj = create_context()
        except ValueError as e:
            _error(str(e))
            raise SystemExit(1) from e
    app: StackStatusContext = ctx.obj

    if mcp_mode:
        from stack_status.mcp.server import run_server

        run_server(app)
        return

    show_details = details or app.config.show_details
    if watch:
        _run_watch(
            app,
            branch=branch,
            output_json=output_json,
            details=show_details,
            interval=interval if interval is not None else app.config.refresh_interval,
            exit_on_complete=exit_on_complete,
        )
    else:
        _run_once(app, branch=branch, output_json=output_json, details=show_details)


def main() -> None:
    """CLI entry point used by the `stack-status` console script."""
    cli()
