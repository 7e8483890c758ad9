"""Typer entry point: `aem-edge-functions <command>`."""

from __future__ import annotations

import subprocess
from contextlib import contextmanager
from typing import Iterator, Optional

import httpx
import typer

from cli.context import CommandContext
from cli.setup import SetupFlow
from cli.ui_components import build_selection_table, print_banner
from core.errors import AemEdgeError, ConfigurationError
from core.services.compute_target import load_selection, resolve_api_endpoint

app = typer.Typer(
    no_args_is_help=True,
    help="Set up and deploy AEM Edge Functions.",
    add_completion=False,
)


@contextmanager
def _handle_errors(ctx: CommandContext) -> Iterator[None]:
    """Map failures to exit codes: the child's code for the Fastly CLI, 1 otherwise."""

    try:
        yield
    except AemEdgeError as exc:
        ctx.error(str(exc))
        raise typer.Exit(code=1) from exc
    except httpx.HTTPError as exc:
        ctx.error(f"Request failed: {exc}")
        raise typer.Exit(code=1) from exc
    except subprocess.CalledProcessError as exc:
        ctx.error(f"Fastly CLI exited with status {exc.returncode}")
        raise typer.Exit(code=exc.returncode or 1) from exc


def _command_context(ctx: typer.Context) -> CommandContext:
    return ctx.ensure_object(CommandContext)


@app.callback()
def main(
    ctx: typer.Context,
    context: Optional[str] = typer.Option(
        None,
        "--context",
        help="IMS context to use (defaults to the current aio context).",
    ),
) -> None:
    command_ctx = ctx.obj if isinstance(ctx.obj, CommandContext) else CommandContext()
    if context:
        command_ctx.context_name = context
    ctx.obj = command_ctx
    ctx.call_on_close(command_ctx.close)


@app.command()
def setup(ctx: typer.Context) -> None:
    """Setup your AEM Edge Functions environment."""

    command_ctx = _command_context(ctx)
    print_banner(command_ctx.console)
    with _handle_errors(command_ctx):
        SetupFlow(command_ctx).run()


@app.command()
def deploy(
    ctx: typer.Context,
    service_id: str = typer.Argument(..., help="AEM Edge Function name (e.g. my-service)"),
) -> None:
    """Deploy your code to your AEM edge function."""

    command_ctx = _command_context(ctx)
    with _handle_errors(command_ctx):
        command_ctx.fastly_cli().deploy(service_id)


@app.command()
def build(ctx: typer.Context) -> None:
    """Build the compute package in the current directory."""

    command_ctx = _command_context(ctx)
    with _handle_errors(command_ctx):
        command_ctx.fastly_cli().build()


@app.command()
def serve(ctx: typer.Context) -> None:
    """Run the edge function locally."""

    command_ctx = _command_context(ctx)
    with _handle_errors(command_ctx):
        command_ctx.fastly_cli().serve()


@app.command(name="tail-logs")
def tail_logs(
    ctx: typer.Context,
    service_id: str = typer.Argument(..., help="AEM Edge Function name (e.g. my-service)"),
) -> None:
    """Stream the logs of your AEM edge function."""

    command_ctx = _command_context(ctx)
    with _handle_errors(command_ctx):
        command_ctx.fastly_cli().log_tail(service_id)


@app.command()
def info(ctx: typer.Context) -> None:
    """Show the stored selection and the compute API endpoint."""

    command_ctx = _command_context(ctx)
    with _handle_errors(command_ctx):
        selection = load_selection(command_ctx.store)
        try:
            endpoint = resolve_api_endpoint(command_ctx.settings, selection)
        except ConfigurationError:
            endpoint = None
        command_ctx.console.print(build_selection_table(selection, api_endpoint=endpoint))


def run() -> None:
    app()


if __name__ == "__main__":
    run()
