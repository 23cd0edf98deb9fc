"""CLI principal (Typer).

Subcomandos:
- `run`: lanza una ejecución de test contra un webhook.
- `debug`: abre una sesión del debugger multiverso desde un Moment.
- `version`: imprime la versión.

Los parámetros de webhook no se declaran como opciones de Typer: llegan como
argumentos extra (`--antithesis.clave valor`) y los parsea el resolver.
"""

from __future__ import annotations

import sys
from importlib.metadata import PackageNotFoundError, version as package_version
from typing import Optional

import typer
from rich.console import Console

from cli.ui_components import build_eta_message, print_error, print_params
from core.domain.catalog import DEBUG, RUN, CommandProfile
from core.logging_config import setup_logging
from core.services.dispatcher import DispatchHooks, dispatch

app = typer.Typer(
    name="snouty",
    no_args_is_help=True,
    add_completion=False,
    help="CLI for the Antithesis API.",
)

_console = Console(stderr=True)
_out = Console()

_PARAM_CONTEXT = {"allow_extra_args": True, "ignore_unknown_options": True}

RUN_HELP = """Launch a test run.

Parameters are passed as `--key value` pairs, or as a JSON object on stdin with --stdin.

Example:

  snouty run -w basic_test --antithesis.test_name nightly --antithesis.config_image config:latest --antithesis.images app:latest --antithesis.duration 30
"""

DEBUG_HELP = """Launch a debugging session.

Using CLI arguments:

  snouty debug --antithesis.debugging.session_id f89d5c11f5e3bf5e4bb3641809800cee-44-22 --antithesis.debugging.input_hash 6057726200491963783 --antithesis.debugging.vtime 329.8037810830865

Using Moment.from (copy from the triage report):

  echo 'Moment.from({ session_id: "...", input_hash: "...", vtime: ... })' | snouty debug --stdin
"""


def _execute(profile: CommandProfile, webhook: str | None, args: list[str], use_stdin: bool) -> None:
    hooks = DispatchHooks(params_resolved=lambda p, params: print_params(_console, p, params))
    try:
        result = dispatch(
            profile,
            webhook=webhook,
            tokens=args,
            use_stdin=use_stdin,
            stdin=sys.stdin if use_stdin else None,
            hooks=hooks,
        )
    except KeyboardInterrupt:
        raise typer.Exit(code=130) from None
    if result.error is not None:
        print_error(_console, str(result.error))
        raise typer.Exit(code=1)

    if result.response is not None and result.response.body:
        _out.print(result.response.body, markup=False, highlight=False, emoji=False, soft_wrap=True)
    if result.params is not None:
        _console.print()
        _console.print(build_eta_message(profile, result.params), markup=False, highlight=False, soft_wrap=True)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    setup_logging(verbose=verbose)


@app.command(name="run", context_settings=_PARAM_CONTEXT, help=RUN_HELP)
def run_command(
    ctx: typer.Context,
    webhook: str = typer.Option(..., "--webhook", "-w", help="Webhook endpoint name (e.g. basic_test, basic_k8s_test)."),
    stdin: bool = typer.Option(False, "--stdin", help="Read parameters from stdin as a JSON object."),
) -> None:
    _execute(RUN, webhook, list(ctx.args), stdin)


@app.command(name="debug", context_settings=_PARAM_CONTEXT, help=DEBUG_HELP)
def debug_command(
    ctx: typer.Context,
    webhook: Optional[str] = typer.Option(None, "--webhook", "-w", help="Webhook endpoint name (default: debugging)."),
    stdin: bool = typer.Option(False, "--stdin", help="Read parameters from stdin (JSON object or Moment.from literal)."),
) -> None:
    _execute(DEBUG, webhook, list(ctx.args), stdin)


@app.command(name="version")
def version_command() -> None:
    """Print version information."""

    try:
        current = package_version("snouty")
    except PackageNotFoundError:
        current = "0.0.0+unknown"
    _out.print(f"snouty {current}", markup=False, highlight=False)


def run() -> None:
    app()
