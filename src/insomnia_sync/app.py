"""Typer application factory and CLI entry point for insomnia-sync.

This module wires together the top-level Typer application and registers the
built-in commands (``convert``, ``watch``, ``inspect``).

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``. It installs signal handlers and invokes the Typer app.
:class:`~insomnia_sync.exceptions.InsomniaSyncError` instances that escape a
command exit with their ``exit_code``; anything else is reported on stderr
(with the traceback under ``--verbose``) and exits with
:data:`~insomnia_sync.exit_codes.EXIT_GENERIC_FAILURE`. Nothing is persisted.

See Also:
    :mod:`insomnia_sync.config`: Configuration resolution.
    :mod:`insomnia_sync.output`: Output formatting initialised in
    :func:`main_callback`.
"""

from __future__ import annotations

import signal
import sys
import traceback
from typing import Any

import typer

from insomnia_sync import __version__
from insomnia_sync.commands.convert import convert_command
from insomnia_sync.commands.inspect import inspect_command
from insomnia_sync.commands.watch import watch_command
from insomnia_sync.exit_codes import EXIT_GENERIC_FAILURE


app = typer.Typer(
    name="insomnia-sync",
    help="Convert OpenAPI/Swagger specs into Insomnia workspaces and keep them in sync.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)

app.command("convert")(convert_command)
app.command("watch")(watch_command)
app.command("inspect")(inspect_command)


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"insomnia-sync {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    json_output: bool = typer.Option(
        False, "--json", help="JSON output format."
    ),
    plain_output: bool = typer.Option(
        False, "--plain", help="Plain text output."
    ),
    no_color: bool = typer.Option(
        False, "--no-color", help="Disable color output."
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress non-essential output."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug output."
    ),
) -> None:
    """Root callback executed before every sub-command.

    Initialises the global :class:`~insomnia_sync.output.OutputManager` from
    CLI flags and routes the package loggers through it.

    Args:
        ctx: Typer invocation context.
        version: If ``True``, print the version string and exit.
        json_output: Force JSON output format.
        plain_output: Force plain-text output format.
        no_color: Disable all colour and Rich markup.
        quiet: Suppress non-essential diagnostic output.
        verbose: Enable debug-level diagnostic output.
    """
    from insomnia_sync.output import OutputFormat, OutputManager, configure_logging, set_output

    fmt = OutputFormat.AUTO
    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN

    set_output(OutputManager(format=fmt, no_color=no_color, quiet=quiet, verbose=verbose))
    configure_logging(verbose=verbose)

    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def _report_unexpected(exc: Exception) -> None:
    """Report an exception no command handled, traceback included under --verbose."""
    from insomnia_sync.output import debug, error

    error(f"Unexpected error: {type(exc).__name__}: {exc}")
    debug(traceback.format_exc())


def main() -> None:
    """CLI entry point invoked by the ``insomnia-sync`` console script.

    Raises:
        SystemExit: Always raised (either by Typer or explicitly).
    """
    _setup_signal_handlers()
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)
    except Exception as exc:
        from insomnia_sync.exceptions import InsomniaSyncError
        from insomnia_sync.output import error

        if isinstance(exc, InsomniaSyncError):
            error(str(exc))
            sys.exit(exc.exit_code)
        else:
            _report_unexpected(exc)
            sys.exit(EXIT_GENERIC_FAILURE)
