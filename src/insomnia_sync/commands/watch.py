"""Watch command -- keep Insomnia workspaces in sync with their sources.

Implements ``insomnia-sync watch``. Either watches the files given with
``--file`` or scans a directory (the working directory by default) for
OpenAPI/Swagger documents, then polls them and regenerates each workspace
whenever its source changes. ``--once`` runs a single pass, which converts
every registered file, and exits.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Optional

import typer

from insomnia_sync.exceptions import InsomniaSyncError, InvalidUsageError
from insomnia_sync.output import debug, error, info, suggest

if TYPE_CHECKING:
    from insomnia_sync.watcher import SpecWatcher


def _print_summary(watcher: SpecWatcher) -> None:
    files = watcher.watched_files()
    info(f"Stopped watching {len(files)} file(s)")
    for source, target in files.items():
        debug(f"{source} -> {target}")


def watch_command(
    directory: Optional[Path] = typer.Argument(
        None, help="Directory to scan for OpenAPI files (default: current directory)."
    ),
    files: Optional[list[Path]] = typer.Option(
        None, "--file", "-f", help="Watch this file instead of scanning (repeatable)."
    ),
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", help="Workspace path for a single --file."
    ),
    interval: Optional[float] = typer.Option(
        None, "--interval", "-i", help="Polling interval in seconds (default: 2)."
    ),
    suffix: Optional[str] = typer.Option(
        None, "--suffix", help="Tag appended to generated file names."
    ),
    once: bool = typer.Option(
        False, "--once", help="Convert every file once and exit."
    ),
) -> None:
    """Watch OpenAPI files and regenerate Insomnia workspaces on change.

    Example::

        insomnia-sync watch
        insomnia-sync watch ./specs --interval 5
        insomnia-sync watch --file openapi.yml -o insomnia/workspace.yml
    """
    from insomnia_sync.config import resolve_config
    from insomnia_sync.watcher import SpecScanner, SpecWatcher

    try:
        if files and directory is not None:
            raise InvalidUsageError("Pass either a DIRECTORY or --file, not both")
        if output is not None and len(files or []) != 1:
            raise InvalidUsageError("--output requires exactly one --file")

        config = resolve_config(cli_interval=interval, cli_suffix=suffix)
    except InsomniaSyncError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    watcher = SpecWatcher(
        interval=config.watch.interval,
        suffix=config.output.suffix,
        extension=config.output.extension,
    )
    max_ticks = 1 if once else None

    try:
        if files:
            for path in files:
                watcher.add_file(path, output)
            watcher.start(max_ticks=max_ticks)
        else:
            scanner = SpecScanner(
                extensions=config.watch.extensions,
                ignore=config.watch.ignore,
                respect_gitignore=config.watch.respect_gitignore,
                output_suffix=config.output.suffix,
            )
            root = directory or Path.cwd()
            if not scanner.scan_and_watch(root, watcher, max_ticks=max_ticks):
                suggest("Watch a file explicitly with: insomnia-sync watch --file <spec>")
                return
    except InsomniaSyncError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None
    except KeyboardInterrupt:
        info("Shutting down...")
    finally:
        if watcher.watched_files():
            _print_summary(watcher)
