"""Convert command -- one-shot OpenAPI/Swagger to Insomnia conversion.

Implements ``insomnia-sync convert``: load a document from a file, URL or
stdin, build the Insomnia v5 workspace, and either write it next to the
working directory (``<stem>-insomnia.yml``) or print it to stdout.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional
from urllib.parse import urlparse

import typer

from insomnia_sync.exceptions import InsomniaSyncError, InvalidUsageError
from insomnia_sync.output import debug, error, info, print_yaml, success, suggest

_STDIN_NAME = "openapi.yml"


def _source_name(source: str) -> str:
    """Return the file name the default output path of *source* derives from."""
    if source == "-":
        return _STDIN_NAME
    if source.startswith(("http://", "https://")):
        return Path(urlparse(source).path).name or _STDIN_NAME
    return Path(source).name


def convert_command(
    source: str = typer.Argument(
        ..., help="OpenAPI/Swagger file, URL, or '-' for stdin."
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Workspace file to write (default: ./<name>-insomnia.yml).",
    ),
    to_stdout: bool = typer.Option(
        False, "--stdout", help="Print the workspace instead of writing a file."
    ),
    suffix: Optional[str] = typer.Option(
        None, "--suffix", help="Tag appended to the default output file name."
    ),
) -> None:
    """Convert an OpenAPI/Swagger document into an Insomnia workspace.

    Example::

        insomnia-sync convert openapi.yml
        insomnia-sync convert https://petstore3.swagger.io/api/v3/openapi.json -o pet.yml
        cat openapi.yml | insomnia-sync convert - --stdout
    """
    from insomnia_sync.config import resolve_config
    from insomnia_sync.generator import convert_file, render_source
    from insomnia_sync.watcher import derive_output_path

    try:
        if to_stdout and output is not None:
            raise InvalidUsageError("--stdout and --output are mutually exclusive")

        if to_stdout:
            _, text = render_source(source)
            print_yaml(text)
            return

        config = resolve_config(cli_suffix=suffix)
        target = output or derive_output_path(
            _source_name(source),
            suffix=config.output.suffix,
            extension=config.output.extension,
            directory=Path.cwd(),
        )
        debug(f"Converting {source} -> {target}")
        result = convert_file(source, target)
    except InsomniaSyncError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    success(f"Generated {result.output}")
    info(
        f"{result.name}: {result.requests} requests in {result.folders} folders, "
        f"{result.environments} environments"
    )
    suggest("Import the file in Insomnia via Create > Import > File")
