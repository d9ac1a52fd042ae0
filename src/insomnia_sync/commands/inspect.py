"""Inspect command -- preview the workspace a document would produce.

Provides ``insomnia-sync inspect``, a read-only view of what ``convert``
would generate: one table of requests grouped by folder and one of the
server environments. Nothing is written to disk. With the global ``--json``
flag both tables are emitted as a single JSON document instead.
"""

from __future__ import annotations

import json

import typer

from insomnia_sync.exceptions import InsomniaSyncError
from insomnia_sync.output import OutputFormat, error, get_output, info

_REQUEST_HEADERS = ["Folder", "Method", "Name", "URL"]
_ENVIRONMENT_HEADERS = ["Environment", "Scheme", "Host", "Base Path"]


def inspect_command(
    source: str = typer.Argument(
        ..., help="OpenAPI/Swagger file, URL, or '-' for stdin."
    ),
) -> None:
    """Show the folders, requests and environments a conversion would produce.

    Example::

        insomnia-sync inspect openapi.yml
        insomnia-sync --json inspect openapi.yml | jq '.requests[].URL'
    """
    from insomnia_sync.generator import generate_workspace
    from insomnia_sync.parser import detect_spec_version, load_spec

    try:
        tree = load_spec(source)
        workspace = generate_workspace(tree)
    except InsomniaSyncError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    request_rows = [
        [folder.name, request.method, request.name, request.url]
        for folder in workspace.collection
        for request in folder.children
    ]
    env_rows = [
        [env.name, env.data.scheme, env.data.host, env.data.base_path]
        for env in workspace.environments.sub_environments
    ]
    version = detect_spec_version(tree)

    output = get_output()
    if output.format == OutputFormat.JSON:
        document = {
            "name": workspace.name,
            "specVersion": version,
            "requests": [dict(zip(_REQUEST_HEADERS, row)) for row in request_rows],
            "environments": [dict(zip(_ENVIRONMENT_HEADERS, row)) for row in env_rows],
        }
        output.print_data(json.dumps(document, indent=2, ensure_ascii=False))
        return

    info(f"{workspace.name} ({version or 'unknown version'})")
    output.print_table(
        _REQUEST_HEADERS,
        request_rows,
        title=f"{workspace.name} -- Requests ({len(request_rows)})",
    )
    if env_rows:
        output.print_table(_ENVIRONMENT_HEADERS, env_rows, title="Environments")
    else:
        info("No servers defined; only the base environment will be generated.")
