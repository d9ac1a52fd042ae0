"""insomnia-sync -- Turn OpenAPI/Swagger documents into Insomnia workspaces.

This package converts an OpenAPI 3.x (or Swagger 2.0) document into an
Insomnia v5 workspace export (``type: spec.insomnia.rest/5.0``) and can keep
that export up to date by watching the source document for changes.

Typical workflow::

    insomnia-sync convert openapi.yml          # writes openapi-insomnia.yml
    insomnia-sync watch ./api-specs            # regenerate on every save

The generated workspace groups requests into one folder per tag, derives an
environment per declared server, and embeds the original document verbatim
so that Insomnia's design view shows the full spec.

Modules:
    app: Typer application factory and CLI entry point.
    models: Pydantic models shared across the entire package.
    config: XDG-aware settings with precedence resolution.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes following clig.dev conventions.
    output: stdout/stderr formatting system with Rich support.
"""

__version__ = "0.1.0"
