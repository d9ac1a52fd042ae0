"""Assemble Insomnia workspaces and run the end-to-end conversion.

:func:`build_workspace` composes the folders, environments, cookie jar and the
verbatim source tree into a :class:`~insomnia_sync.models.Workspace`.
:func:`convert_file` is the one-shot pipeline used by the CLI and by the
watcher: read and parse the source, assemble, serialise, and write the result
atomically. Each step raises its own
:class:`~insomnia_sync.exceptions.ConversionError` subclass, so a failure
always carries the stage (``read``, ``parse``, ``assemble``, ``serialize`` or
``write``) where it happened.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from insomnia_sync.config import atomic_write
from insomnia_sync.exceptions import AssemblyError, OutputWriteError
from insomnia_sync.generator.collection import build_collection
from insomnia_sync.generator.context import (
    COOKIE_JAR_CREATED,
    COOKIE_JAR_PREFIX,
    SPEC_CREATED,
    SPEC_MODIFIED,
    SPEC_PREFIX,
    WORKSPACE_CREATED,
    WORKSPACE_MODIFIED,
    WORKSPACE_PREFIX,
    GenerationContext,
)
from insomnia_sync.generator.environments import build_environments
from insomnia_sync.generator.serializer import dump_workspace
from insomnia_sync.models import CookieJar, Meta, SourceDocument, SpecContainer, Workspace
from insomnia_sync.parser import extract_document, load_spec

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ConversionResult:
    """Summary of one successful :func:`convert_file` run."""

    source: Path
    output: Path
    name: str
    folders: int
    requests: int
    environments: int


def build_workspace(
    tree: dict[str, Any],
    document: SourceDocument,
    ctx: GenerationContext,
) -> Workspace:
    """Compose the export document.

    Args:
        tree: The parsed source, embedded unchanged as ``spec.contents``.
        document: The typed projection of *tree*.
        ctx: The run's generation context.
    """
    return Workspace(
        name=f"{document.info.title} {document.info.version}",
        meta=Meta(
            id=ctx.new_id(WORKSPACE_PREFIX),
            created=ctx.at(WORKSPACE_CREATED),
            modified=ctx.at(WORKSPACE_MODIFIED),
        ),
        collection=build_collection(document, ctx),
        cookie_jar=CookieJar(
            meta=Meta(
                id=ctx.new_id(COOKIE_JAR_PREFIX),
                created=ctx.at(COOKIE_JAR_CREATED),
                modified=ctx.at(COOKIE_JAR_CREATED),
            ),
        ),
        environments=build_environments(document, ctx),
        spec=SpecContainer(
            contents=tree,
            meta=Meta(
                id=ctx.new_id(SPEC_PREFIX),
                created=ctx.at(SPEC_CREATED),
                modified=ctx.at(SPEC_MODIFIED),
            ),
        ),
    )


def generate_workspace(
    tree: dict[str, Any],
    ctx: Optional[GenerationContext] = None,
) -> Workspace:
    """Project *tree* and assemble its workspace with a fresh (or given) context.

    Raises:
        AssemblyError: If the tree cannot be mapped onto the workspace model.
    """
    ctx = ctx or GenerationContext.create()
    try:
        document = extract_document(tree)
        return build_workspace(tree, document, ctx)
    except (ValueError, TypeError, KeyError) as exc:
        raise AssemblyError(f"Failed to assemble workspace: {exc}") from exc


def render_source(source: str, ctx: Optional[GenerationContext] = None) -> tuple[Workspace, str]:
    """Load *source* and return its workspace together with the YAML text."""
    tree = load_spec(source)
    workspace = generate_workspace(tree, ctx)
    return workspace, dump_workspace(workspace)


def convert_file(
    source: str | Path,
    output: str | Path,
    ctx: Optional[GenerationContext] = None,
) -> ConversionResult:
    """Convert the document at *source* and write the workspace to *output*.

    A new :class:`GenerationContext` is created for each call unless one is
    passed in. Parent directories of *output* are created as needed and the
    file is replaced atomically, so a failed run never leaves a truncated
    workspace behind.

    Raises:
        SourceNotFoundError: If *source* does not exist.
        SourceReadError: If *source* cannot be read.
        SpecParseError: If *source* is not well-formed JSON/YAML.
        AssemblyError: If the workspace cannot be built.
        SerializationError: If the workspace cannot be encoded.
        OutputWriteError: If *output* cannot be written.
    """
    source_path = Path(source)
    output_path = Path(output)

    workspace, text = render_source(str(source), ctx)

    try:
        atomic_write(output_path, text)
    except OSError as exc:
        raise OutputWriteError(f"Failed to write {output_path}: {exc}") from exc

    logger.debug("Wrote %s (%d requests)", output_path, workspace.request_count())
    return ConversionResult(
        source=source_path,
        output=output_path,
        name=workspace.name,
        folders=len(workspace.collection),
        requests=workspace.request_count(),
        environments=len(workspace.environments.sub_environments),
    )
