"""Workspace generator -- build an Insomnia export from a parsed document.

This sub-package is responsible for the second half of the pipeline: taking
the generic tree and its :class:`~insomnia_sync.models.SourceDocument`
projection (produced by the parser) and constructing the
:class:`~insomnia_sync.models.Workspace` written to disk.

Typical usage::

    from insomnia_sync.generator import convert_file

    result = convert_file("openapi.yml", "openapi-insomnia.yml")
    print(f"{result.requests} requests in {result.folders} folders")

Sub-modules:

* :mod:`~insomnia_sync.generator.context` -- The per-run epoch and id source.
* :mod:`~insomnia_sync.generator.urls` -- Path and server URL templating.
* :mod:`~insomnia_sync.generator.collection` -- Operations to tag folders.
* :mod:`~insomnia_sync.generator.environments` -- Servers to environments.
* :mod:`~insomnia_sync.generator.workspace` -- Assembly and the
  end-to-end :func:`convert_file` pipeline.
* :mod:`~insomnia_sync.generator.serializer` -- YAML encoding.
"""

from insomnia_sync.generator.context import GenerationContext
from insomnia_sync.generator.serializer import dump_workspace
from insomnia_sync.generator.workspace import (
    ConversionResult,
    build_workspace,
    convert_file,
    generate_workspace,
    render_source,
)

__all__ = [
    "GenerationContext",
    "ConversionResult",
    "build_workspace",
    "generate_workspace",
    "render_source",
    "convert_file",
    "dump_workspace",
]
