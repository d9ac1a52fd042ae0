"""Source parser -- load a document once and project the fields we need.

This sub-package is responsible for the first half of the pipeline: turning a
raw OpenAPI 3.x or Swagger 2.0 document (JSON or YAML, local file, remote URL
or stdin) into two views of the same data:

* the **generic tree** (plain ``dict``/``list``/scalars) exactly as parsed,
  which is embedded verbatim in the generated workspace, and
* a typed :class:`~insomnia_sync.models.SourceDocument` projection over that
  tree, which the generator reads.

Typical usage::

    from insomnia_sync.parser import load_spec, extract_document

    tree = load_spec("openapi.yml")
    document = extract_document(tree)

Sub-modules:

* :mod:`~insomnia_sync.parser.loader` -- I/O layer (URL, file, stdin) plus
  JSON/YAML format detection.
* :mod:`~insomnia_sync.parser.resolver` -- Local ``$ref`` pointer lookup with
  circular-reference detection.
* :mod:`~insomnia_sync.parser.extractor` -- Walks the tree and produces the
  :class:`~insomnia_sync.models.SourceDocument` projection.
"""

from insomnia_sync.parser.extractor import extract_document
from insomnia_sync.parser.loader import (
    detect_spec_version,
    load_spec,
    parse_content,
)

__all__ = ["load_spec", "parse_content", "detect_spec_version", "extract_document"]
