"""Project a parsed OpenAPI/Swagger tree onto a typed :class:`SourceDocument`.

This module walks the generic tree returned by
:func:`~insomnia_sync.parser.loader.load_spec` and builds a
:class:`~insomnia_sync.models.SourceDocument` containing only the fields the
workspace generator consumes. The tree itself is never modified, so it can be
embedded in the output verbatim.

The single public entry point is :func:`extract_document`.  Internally it
delegates to private helpers that each handle one section of the document:

* ``_extract_info`` -- the ``info`` object (title, version, contact).
* ``_extract_servers`` -- the ``servers`` array, or servers synthesised from
  Swagger 2.0 ``schemes``/``host``/``basePath``.
* ``_extract_tags`` -- the top-level ``tags`` registry.
* ``_extract_paths`` -- the ``paths`` object, walked in a fixed order.

The walk is tolerant: unknown keys are ignored and sections with the wrong
shape are skipped rather than reported, because validating the input is not
this tool's job.

Processing order is deterministic. Paths are visited in lexicographic order;
within a path, the methods of :class:`~insomnia_sync.models.HTTPMethod` come
first in declaration order, followed by any other operation-like keys in
lexicographic order.

Path-item keys that are not operations are skipped: ``parameters``,
``summary`` and ``description``, and also ``servers``, ``$ref``, vendor
extensions (``x-*``) and any entry whose value is not a mapping. A plain
key-by-key walk would turn an ``x-*`` mapping into a request; this one does
not.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Any, Optional

from insomnia_sync.exceptions import SpecParseError
from insomnia_sync.models import (
    APIInfo,
    APIOperation,
    APIParameter,
    ContactInfo,
    HTTPMethod,
    ParameterLocation,
    ServerInfo,
    SourceDocument,
    TagInfo,
)
from insomnia_sync.parser.resolver import deref

logger = logging.getLogger(__name__)

_METHOD_ORDER = [m.value for m in HTTPMethod]

# Path-item keys that never describe an operation.
_RESERVED_PATH_KEYS = frozenset({"parameters", "summary", "description", "servers", "$ref"})

_SWAGGER_SCHEMES = ("http", "https")


def extract_document(tree: dict[str, Any]) -> SourceDocument:
    """Build the typed projection of a parsed document.

    Args:
        tree: The document as returned by
            :func:`~insomnia_sync.parser.loader.load_spec`.

    Returns:
        A frozen :class:`~insomnia_sync.models.SourceDocument`.

    Example::

        tree = load_spec("petstore.yaml")
        document = extract_document(tree)
        for op in document.operations():
            print(f"{op.method.upper()} {op.path}")
    """
    version = tree.get("openapi", tree.get("swagger"))
    return SourceDocument(
        spec_version=_text(version),
        info=_extract_info(tree),
        servers=_extract_servers(tree),
        paths=_extract_paths(tree),
        tags=_extract_tags(tree),
    )


def _text(value: Any) -> Optional[str]:
    """Return *value* as a string when it is a scalar, else ``None``.

    YAML turns unquoted versions such as ``1.0`` into floats and ISO dates
    into :class:`datetime.date`; those are rendered back to text.
    """
    if isinstance(value, str):
        return value
    if isinstance(value, (bool, int, float, date)):
        return str(value)
    return None


def _string(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None


def _mapping(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _extract_info(spec: dict[str, Any]) -> APIInfo:
    """Extract API metadata from the ``info`` object.

    Missing ``title`` and ``version`` become empty strings, so the workspace
    name is still ``"<title> <version>"`` built from whatever is present.
    """
    info = _mapping(spec.get("info"))
    contact_raw = info.get("contact")
    contact: Optional[ContactInfo] = None
    if isinstance(contact_raw, dict):
        contact = ContactInfo(
            name=_text(contact_raw.get("name")),
            email=_text(contact_raw.get("email")),
        )

    return APIInfo(
        title=_text(info.get("title")) or "",
        version=_text(info.get("version")) or "",
        description=_text(info.get("description")),
        contact=contact,
    )


def _extract_servers(spec: dict[str, Any]) -> list[ServerInfo]:
    """Extract server entries in declaration order.

    Entries without a string ``url`` are skipped. A Swagger 2.0 document with
    no ``servers`` array but a ``host`` gets one server per declared HTTP(S)
    scheme (``http`` when none is declared).
    """
    servers = spec.get("servers")
    if isinstance(servers, list):
        return [
            ServerInfo(url=server["url"], description=_text(server.get("description")))
            for server in servers
            if isinstance(server, dict) and isinstance(server.get("url"), str)
        ]

    host = spec.get("host")
    if not isinstance(host, str) or not host:
        return []

    base_path = spec.get("basePath")
    base_path = base_path if isinstance(base_path, str) else ""
    schemes = spec.get("schemes")
    declared = [
        s for s in (schemes if isinstance(schemes, list) else [])
        if s in _SWAGGER_SCHEMES
    ]
    return [ServerInfo(url=f"{scheme}://{host}{base_path}") for scheme in declared or ["http"]]


def _extract_tags(spec: dict[str, Any]) -> list[TagInfo]:
    """Extract the top-level tag registry."""
    tags = spec.get("tags")
    if not isinstance(tags, list):
        return []
    return [
        TagInfo(name=tag["name"], description=_text(tag.get("description")))
        for tag in tags
        if isinstance(tag, dict) and isinstance(tag.get("name"), str)
    ]


def _method_keys(path_item: dict[str, Any]) -> list[str]:
    """Return the operation keys of a path item in processing order."""
    canonical = [m for m in _METHOD_ORDER if m in path_item]
    others = sorted(
        str(key) for key in path_item
        if key not in _METHOD_ORDER
        and key not in _RESERVED_PATH_KEYS
        and not str(key).startswith("x-")
    )
    return canonical + others


def _extract_paths(spec: dict[str, Any]) -> dict[str, dict[str, APIOperation]]:
    """Extract every operation from the ``paths`` object.

    Path-level parameters are merged with operation-level ones; operation
    parameters win when they share ``name`` and ``in``.

    Returns:
        ``{path: {method: APIOperation}}`` with both levels in processing
        order.
    """
    paths = _mapping(spec.get("paths"))
    result: dict[str, dict[str, APIOperation]] = {}

    for path in sorted(paths, key=str):
        try:
            path_item = deref(paths[path], spec)
        except SpecParseError as exc:
            logger.debug("Skipping path %s: %s", path, exc)
            continue
        if not isinstance(path_item, dict):
            continue

        path_params = _as_list(path_item.get("parameters"))
        operations: dict[str, APIOperation] = {}

        for method in _method_keys(path_item):
            operation = path_item.get(method)
            if not isinstance(operation, dict):
                continue

            merged = _merge_parameters(
                _resolve_parameters(path_params, spec),
                _resolve_parameters(_as_list(operation.get("parameters")), spec),
            )
            tags = [tag for tag in _as_list(operation.get("tags")) if isinstance(tag, str)]

            operations[method] = APIOperation(
                path=str(path),
                method=method,
                operation_id=_text(operation.get("operationId")),
                summary=_string(operation.get("summary")),
                description=_string(operation.get("description")),
                tags=tags,
                parameters=_extract_parameters(merged),
            )

        if operations:
            result[str(path)] = operations

    return result


def _as_list(value: Any) -> list[Any]:
    return value if isinstance(value, list) else []


def _resolve_parameters(params: list[Any], spec: dict[str, Any]) -> list[dict[str, Any]]:
    """Dereference ``$ref`` parameters, dropping the ones that cannot be resolved."""
    resolved: list[dict[str, Any]] = []
    for param in params:
        try:
            target = deref(param, spec)
        except SpecParseError as exc:
            logger.debug("Skipping parameter: %s", exc)
            continue
        if isinstance(target, dict):
            resolved.append(target)
    return resolved


def _merge_parameters(
    path_params: list[dict[str, Any]],
    op_params: list[dict[str, Any]],
) -> list[dict[str, Any]]:
    """Merge path-level and operation-level parameters.

    Operation-level parameters override path-level parameters with the same
    name and location (``in`` field).
    """
    op_keys = {(p.get("name"), p.get("in")) for p in op_params}
    merged = [p for p in path_params if (p.get("name"), p.get("in")) not in op_keys]
    merged.extend(op_params)
    return merged


def _extract_parameters(params_list: list[dict[str, Any]]) -> list[APIParameter]:
    """Convert raw parameter dicts into :class:`APIParameter` models.

    Parameters without a string ``name`` or with a missing or unrecognised
    ``in`` location are skipped.
    """
    parameters: list[APIParameter] = []
    for param in params_list:
        name = param.get("name")
        if not isinstance(name, str) or not name:
            continue
        try:
            location = ParameterLocation(param.get("in"))
        except ValueError:
            continue
        parameters.append(APIParameter(name=name, location=location))
    return parameters
