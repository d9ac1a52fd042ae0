"""Follow local ``$ref`` pointers in OpenAPI/Swagger documents.

Path items and parameters are often written as references, e.g.
``{"$ref": "#/components/parameters/UserId"}``. The extractor needs the
referenced object to read a parameter's ``name`` and ``in`` fields, but the
tree embedded in the workspace must stay untouched, so resolution here never
copies or rewrites the document: :func:`deref` simply returns the target
object.

Only **internal** references (those starting with ``#/``) are supported.
External file or URL references raise
:class:`~insomnia_sync.exceptions.SpecParseError`; callers in the extractor
treat that as "this entry has no usable fields" and skip it.
"""

from __future__ import annotations

from typing import Any

from insomnia_sync.exceptions import SpecParseError

_MAX_DEPTH = 32


def deref(obj: Any, root: dict[str, Any]) -> Any:
    """Return the object *obj* points to, following chained references.

    Non-reference values are returned as-is.

    Args:
        obj: A node of the document, possibly ``{"$ref": "#/..."}``.
        root: The document root to resolve against.

    Returns:
        The referenced node (the same object held by *root*, not a copy).

    Raises:
        SpecParseError: If the reference is external, dangling, or circular.
    """
    seen: set[str] = set()
    current = obj
    while isinstance(current, dict) and isinstance(current.get("$ref"), str):
        ref = current["$ref"]
        if ref in seen or len(seen) >= _MAX_DEPTH:
            raise SpecParseError(f"Circular $ref detected at '{ref}'")
        seen.add(ref)
        current = resolve_pointer(ref, root)
    return current


def resolve_pointer(ref: str, root: dict[str, Any]) -> Any:
    """Resolve a single ``$ref`` string against the root document.

    Parses JSON Pointer references like ``#/components/parameters/Id`` and
    navigates the root dict to locate the referenced value.  Handles
    RFC 6901 JSON Pointer escaping (``~0`` for ``~``, ``~1`` for ``/``).

    Raises:
        SpecParseError: If the reference is external (does not start with
            ``#/``), or if any segment in the pointer path does not exist
            in the document.
    """
    if not ref.startswith("#/"):
        raise SpecParseError(
            f"External $ref not supported: {ref}. "
            "Only internal references (#/...) are handled."
        )

    current: Any = root
    for segment in ref[2:].split("/"):
        segment = segment.replace("~1", "/").replace("~0", "~")

        if isinstance(current, dict):
            if segment not in current:
                raise SpecParseError(
                    f"Cannot resolve $ref '{ref}': "
                    f"key '{segment}' not found at path"
                )
            current = current[segment]
        elif isinstance(current, list):
            try:
                current = current[int(segment)]
            except (ValueError, IndexError) as exc:
                raise SpecParseError(
                    f"Cannot resolve $ref '{ref}': "
                    f"invalid array index '{segment}'"
                ) from exc
        else:
            raise SpecParseError(
                f"Cannot resolve $ref '{ref}': "
                f"cannot navigate into {type(current).__name__}"
            )

    return current
