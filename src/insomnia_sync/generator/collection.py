"""Group extracted operations into tag folders of Insomnia requests.

Every operation of the :class:`~insomnia_sync.models.SourceDocument` becomes
exactly one :class:`~insomnia_sync.models.RequestItem`, placed in the folder
named after its **first** tag (or :data:`~insomnia_sync.models.DEFAULT_FOLDER`
when it has none). Operations are visited in the document's processing order,
which is fixed, so the same input always yields the same tree.

Sort keys come from two counters that both start at
:attr:`~insomnia_sync.generator.context.GenerationContext.first_sort_key`:
one advances per request in processing order, the other per folder in order
of first use.
"""

from __future__ import annotations

from insomnia_sync.generator.context import (
    FOLDER_CREATED,
    FOLDER_PREFIX,
    REQUEST_CREATED,
    REQUEST_PREFIX,
    GenerationContext,
)
from insomnia_sync.generator.urls import build_url
from insomnia_sync.models import (
    APIOperation,
    Folder,
    Meta,
    RequestItem,
    SourceDocument,
)


def build_collection(document: SourceDocument, ctx: GenerationContext) -> list[Folder]:
    """Build the folder list for *document*.

    Args:
        document: The typed source projection.
        ctx: The run's generation context.

    Returns:
        Folders in order of first use, each holding its requests in
        processing order.
    """
    grouped: dict[str, list[RequestItem]] = {}
    sort_key = ctx.first_sort_key

    for operation in document.operations():
        request = build_request(operation, ctx, sort_key)
        grouped.setdefault(operation.folder_name, []).append(request)
        sort_key += 1

    folders: list[Folder] = []
    folder_sort_key = ctx.first_sort_key
    for tag, requests in grouped.items():
        folders.append(
            Folder(
                name=tag,
                meta=Meta(
                    id=ctx.new_id(FOLDER_PREFIX),
                    created=ctx.at(FOLDER_CREATED),
                    modified=ctx.at(FOLDER_CREATED),
                    sort_key=folder_sort_key,
                    description=_folder_description(document, tag),
                ),
                children=requests,
            )
        )
        folder_sort_key += 1

    return folders


def build_request(operation: APIOperation, ctx: GenerationContext, sort_key: int) -> RequestItem:
    """Build the request for a single operation."""
    return RequestItem(
        url=build_url(operation.path, operation.parameters),
        name=operation.display_name,
        method=operation.method.upper(),
        meta=Meta(
            id=ctx.new_id(REQUEST_PREFIX),
            created=ctx.at(REQUEST_CREATED),
            modified=ctx.at(REQUEST_CREATED),
            description=operation.description or "",
            sort_key=sort_key,
        ),
    )


def _folder_description(document: SourceDocument, tag: str) -> str:
    return document.tag_description(tag) or f"Operations related to {tag}"
