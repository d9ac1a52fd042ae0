"""Derive Insomnia environments from the document's server declarations."""

from __future__ import annotations

from insomnia_sync.generator.context import (
    BASE_ENVIRONMENT_CREATED,
    BASE_ENVIRONMENT_MODIFIED,
    ENVIRONMENT_PREFIX,
    SUB_ENVIRONMENT_FIRST,
    GenerationContext,
)
from insomnia_sync.generator.urls import BASE_URL_TEMPLATE, parse_server_url
from insomnia_sync.models import (
    Environment,
    EnvironmentData,
    Meta,
    SourceDocument,
    SubEnvironment,
    SubEnvironmentData,
)


def build_environments(document: SourceDocument, ctx: GenerationContext) -> Environment:
    """Build the base environment with one sub-environment per server.

    The base environment only defines ``base_url`` in terms of the
    ``scheme``, ``host`` and ``base_path`` variables; each sub-environment
    supplies those three values for one server. Sub-environments keep the
    servers' declaration order and get strictly increasing sort keys.
    """
    base_id = ctx.new_id(ENVIRONMENT_PREFIX)
    sub_environments: list[SubEnvironment] = []
    sort_key = ctx.at(SUB_ENVIRONMENT_FIRST)

    for server in document.servers:
        scheme, host, base_path = parse_server_url(server.url)
        sub_environments.append(
            SubEnvironment(
                name=f"OpenAPI env {host}",
                meta=Meta(
                    id=ctx.new_id(ENVIRONMENT_PREFIX),
                    created=sort_key,
                    modified=sort_key,
                    sort_key=sort_key,
                ),
                data=SubEnvironmentData(scheme=scheme, base_path=base_path, host=host),
            )
        )
        sort_key += 1

    return Environment(
        meta=Meta(
            id=base_id,
            created=ctx.at(BASE_ENVIRONMENT_CREATED),
            modified=ctx.at(BASE_ENVIRONMENT_MODIFIED),
        ),
        data=EnvironmentData(base_url=BASE_URL_TEMPLATE),
        sub_environments=sub_environments,
    )
