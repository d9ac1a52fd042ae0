"""Canonical Pydantic models shared across all insomnia-sync modules.

This is the single source of truth for data shapes in the project. Every other
module imports from here rather than defining its own models. The models fall
into three groups:

**Configuration models** -- loaded from JSON config files:
    :class:`WatchConfig`, :class:`OutputConfig`, and :class:`GlobalConfig`.

**Source projection models** -- the typed, read-only view over a parsed
OpenAPI/Swagger document that the generator consumes:
    :class:`HTTPMethod`, :class:`ParameterLocation`, :class:`APIParameter`,
    :class:`APIOperation`, :class:`ContactInfo`, :class:`APIInfo`,
    :class:`ServerInfo`, :class:`TagInfo`, and :class:`SourceDocument`.

**Workspace models** -- the Insomnia v5 export written to disk:
    :class:`Meta`, :class:`RequestSettings`, :class:`RequestItem`,
    :class:`Folder`, :class:`CookieJar`, :class:`Environment`,
    :class:`SubEnvironment`, :class:`SpecContainer`, and :class:`Workspace`.

Workspace models declare their fields in the exact order Insomnia writes them
and use camelCase aliases for the keys Insomnia spells that way. Dump them with
``model_dump(by_alias=True)``; the omission rules for optional keys live in the
``model_serializer`` hooks below.
"""

from __future__ import annotations

import enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, model_serializer

INSOMNIA_EXPORT_TYPE = "spec.insomnia.rest/5.0"
"""Schema-version marker written as the ``type`` of every export."""

DEFAULT_FOLDER = "default"
"""Folder name for operations that declare no tags."""


# --- Configuration ---


class WatchConfig(BaseModel):
    """Settings for the change watcher and the directory scanner."""

    interval: float = Field(
        default=2.0, gt=0, description="Polling interval in seconds"
    )
    extensions: list[str] = Field(
        default_factory=lambda: [".yml", ".yaml"],
        description="File extensions considered by the directory scanner",
    )
    ignore: list[str] = Field(
        default_factory=list,
        description="Gitignore-style patterns excluded from directory scans",
    )
    respect_gitignore: bool = Field(
        default=True, description="Skip paths matched by the root .gitignore"
    )


class OutputConfig(BaseModel):
    """How output file names are derived from source file names."""

    suffix: str = Field(
        default="-insomnia", description="Tag appended to the source file stem"
    )
    extension: str = Field(
        default=".yml", description="Extension of generated workspace files"
    )


class GlobalConfig(BaseModel):
    """Effective configuration, merged from config files and environment.

    Loaded by :func:`~insomnia_sync.config.resolve_config`. Both the user-wide
    ``config.json`` and the project-local ``insomnia-sync.json`` share this
    shape; unknown keys are ignored.
    """

    watch: WatchConfig = Field(default_factory=WatchConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)


# --- Source projection ---


class HTTPMethod(str, enum.Enum):
    """HTTP methods recognised in path-item objects.

    Declaration order is the canonical processing order used when walking a
    path item, so generated workspaces list methods the same way on every run.
    """

    GET = "get"
    PUT = "put"
    POST = "post"
    DELETE = "delete"
    OPTIONS = "options"
    HEAD = "head"
    PATCH = "patch"
    TRACE = "trace"


class ParameterLocation(str, enum.Enum):
    """Locations where an API parameter can appear, per the ``in`` field."""

    QUERY = "query"
    HEADER = "header"
    PATH = "path"
    COOKIE = "cookie"
    # Swagger 2.0 only
    BODY = "body"
    FORM_DATA = "formData"


class APIParameter(BaseModel):
    """The two parameter fields the URL templater needs."""

    model_config = ConfigDict(frozen=True)

    name: str
    location: ParameterLocation


class APIOperation(BaseModel):
    """A single parsed API operation (one URL path + method pair).

    Each operation becomes exactly one request in the generated workspace.
    ``method`` keeps the key as written in the document (lower-case for
    well-formed specs).
    """

    model_config = ConfigDict(frozen=True)

    path: str
    method: str
    operation_id: Optional[str] = None
    summary: Optional[str] = None
    description: Optional[str] = None
    tags: list[str] = Field(default_factory=list)
    parameters: list[APIParameter] = Field(default_factory=list)

    @property
    def display_name(self) -> str:
        """Summary, or ``"<METHOD> <path>"`` when the operation has none."""
        return self.summary or f"{self.method.upper()} {self.path}"

    @property
    def folder_name(self) -> str:
        """First tag, or :data:`DEFAULT_FOLDER` when untagged."""
        return self.tags[0] if self.tags else DEFAULT_FOLDER


class ContactInfo(BaseModel):
    """Contact block of the *Info Object*."""

    model_config = ConfigDict(frozen=True)

    name: Optional[str] = None
    email: Optional[str] = None


class APIInfo(BaseModel):
    """API metadata extracted from the document's *Info Object*."""

    model_config = ConfigDict(frozen=True)

    title: str
    version: str
    description: Optional[str] = None
    contact: Optional[ContactInfo] = None


class ServerInfo(BaseModel):
    """A server entry, in declaration order."""

    model_config = ConfigDict(frozen=True)

    url: str
    description: Optional[str] = None


class TagInfo(BaseModel):
    """An entry of the top-level ``tags`` registry."""

    model_config = ConfigDict(frozen=True)

    name: str
    description: Optional[str] = None


class SourceDocument(BaseModel):
    """Typed projection of a parsed OpenAPI/Swagger document.

    Produced by :func:`~insomnia_sync.parser.extractor.extract_document` from
    the generic tree returned by the loader; the tree itself is kept
    separately and embedded verbatim in the output. ``paths`` maps each path
    to its operations keyed by method, and both levels are stored in
    processing order (paths sorted, methods in :class:`HTTPMethod` order).
    """

    model_config = ConfigDict(frozen=True)

    spec_version: Optional[str] = Field(
        default=None, description="Value of the root 'openapi' or 'swagger' key"
    )
    info: APIInfo
    servers: list[ServerInfo] = Field(default_factory=list)
    paths: dict[str, dict[str, APIOperation]] = Field(default_factory=dict)
    tags: list[TagInfo] = Field(default_factory=list)

    def operations(self) -> list[APIOperation]:
        """Return every operation in processing order."""
        return [op for methods in self.paths.values() for op in methods.values()]

    def tag_description(self, name: str) -> Optional[str]:
        """Return the registry description for tag *name*, if any."""
        for tag in self.tags:
            if tag.name == name:
                return tag.description
        return None


# --- Workspace (Insomnia v5 export) ---


class Meta(BaseModel):
    """Identifier, timestamps and ordering metadata shared by every entity.

    ``description`` is dropped when empty, ``isPrivate`` when false, and
    ``sortKey`` when zero; all other keys are always written.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str
    created: int
    modified: int
    description: str = ""
    is_private: bool = Field(default=False, alias="isPrivate")
    sort_key: int = Field(default=0, alias="sortKey")

    @model_serializer(mode="wrap")
    def _omit_empty(self, handler: Any) -> dict[str, Any]:
        data = handler(self)
        if not self.description:
            data.pop("description", None)
        if not self.is_private:
            data.pop("isPrivate", None)
            data.pop("is_private", None)
        if not self.sort_key:
            data.pop("sortKey", None)
            data.pop("sort_key", None)
        return data


class CookieSettings(BaseModel):
    send: bool = True
    store: bool = True


class RequestSettings(BaseModel):
    """Fixed request-execution settings attached to every generated request."""

    model_config = ConfigDict(populate_by_name=True)

    render_request_body: bool = Field(default=True, alias="renderRequestBody")
    encode_url: bool = Field(default=True, alias="encodeUrl")
    follow_redirects: str = Field(default="global", alias="followRedirects")
    cookies: CookieSettings = Field(default_factory=CookieSettings)
    rebuild_path: bool = Field(default=True, alias="rebuildPath")


class RequestItem(BaseModel):
    """A request inside a folder of the collection."""

    url: str
    name: str
    meta: Meta
    method: str
    settings: RequestSettings = Field(default_factory=RequestSettings)


class Folder(BaseModel):
    """A request group; one per tag. ``children`` is dropped when empty."""

    name: str
    meta: Meta
    children: list[RequestItem] = Field(default_factory=list)

    @model_serializer(mode="wrap")
    def _omit_empty(self, handler: Any) -> dict[str, Any]:
        data = handler(self)
        if not self.children:
            data.pop("children", None)
        return data


class CookieJar(BaseModel):
    name: str = "Default Jar"
    meta: Meta


class EnvironmentData(BaseModel):
    base_url: str


class SubEnvironmentData(BaseModel):
    scheme: str
    base_path: str
    host: str


class SubEnvironment(BaseModel):
    """Per-server environment supplying ``scheme``, ``host`` and ``base_path``."""

    name: str
    meta: Meta
    data: SubEnvironmentData


class Environment(BaseModel):
    """The base environment plus one sub-environment per declared server."""

    model_config = ConfigDict(populate_by_name=True)

    name: str = "Base Environment"
    meta: Meta
    data: EnvironmentData
    sub_environments: list[SubEnvironment] = Field(
        default_factory=list, alias="subEnvironments"
    )


class SpecContainer(BaseModel):
    """The source document tree, embedded verbatim."""

    contents: Any = None
    meta: Meta


class Workspace(BaseModel):
    """Top-level Insomnia v5 export document."""

    model_config = ConfigDict(populate_by_name=True)

    type: str = INSOMNIA_EXPORT_TYPE
    name: str
    meta: Meta
    collection: list[Folder] = Field(default_factory=list)
    cookie_jar: CookieJar = Field(alias="cookieJar")
    environments: Environment
    spec: SpecContainer

    def request_count(self) -> int:
        """Total number of requests across all folders."""
        return sum(len(folder.children) for folder in self.collection)
