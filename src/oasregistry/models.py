"""Canonical Pydantic models shared across all oasregistry modules.

This is the single source of truth for data shapes in the project. Every other
module imports from here rather than defining its own models. The models fall
into three groups:

**Configuration models** -- loaded from ``oasregistry.json`` and the
environment by :mod:`oasregistry.config`:
    :class:`RegistryConfig`.

**Path models** -- produced by :func:`~oasregistry.paths.splitter.split_path`
and consumed by the operation id synthesizer:
    :class:`HTTPMethod` and :class:`PathSegment`.

**Document models** -- the OpenAPI 3.0 document assembled by
:class:`~oasregistry.registry.Registry`:
    :class:`Contact`, :class:`License`, :class:`Info`, :class:`Server`,
    :class:`MediaType`, :class:`RequestBody`, :class:`Response`,
    :class:`Operation`, :class:`PathItem`, :class:`Components`, and
    :class:`OpenAPIDocument`.

Schema nodes are kept as plain JSON-compatible dicts: either an inline JSON
schema or a ``{"$ref": "#/components/schemas/<Name>"}`` pointer. Fields
whose OpenAPI name is not a valid Python identifier use aliases, and the
document is always dumped ``by_alias`` with ``None`` fields omitted.
"""

from __future__ import annotations

import enum
import json
from typing import Any, Iterator, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field

DEFAULT_OPENAPI_VERSION = "3.0.3"
"""The OpenAPI version written into new documents."""


# --- Config ---


class RegistryConfig(BaseModel):
    """Construction-time configuration for a :class:`~oasregistry.registry.Registry`.

    Resolved by :func:`~oasregistry.config.resolve_config` from explicit
    arguments, environment variables, and the project-local
    ``oasregistry.json`` file.

    Example::

        RegistryConfig(
            host_module="acme.billing",
            schema_key_prefixes_to_trim=["Contracts"],
        )
    """

    openapi_version: str = Field(
        default=DEFAULT_OPENAPI_VERSION, description="Value of the document's 'openapi' field"
    )
    host_module: Optional[str] = Field(
        default=None,
        description="Dotted module path of the program owning the payload types; "
        "None discovers it from the running program",
    )
    schema_key_prefixes_to_trim: list[str] = Field(
        default_factory=list,
        description="Literal prefixes stripped from derived schema names, first match wins",
    )


# --- Paths ---


class HTTPMethod(str, enum.Enum):
    """HTTP methods a :class:`~oasregistry.registry.Registry` accepts.

    Values are matched case-sensitively, so ``"get"`` is not a supported
    method while ``"GET"`` is.
    """

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    PATCH = "PATCH"

    @property
    def field_name(self) -> str:
        """Name of the :class:`PathItem` field holding this method's operation."""
        return self.value.lower()


class PathSegment(BaseModel):
    """One step of a path template: a literal word, optionally addressed by a placeholder.

    ``/users/{userId}/orders`` splits into
    ``PathSegment(word="users", placeholder="userId")`` and
    ``PathSegment(word="orders")``.
    """

    model_config = ConfigDict(frozen=True)

    word: str
    placeholder: Optional[str] = Field(
        default=None, description="Inner name of the {...} segment following the word"
    )

    @property
    def is_parameterized(self) -> bool:
        return self.placeholder is not None


# --- Document ---


class Contact(BaseModel):
    name: Optional[str] = None
    url: Optional[str] = None
    email: Optional[str] = None


class License(BaseModel):
    name: str
    url: Optional[str] = None


class Info(BaseModel):
    """The document's *Info Object* -- the only part callers supply up front."""

    model_config = ConfigDict(populate_by_name=True)

    title: str
    version: str
    description: Optional[str] = None
    terms_of_service: Optional[str] = Field(default=None, alias="termsOfService")
    contact: Optional[Contact] = None
    license: Optional[License] = None


class Server(BaseModel):
    url: str
    description: Optional[str] = None


class MediaType(BaseModel):
    """A *Media Type Object* wrapping one schema node."""

    model_config = ConfigDict(populate_by_name=True)

    schema_: Optional[dict[str, Any]] = Field(default=None, alias="schema")


class RequestBody(BaseModel):
    description: Optional[str] = None
    content: dict[str, MediaType] = Field(default_factory=dict)
    required: bool = False


class Response(BaseModel):
    """A *Response Object*. ``description`` is mandatory in OpenAPI."""

    description: str
    content: Optional[dict[str, MediaType]] = None


class Operation(BaseModel):
    """A single OpenAPI operation (one path + HTTP method pair).

    Created empty by :meth:`~oasregistry.registry.Registry.add_endpoint` and
    filled in exclusively through the returned
    :class:`~oasregistry.registry.OperationBuilder`.
    """

    model_config = ConfigDict(populate_by_name=True)

    tags: Optional[list[str]] = None
    summary: Optional[str] = None
    description: Optional[str] = None
    operation_id: Optional[str] = Field(default=None, alias="operationId")
    request_body: Optional[RequestBody] = Field(default=None, alias="requestBody")
    responses: Optional[dict[str, Response]] = None


class PathItem(BaseModel):
    """The operations registered for one path template, keyed by method."""

    get: Optional[Operation] = None
    post: Optional[Operation] = None
    put: Optional[Operation] = None
    delete: Optional[Operation] = None
    patch: Optional[Operation] = None

    def get_operation(self, method: HTTPMethod) -> Optional[Operation]:
        return getattr(self, method.field_name)

    def set_operation(self, method: HTTPMethod, operation: Operation) -> None:
        setattr(self, method.field_name, operation)

    def operations(self) -> Iterator[tuple[HTTPMethod, Operation]]:
        """Yield ``(method, operation)`` pairs in :class:`HTTPMethod` order."""
        for method in HTTPMethod:
            operation = self.get_operation(method)
            if operation is not None:
                yield method, operation


class Components(BaseModel):
    """The *Components Object*; only the schema catalog is populated."""

    schemas: dict[str, dict[str, Any]] = Field(default_factory=dict)


class OpenAPIDocument(BaseModel):
    """Complete OpenAPI document produced by :meth:`~oasregistry.registry.Registry.build_spec`.

    Serialise it with :meth:`to_json` or :meth:`to_yaml` and publish it over
    whatever transport the application uses.

    See Also:
        :class:`Operation`: Individual operation within a path item.
        :class:`Components`: Holder of the deduplicated schema catalog.
    """

    openapi: str = DEFAULT_OPENAPI_VERSION
    info: Info
    servers: Optional[list[Server]] = None
    paths: dict[str, PathItem] = Field(default_factory=dict)
    components: Optional[Components] = None

    def to_dict(self) -> dict[str, Any]:
        """Return the document as plain JSON-compatible data with OpenAPI field names."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    def to_json(self, indent: Optional[int] = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)

    def to_yaml(self) -> str:
        return yaml.safe_dump(self.to_dict(), sort_keys=False, allow_unicode=True)
