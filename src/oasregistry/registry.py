"""Endpoint registry -- collect operations and schemas into one OpenAPI document.

:class:`Registry` is the entry point of the package. Endpoints are declared
with :meth:`Registry.add_endpoint`, which derives the ``operationId`` from
the method and path and returns an :class:`OperationBuilder` for filling in
the rest of the operation. Payload types passed to the builder go through the
registry's :class:`~oasregistry.schema.catalog.SchemaCatalog`.

Example::

    registry = Registry(Info(title="Billing", version="1.0.0"), host_module="acme.billing")
    (
        registry.add_endpoint("GET", "/users/{userId}")
        .with_summary("Fetch a user")
        .with_tags("users")
        .with_response_with_content(200, "", User)
        .with_response(404, "")
    )
    document = registry.build_spec()
    print(document.to_yaml())

A registry is single-use. :meth:`Registry.build_spec` hands the document
over to the caller and clears the registry; every later call on the
registry, or on any builder it issued, raises
:class:`~oasregistry.exceptions.UsageOrderError`. Registries are not
thread-safe; callers sharing one must serialize access themselves.
"""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Any, Optional, Sequence, Union

from oasregistry.buildinfo import discover_host_module
from oasregistry.config import resolve_config
from oasregistry.exceptions import (
    DuplicateEndpointError,
    DuplicateFieldError,
    DuplicateOperationIdError,
    DuplicateResponseError,
    StatusCodeError,
    UnsupportedMethodError,
    UsageOrderError,
)
from oasregistry.models import (
    DEFAULT_OPENAPI_VERSION,
    HTTPMethod,
    Info,
    MediaType,
    OpenAPIDocument,
    Operation,
    PathItem,
    RegistryConfig,
    RequestBody,
    Response,
)
from oasregistry.paths import synthesize_operation_id
from oasregistry.schema import SchemaCatalog

logger = logging.getLogger(__name__)

JSON_CONTENT_TYPE = "application/json"


class Registry:
    """Collects operations and component schemas to produce an OpenAPI document.

    Args:
        info: The document's *Info Object*, as a model or a plain dict.
        host_module: Dotted module path of the program owning the payload
            types (e.g. ``"acme.billing"``). ``None`` discovers it from the
            running program once, here; ``""`` disables the ownership check.
        schema_key_prefixes_to_trim: Literal prefixes to strip from derived
            schema names, e.g. ``"Contracts"`` when every payload lives in a
            ``contracts`` module. The first matching prefix wins.
        openapi_version: Value of the document's ``openapi`` field.
    """

    def __init__(
        self,
        info: Union[Info, dict[str, Any]],
        *,
        host_module: Optional[str] = None,
        schema_key_prefixes_to_trim: Sequence[str] = (),
        openapi_version: str = DEFAULT_OPENAPI_VERSION,
    ) -> None:
        if not isinstance(info, Info):
            info = Info.model_validate(info)
        if host_module is None:
            host_module = discover_host_module()

        self._document: Optional[OpenAPIDocument] = OpenAPIDocument(
            openapi=openapi_version, info=info
        )
        self._operation_ids: Optional[set[str]] = set()
        self._catalog: Optional[SchemaCatalog] = SchemaCatalog(
            self._document,
            host_module=host_module,
            schema_key_prefixes_to_trim=schema_key_prefixes_to_trim,
        )
        self._built = False

    @classmethod
    def from_config(
        cls,
        info: Union[Info, dict[str, Any]],
        config: Optional[RegistryConfig] = None,
    ) -> Registry:
        """Create a registry from a :class:`~oasregistry.models.RegistryConfig`.

        When *config* is omitted it is resolved from the environment and the
        project's ``oasregistry.json`` via
        :func:`~oasregistry.config.resolve_config`.
        """
        if config is None:
            config = resolve_config()
        return cls(
            info,
            host_module=config.host_module,
            schema_key_prefixes_to_trim=config.schema_key_prefixes_to_trim,
            openapi_version=config.openapi_version,
        )

    @property
    def built(self) -> bool:
        """Whether :meth:`build_spec` has been called."""
        return self._built

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def add_endpoint(self, method: str, path: str) -> OperationBuilder:
        """Register a new operation for *method* and *path*.

        Args:
            method: One of ``GET``, ``POST``, ``PUT``, ``DELETE``, ``PATCH``
                (upper case).
            path: Path template, e.g. ``"/users/{userId}/orders"``. See
                :func:`~oasregistry.paths.operation_id.synthesize_operation_id`
                for the supported shapes.

        Returns:
            A builder for the new operation.

        Raises:
            UsageOrderError: If the registry is already built.
            UnsupportedMethodError: If *method* is not supported.
            PathFormatError: If *path* is not a supported template.
            DuplicateEndpointError: If *method* and *path* are already
                registered.
            DuplicateOperationIdError: If another endpoint already produced
                the same operation id.
        """
        document, operation_ids = self._ensure_mutable()

        try:
            http_method = HTTPMethod(method)
        except ValueError:
            raise UnsupportedMethodError(f"unsupported method: {method}") from None
        operation_id = synthesize_operation_id(method, path)

        item = document.paths.get(path)
        if item is None:
            item = PathItem()
        if item.get_operation(http_method) is not None:
            raise DuplicateEndpointError(f"endpoint is already registered for {method} {path}")
        if operation_id in operation_ids:
            raise DuplicateOperationIdError(f"operation with id {operation_id} already exists")

        operation = Operation(operation_id=operation_id)
        item.set_operation(http_method, operation)
        document.paths[path] = item
        operation_ids.add(operation_id)
        logger.debug("Registered %s %s as %s", method, path, operation_id)
        return OperationBuilder(self, operation)

    def build_spec(self) -> OpenAPIDocument:
        """Return the generated document and consume the registry.

        Serialise the result with
        :meth:`~oasregistry.models.OpenAPIDocument.to_json` or
        :meth:`~oasregistry.models.OpenAPIDocument.to_yaml`.

        Raises:
            UsageOrderError: If the registry is already built.
        """
        document, _ = self._ensure_mutable(action="build")

        self._built = True
        self._operation_ids = None
        if self._catalog is not None:
            self._catalog.clear()
        self._catalog = None
        self._document = None

        logger.debug(
            "Built OpenAPI document with %d paths and %d schemas",
            len(document.paths),
            len(document.components.schemas) if document.components else 0,
        )
        return document

    # ------------------------------------------------------------------
    # Internals shared with OperationBuilder
    # ------------------------------------------------------------------

    def _ensure_mutable(self, action: str = "mutate") -> tuple[OpenAPIDocument, set[str]]:
        if self._built or self._document is None or self._operation_ids is None:
            if action == "build":
                raise UsageOrderError("registry is already built")
            raise UsageOrderError("cannot mutate already built registry")
        return self._document, self._operation_ids

    def _resolve_schema(self, tp: Any) -> dict[str, Any]:
        self._ensure_mutable()
        assert self._catalog is not None  # cleared only together with the document
        return self._catalog.resolve(tp)


class OperationBuilder:
    """Fluent helper used to fill in one registered operation.

    Every method returns the builder so calls can be chained. Summary,
    description and request body may be set once each; tags accumulate; each
    response status may be set once.
    """

    def __init__(self, registry: Registry, operation: Operation) -> None:
        self._registry = registry
        self._operation = operation

    @property
    def operation_id(self) -> str:
        assert self._operation.operation_id is not None
        return self._operation.operation_id

    def with_summary(self, summary: str) -> OperationBuilder:
        self._registry._ensure_mutable()
        if self._operation.summary is not None:
            raise DuplicateFieldError("summary has already been set")
        self._operation.summary = summary
        return self

    def with_tags(self, *tags: str) -> OperationBuilder:
        self._registry._ensure_mutable()
        if tags:
            self._operation.tags = [*(self._operation.tags or []), *tags]
        return self

    def with_description(self, description: str) -> OperationBuilder:
        self._registry._ensure_mutable()
        if self._operation.description is not None:
            raise DuplicateFieldError("description has already been set")
        self._operation.description = description
        return self

    def with_request_body(self, request_body_type: Any) -> OperationBuilder:
        """Declare a required JSON request body of type *request_body_type*."""
        self._registry._ensure_mutable()
        if self._operation.request_body is not None:
            raise DuplicateFieldError("request body has already been set")

        schema = self._registry._resolve_schema(request_body_type)
        self._operation.request_body = RequestBody(
            required=True,
            content={JSON_CONTENT_TYPE: MediaType(schema=schema)},
        )
        return self

    def with_response(self, status: int, description: str = "") -> OperationBuilder:
        """Declare a response without a body.

        An empty *description* defaults to the status code's reason phrase.

        Raises:
            StatusCodeError: If *status* is outside ``[0, 600)``.
            DuplicateResponseError: If *status* is already declared.
        """
        self._registry._ensure_mutable()
        key = self._check_status(status)
        self._add_response(key, Response(description=description or _status_text(status)))
        return self

    def with_response_with_content(
        self,
        status: int,
        description: str,
        content_type: Any,
    ) -> OperationBuilder:
        """Declare a response whose JSON body is of type *content_type*.

        Raises:
            StatusCodeError: If *status* is outside ``[0, 600)``.
            DuplicateResponseError: If *status* is already declared.
        """
        self._registry._ensure_mutable()
        key = self._check_status(status)

        schema = self._registry._resolve_schema(content_type)
        response = Response(
            description=description or _status_text(status),
            content={JSON_CONTENT_TYPE: MediaType(schema=schema)},
        )
        self._add_response(key, response)
        return self

    def _check_status(self, status: int) -> str:
        if isinstance(status, bool) or not isinstance(status, int) or not 0 <= status < 600:
            raise StatusCodeError(f"invalid http status code: {status}")
        key = str(status)
        if self._operation.responses is not None and key in self._operation.responses:
            raise DuplicateResponseError(f"response with status code {key} has already been set")
        return key

    def _add_response(self, key: str, response: Response) -> None:
        if self._operation.responses is None:
            self._operation.responses = {}
        self._operation.responses[key] = response


def _status_text(status: int) -> str:
    """Standard reason phrase for *status*, or ``""`` for unassigned codes."""
    try:
        return HTTPStatus(status).phrase
    except ValueError:
        return ""
