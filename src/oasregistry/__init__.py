"""oasregistry -- build OpenAPI 3.0 documents from endpoint declarations.

Endpoints are declared in code with an HTTP method and a path template;
request and response payloads are given as Python types (pydantic models,
dataclasses, ``TypedDict``s, collections and scalars). The registry derives
every ``operationId`` from the method and path, and stores each record type
once in ``components/schemas`` under a name derived from its module.

Typical workflow::

    from oasregistry import Info, Registry

    registry = Registry(Info(title="Billing", version="1.0.0"))
    registry.add_endpoint("GET", "/users/{userId}").with_response_with_content(200, "", User)
    document = registry.build_spec()
    document.to_json()

or from the shell::

    oasreg export acme.billing.api:registry --format yaml -o openapi.yaml

Modules:
    registry: :class:`Registry` and its fluent :class:`OperationBuilder`.
    paths: Path template splitting and operation id synthesis.
    schema: Payload type classification, naming and the schema catalog.
    models: Pydantic models for the document and the configuration.
    config: Project config file, environment, and precedence resolution.
    exceptions: Exception hierarchy with exit-code mapping.
    app: Typer application and ``oasreg`` entry point.
"""

from oasregistry.models import Info, OpenAPIDocument, RegistryConfig
from oasregistry.registry import OperationBuilder, Registry

__version__ = "0.1.0"

__all__ = [
    "Info",
    "OpenAPIDocument",
    "OperationBuilder",
    "Registry",
    "RegistryConfig",
    "__version__",
]
