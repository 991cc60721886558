"""Schema catalog -- turn payload types into reusable OpenAPI schemas.

This sub-package is responsible for the ``components/schemas`` section of a
document. Request and response payload types are given as Python type
annotations; records are stored once under a name derived from their
declaring module and referenced by ``$ref`` everywhere they are used, while
collections and primitives are always inlined.

Typical usage::

    from oasregistry.schema import SchemaCatalog

    catalog = SchemaCatalog(document, host_module="acme.billing")
    catalog.resolve(list[User])
    # {"type": "array", "items": {"$ref": "#/components/schemas/ContractsUser"}}

Sub-modules:

* :mod:`~oasregistry.schema.kinds` -- Classify a type annotation into a
  structural kind (record, collection, map, primitive, unsupported).
* :mod:`~oasregistry.schema.naming` -- Derive the catalog name of a record
  from its module path and the host program's organization.
* :mod:`~oasregistry.schema.generator` -- Produce JSON schemas with pydantic
  and inline nested definitions.
* :mod:`~oasregistry.schema.inliner` -- Replace ``$defs`` references with
  their targets, rejecting self-referential schemas.
* :mod:`~oasregistry.schema.catalog` -- The catalog itself: deduplication by
  type identity and collision detection.
"""

from oasregistry.schema.catalog import SCHEMA_REF_PREFIX, SchemaCatalog
from oasregistry.schema.kinds import TypeKind, classify
from oasregistry.schema.naming import derive_schema_name

__all__ = [
    "SCHEMA_REF_PREFIX",
    "SchemaCatalog",
    "TypeKind",
    "classify",
    "derive_schema_name",
]
