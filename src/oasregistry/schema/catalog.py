"""The component schema catalog of one registry.

:class:`SchemaCatalog` maps payload types to schema nodes. Records are
generated once, stored in the document's ``components/schemas`` under a
derived name, and referenced with ``$ref`` from then on; collections and
primitives are inlined at every use.

The catalog remembers which type produced each name. Resolving the same
type again returns the same reference without touching the catalog, while a
different type deriving the same name is a
:class:`~oasregistry.exceptions.NamingCollisionError`.
"""

from __future__ import annotations

import logging
from typing import Any, Optional, Sequence

from oasregistry.exceptions import (
    NamingCollisionError,
    SchemaNotImplementedError,
    UnsupportedKindError,
)
from oasregistry.models import Components, OpenAPIDocument
from oasregistry.schema.generator import SchemaGenerator
from oasregistry.schema.kinds import TypeKind, classify, element_type
from oasregistry.schema.naming import derive_schema_name

logger = logging.getLogger(__name__)

SCHEMA_REF_PREFIX = "#/components/schemas/"
"""Prefix of every ``$ref`` pointing into the catalog."""


class SchemaCatalog:
    """Resolve payload types into schema nodes, cataloging records by name.

    The catalog writes into ``document.components``, creating it when the
    first record is registered, so documents without record payloads carry
    no ``components`` section at all.

    Args:
        document: The document whose ``components/schemas`` section the
            catalog owns.
        host_module: Dotted module path of the program owning the payload
            types, or ``""`` when unknown. See
            :func:`~oasregistry.schema.naming.derive_schema_name`.
        schema_key_prefixes_to_trim: Literal prefixes stripped from derived
            names, first match wins.
        generator: Schema generator; a default :class:`SchemaGenerator` is
            created when omitted.

    Example::

        catalog = SchemaCatalog(document, host_module="acme.billing")
        ref = catalog.resolve(User)
        # {"$ref": "#/components/schemas/ContractsUser"}
        assert catalog.resolve(User) == ref
    """

    def __init__(
        self,
        document: OpenAPIDocument,
        host_module: str = "",
        schema_key_prefixes_to_trim: Sequence[str] = (),
        generator: Optional[SchemaGenerator] = None,
    ) -> None:
        self._document = document
        self._host_module = host_module
        self._prefixes = list(schema_key_prefixes_to_trim)
        self._generator = generator or SchemaGenerator()
        self._registered_types: dict[str, Any] = {}

    @property
    def host_module(self) -> str:
        return self._host_module

    @property
    def names(self) -> list[str]:
        """Names registered so far, in registration order."""
        return list(self._registered_types)

    def resolve(self, tp: Any) -> dict[str, Any]:
        """Return the schema node to embed wherever *tp* is used.

        Args:
            tp: A payload type annotation, e.g. ``User``, ``list[User]`` or
                ``int``.

        Returns:
            ``{"$ref": ...}`` for records, ``{"type": "array", "items": ...}``
            for collections, and an inline schema for primitives.

        Raises:
            SchemaNotImplementedError: For mapping types.
            UnsupportedKindError: For unions, callables, ``Any`` and other
                shapes without a schema.
            ForeignTypeError: If a record is not owned by the host program.
            NamingCollisionError: If a different type already holds the
                record's derived name.
            SchemaCycleError: If a record refers to itself.
            SchemaGenerationError: If pydantic cannot describe the type.
        """
        kind = classify(tp)
        if kind is TypeKind.MAP:
            raise SchemaNotImplementedError(f"mapping payload types are not implemented yet: {tp!r}")
        if kind is TypeKind.COLLECTION:
            return {"type": "array", "items": self.resolve(element_type(tp))}
        if kind is TypeKind.UNSUPPORTED:
            raise UnsupportedKindError(f"payload type kind is not supported: {tp!r}")
        if kind is TypeKind.PRIMITIVE:
            return self._generator.generate(tp)
        return self._register_record(tp)

    def clear(self) -> None:
        """Forget every registered type and configured prefix."""
        self._registered_types.clear()
        self._prefixes = []

    def _register_record(self, tp: type) -> dict[str, Any]:
        name = derive_schema_name(tp, self._host_module, self._prefixes)

        registered = self._registered_types.get(name)
        if registered is None:
            schema = self._generator.generate(tp)
            if self._document.components is None:
                self._document.components = Components()
            self._document.components.schemas[name] = schema
            self._registered_types[name] = tp
            logger.debug("Cataloged schema %s for %s.%s", name, tp.__module__, tp.__qualname__)
        elif registered is not tp:
            raise NamingCollisionError(
                f"schema name {name} is already registered with type "
                f"{registered.__module__}.{registered.__qualname__}"
            )
        else:
            logger.debug("Reusing cataloged schema %s", name)

        return {"$ref": SCHEMA_REF_PREFIX + name}
