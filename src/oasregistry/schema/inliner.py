"""Inline the ``$defs`` of a pydantic JSON schema into a standalone schema.

pydantic emits every nested model once under ``$defs`` and points at it with
``{"$ref": "#/$defs/Name"}``. A component schema must be self-contained, so
this module performs a recursive deep-copy traversal that replaces every
such reference with the definition it points to.

A definition that is reached again while it is still being expanded means
the type graph is self-referential. There is no finite inline form for it,
so :class:`~oasregistry.exceptions.SchemaCycleError` is raised instead of
emitting a partial schema.

The single public function is :func:`inline_definitions`.
"""

from __future__ import annotations

from typing import Any

from oasregistry.exceptions import SchemaCycleError, SchemaGenerationError

_DEFS_KEY = "$defs"
_DEFS_REF_PREFIX = "#/$defs/"
_NAMED_SCHEMA_KEYS = frozenset({"properties", "patternProperties"})


def inline_definitions(schema: dict[str, Any], type_name: str = "") -> dict[str, Any]:
    """Return a copy of *schema* with every ``#/$defs/...`` reference expanded.

    Args:
        schema: A JSON schema as produced by pydantic's ``json_schema()``,
            optionally carrying a top-level ``$defs`` section.
        type_name: Name of the type the schema describes, used in error
            messages.

    Returns:
        A **new** schema without ``$defs`` and without ``$ref`` pointers.

    Raises:
        SchemaCycleError: If a definition refers back to itself, directly or
            through other definitions.
        SchemaGenerationError: If a ``$ref`` points outside ``#/$defs/`` or
            to a missing definition.

    Example::

        inline_definitions({
            "$defs": {"Address": {"type": "object"}},
            "properties": {"address": {"$ref": "#/$defs/Address"}},
            "type": "object",
        })
        # {"properties": {"address": {"type": "object"}}, "type": "object"}
    """
    definitions = schema.get(_DEFS_KEY, {})
    root = {key: value for key, value in schema.items() if key != _DEFS_KEY}
    return _deep_inline(root, definitions, frozenset(), type_name)


def _deep_inline(
    obj: Any,
    definitions: dict[str, Any],
    seen: frozenset[str],
    type_name: str,
) -> Any:
    """Recursively expand references within *obj*.

    ``seen`` holds the definitions currently being expanded on this branch.
    A new set is built for each nested expansion so that sibling references
    to the same definition (two fields of the same model type) are not
    mistaken for a cycle.

    Only a string-valued ``$ref`` is a reference. The keys of a
    ``properties`` mapping are field names, so a field aliased ``$ref`` is
    walked like any other field.
    """
    if isinstance(obj, dict):
        ref = obj.get("$ref")
        if isinstance(ref, str):
            name = _definition_name(ref, type_name)
            if name in seen:
                raise SchemaCycleError(
                    f"cycle detected in schema of {type_name or 'type'}: "
                    f"{name} refers back to itself"
                )
            if name not in definitions:
                raise SchemaGenerationError(
                    f"error generating schema of {type_name or 'type'}: "
                    f"missing definition {name}"
                )
            resolved = _deep_inline(definitions[name], definitions, seen | {name}, type_name)
            # Keywords next to $ref (e.g. a field description) override the definition's.
            siblings = {
                key: _deep_inline(value, definitions, seen, type_name)
                for key, value in obj.items()
                if key != "$ref"
            }
            return {**resolved, **siblings}

        result: dict[str, Any] = {}
        for key, value in obj.items():
            if key in _NAMED_SCHEMA_KEYS and isinstance(value, dict):
                result[key] = {
                    field: _deep_inline(schema, definitions, seen, type_name)
                    for field, schema in value.items()
                }
            else:
                result[key] = _deep_inline(value, definitions, seen, type_name)
        return result

    if isinstance(obj, list):
        return [_deep_inline(item, definitions, seen, type_name) for item in obj]

    return obj


def _definition_name(ref: str, type_name: str) -> str:
    if not ref.startswith(_DEFS_REF_PREFIX):
        raise SchemaGenerationError(
            f"error generating schema of {type_name or 'type'}: unsupported $ref {ref!r}"
        )
    return ref[len(_DEFS_REF_PREFIX) :]
