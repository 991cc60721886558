"""Structural schema generation backed by pydantic.

:class:`SchemaGenerator` wraps :class:`pydantic.TypeAdapter` so the rest of
the package never talks to pydantic's JSON-schema machinery directly. Every
generated schema is passed through
:func:`~oasregistry.schema.inliner.inline_definitions`, which makes it
self-contained and rejects cyclic type graphs.
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import PydanticUserError, TypeAdapter

from oasregistry.exceptions import SchemaGenerationError
from oasregistry.schema.inliner import inline_definitions

logger = logging.getLogger(__name__)


class SchemaGenerator:
    """Generate self-contained JSON schemas for payload types.

    Args:
        mode: pydantic JSON-schema mode, ``"validation"`` (default) or
            ``"serialization"``.
    """

    def __init__(self, mode: str = "validation") -> None:
        self._mode = mode

    def generate(self, tp: Any) -> dict[str, Any]:
        """Return the inline JSON schema describing *tp*.

        Raises:
            SchemaCycleError: If *tp* refers to itself.
            SchemaGenerationError: If pydantic cannot describe *tp*.
        """
        type_name = getattr(tp, "__name__", repr(tp))
        try:
            schema = TypeAdapter(tp).json_schema(mode=self._mode)
        except PydanticUserError as exc:
            raise SchemaGenerationError(
                f"error generating schema of {type_name}: {exc}"
            ) from exc
        logger.debug("Generated %s schema for %s", self._mode, type_name)
        return inline_definitions(schema, type_name)
