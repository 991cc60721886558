"""Derive component schema names from a record type's declaring module.

A record's name in ``components/schemas`` is its module path in PascalCase
followed by the class name. When the host program's own module is known
(e.g. ``acme.billing``), the payload type must live under the same
organization (``acme.``); the organization is dropped from the name, and so
is the host module itself when the type lives inside it::

    host acme.billing, acme.billing.contracts.User  ->  ContractsUser
    host acme.billing, acme.billing.User            ->  User
    host acme.billing, acme.shared.dto.User         ->  SharedDtoUser
    host acme.billing, other.dto.User               ->  ForeignTypeError
    host unknown,      app.models.User              ->  AppModelsUser

Configured literal prefixes are then stripped from the front of the name,
first match wins.
"""

from __future__ import annotations

import re
from typing import Any, Sequence

from oasregistry.exceptions import ForeignTypeError, SchemaNamingError

_COMPONENT_SEPARATORS = re.compile(r"[._-]")


def derive_schema_name(
    tp: Any,
    host_module: str = "",
    prefixes: Sequence[str] = (),
) -> str:
    """Derive the catalog name of record type *tp*.

    Args:
        tp: A record class (pydantic model, dataclass, or ``TypedDict``).
        host_module: Dotted module path of the program that owns the
            payload types, or ``""`` when unknown.
        prefixes: Literal prefixes to strip from the derived name. Only the
            first matching prefix is stripped.

    Returns:
        The derived name, e.g. ``"ContractsUser"``.

    Raises:
        ForeignTypeError: If the declaring module of *tp* is unknown or lies
            outside the host module's organization.
        SchemaNamingError: If the host module has no organization component,
            or stripping a prefix leaves an empty name.
    """
    module = getattr(tp, "__module__", None)
    if not module or module == "__main__":
        raise ForeignTypeError(f"cannot determine the declaring module of type {tp!r}")

    if host_module:
        module = _strip_host_scope(module, host_module)

    name = _pascal_case_components(module) + tp.__name__
    for prefix in prefixes:
        if prefix and name.startswith(prefix):
            name = name[len(prefix) :]
            break

    if not name:
        raise SchemaNamingError(f"schema name of type {tp!r} is empty after prefix trimming")
    return name


def _strip_host_scope(module: str, host_module: str) -> str:
    """Remove the host organization, and the host module itself, from *module*."""
    org_end = host_module.rfind(".") + 1
    if org_end == 0:
        raise SchemaNamingError(
            f"host module {host_module!r} has no organization component; "
            "cannot decide which payload types it owns"
        )
    organization, own_module = host_module[:org_end], host_module[org_end:]

    if not module.startswith(organization):
        raise ForeignTypeError(
            f"type module {module} does not belong to organization {organization.rstrip('.')}; "
            "you must own the endpoint contracts"
        )
    rest = module[org_end:]
    if rest == own_module or rest.startswith(own_module + "."):
        rest = rest[len(own_module) :]
    return rest


def _pascal_case_components(module: str) -> str:
    """``"shared.dto_v1"`` -> ``"SharedDtoV1"``."""
    return "".join(_capitalize(part) for part in _COMPONENT_SEPARATORS.split(module) if part)


def _capitalize(part: str) -> str:
    first = part[0].upper()
    return (first if len(first) == 1 else part[0]) + part[1:]
