"""Classify payload type annotations by structural kind.

The catalog handles each kind differently, so classification is the first
step of every :meth:`~oasregistry.schema.catalog.SchemaCatalog.resolve`
call:

* **RECORD** -- pydantic models, dataclasses and ``TypedDict`` classes.
* **COLLECTION** -- homogeneous sequences and sets: ``list[X]``,
  ``set[X]``, ``frozenset[X]``, ``tuple[X, ...]``, ``Sequence[X]``.
* **MAP** -- ``dict``, ``dict[K, V]`` and ``Mapping[K, V]``.
* **PRIMITIVE** -- scalars pydantic knows how to describe (numbers,
  strings, bytes, dates, UUIDs, decimals, enums, literals).
* **UNSUPPORTED** -- everything else, notably ``Any``, ``None``, unions
  and ``Optional``, callables, iterators and bare collections without an
  element type.
"""

from __future__ import annotations

import collections
import collections.abc
import dataclasses
import datetime
import decimal
import enum
import typing
import uuid
from typing import Any

from pydantic import BaseModel


class TypeKind(str, enum.Enum):
    """Structural kind of a payload type annotation."""

    RECORD = "record"
    COLLECTION = "collection"
    MAP = "map"
    PRIMITIVE = "primitive"
    UNSUPPORTED = "unsupported"


_COLLECTION_ORIGINS = frozenset(
    {
        list,
        set,
        frozenset,
        collections.deque,
        collections.abc.Sequence,
        collections.abc.MutableSequence,
        collections.abc.Set,
        collections.abc.MutableSet,
    }
)

_MAP_ORIGINS = frozenset(
    {
        dict,
        collections.OrderedDict,
        collections.defaultdict,
        collections.abc.Mapping,
        collections.abc.MutableMapping,
    }
)

_PRIMITIVE_TYPES = (
    bool,
    int,
    float,
    str,
    bytes,
    decimal.Decimal,
    uuid.UUID,
    datetime.datetime,
    datetime.date,
    datetime.time,
    datetime.timedelta,
)


def classify(tp: Any) -> TypeKind:
    """Return the :class:`TypeKind` of a type annotation.

    ``Annotated[X, ...]`` is classified as ``X``.

    Args:
        tp: A class or a parameterized generic alias (e.g., ``list[User]``).

    Returns:
        The structural kind. Never raises; unknown shapes are
        :attr:`TypeKind.UNSUPPORTED`.
    """
    origin = typing.get_origin(tp)

    if origin is typing.Annotated:
        return classify(typing.get_args(tp)[0])
    if origin is typing.Literal:
        return TypeKind.PRIMITIVE
    if origin is tuple:
        args = typing.get_args(tp)
        if len(args) == 2 and args[1] is Ellipsis:
            return TypeKind.COLLECTION
        return TypeKind.UNSUPPORTED
    if origin in _COLLECTION_ORIGINS:
        return TypeKind.COLLECTION if len(typing.get_args(tp)) == 1 else TypeKind.UNSUPPORTED
    if origin in _MAP_ORIGINS:
        return TypeKind.MAP
    if origin is not None:
        # Union, Optional, Callable, Iterator, Type[...] and friends.
        return TypeKind.UNSUPPORTED

    if tp is typing.Any or not isinstance(tp, type):
        return TypeKind.UNSUPPORTED
    if typing.is_typeddict(tp):
        return TypeKind.RECORD
    if issubclass(tp, BaseModel) or dataclasses.is_dataclass(tp):
        return TypeKind.RECORD
    if issubclass(tp, enum.Enum):
        return TypeKind.PRIMITIVE
    if issubclass(tp, _PRIMITIVE_TYPES):
        return TypeKind.PRIMITIVE
    if issubclass(tp, tuple(_MAP_ORIGINS)):
        return TypeKind.MAP
    return TypeKind.UNSUPPORTED


def element_type(tp: Any) -> Any:
    """Return the element type of a :attr:`TypeKind.COLLECTION` annotation."""
    if typing.get_origin(tp) is typing.Annotated:
        return element_type(typing.get_args(tp)[0])
    return typing.get_args(tp)[0]
