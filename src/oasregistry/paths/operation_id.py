"""Derive deterministic ``operationId`` strings from a method and a path template.

The id is the lower-cased method followed by every path word in
PascalCase. Words addressed by an id placeholder are singularized by
stripping exactly one trailing ``s``; there is no dictionary of irregular
plurals: ``/statuses/{statusId}`` yields ``getStatuse`` and
``/people/{personId}`` is rejected::

    GET  /users                         ->  getUsers
    GET  /users/{userId}                ->  getUser
    POST /users/{userId}/orders         ->  postUserOrders
    GET  /users/{userId}/orders/{id}    ->  PathFormatError
"""

from __future__ import annotations

from oasregistry.paths.splitter import split_path


def synthesize_operation_id(method: str, path: str) -> str:
    """Build the operation id for *method* and *path*.

    Pure and deterministic: the same input always yields the same id.

    Args:
        method: HTTP method token, in any case (e.g., ``"GET"``).
        path: Path template accepted by
            :func:`~oasregistry.paths.splitter.split_path`.

    Returns:
        The identifier, e.g. ``"getUserOrder"`` for
        ``("GET", "/users/{userId}/orders/{orderId}")``.

    Raises:
        PathFormatError: If *path* is not a supported template.
    """
    words = [
        _singularize(segment.word) if segment.is_parameterized else segment.word
        for segment in split_path(path)
    ]
    return method.lower() + "".join(_pascal_case(word) for word in words)


def _singularize(word: str) -> str:
    # Callers guarantee a trailing "s" and len(word) > 1.
    return word[:-1]


def _pascal_case(word: str) -> str:
    """Upper-case the first character and leave the rest untouched.

    A first character without a single-character upper case (``ß``
    upper-cases to ``SS``) is kept as is.
    """
    first = word[0].upper()
    if len(first) != 1:
        first = word[0]
    return first + word[1:]
