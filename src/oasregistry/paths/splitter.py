"""Split OpenAPI path templates into words and placeholders.

Only one path shape is supported: every placeholder must directly follow a
plural collection word and name an id, as in ``/users/{userId}``. The
splitter walks the '/'-delimited segments of a template and pairs each such
collection word with its placeholder, producing one
:class:`~oasregistry.models.PathSegment` per step::

    /users/{userId}/orders  ->  [PathSegment(word="users", placeholder="userId"),
                                 PathSegment(word="orders")]

Anything else (a leading placeholder, ``/users/{id}``, empty segments, a
trailing '/') raises :class:`~oasregistry.exceptions.PathFormatError`.
"""

from __future__ import annotations

import unicodedata

from oasregistry.exceptions import PathFormatError
from oasregistry.models import PathSegment


def split_path(path: str) -> list[PathSegment]:
    """Split a path template into ordered :class:`~oasregistry.models.PathSegment` objects.

    Args:
        path: An OpenAPI path template starting with ``/`` (e.g.,
            ``"/users/{userId}/orders/{orderId}"``).

    Returns:
        One segment per literal word, in path order. Words addressed by an
        id placeholder carry the placeholder's inner name.

    Raises:
        PathFormatError: If the path is empty, does not start with ``/``,
            ends with ``/``, contains an empty segment, starts with a
            placeholder, or has a placeholder that does not follow a plural
            word or does not end in ``Id``.

    Example::

        >>> split_path("/users/{userId}/orders")
        [PathSegment(word='users', placeholder='userId'), PathSegment(word='orders', placeholder=None)]
    """
    if not path:
        raise PathFormatError("path is empty")
    if path[0] != "/":
        raise PathFormatError(f"unsupported path format, path must start with '/': {path}")

    parts = path[1:].split("/")
    segments: list[PathSegment] = []
    i = 0
    while i < len(parts):
        word = parts[i]
        if not word:
            if i == len(parts) - 1:
                raise PathFormatError(f"unsupported path format, path ends with '/': {path}")
            raise PathFormatError(f"unsupported path format, empty segment: {path}")
        if word[0] == "{":
            raise PathFormatError(
                f"unsupported path format, placeholder {word} does not follow a word: {path}"
            )
        _check_first_character(word, path)

        if i + 1 < len(parts):
            next_word = parts[i + 1]
            if _is_id_placeholder(next_word) and _is_plural(word):
                segments.append(PathSegment(word=word, placeholder=next_word[1:-1]))
                i += 2
                continue
            if next_word.startswith("{"):
                raise PathFormatError(
                    f"unsupported path format, placeholder {next_word} must name an id "
                    f"and follow a plural word: {path}"
                )

        segments.append(PathSegment(word=word))
        i += 1

    return segments


def _is_id_placeholder(segment: str) -> bool:
    """Return ``True`` for ``{...Id}`` segments (case-insensitive, at least ``{xId}``)."""
    return (
        len(segment) >= 5
        and segment[0] == "{"
        and segment[-1] == "}"
        and segment[-3].lower() == "i"
        and segment[-2].lower() == "d"
    )


def _is_plural(word: str) -> bool:
    return len(word) > 1 and word[-1] == "s"


def _check_first_character(word: str, path: str) -> None:
    """Reject words starting with a lone surrogate or the replacement character."""
    first = word[0]
    if first == "\ufffd" or unicodedata.category(first) == "Cs":
        raise PathFormatError(f"unexpected first letter in word {word!r}: {path}")
