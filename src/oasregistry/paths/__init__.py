"""Path templates -- split them into words and derive operation ids.

This sub-package turns an HTTP method and an OpenAPI path template into the
``operationId`` stored on every registered operation.

Typical usage::

    from oasregistry.paths import synthesize_operation_id

    synthesize_operation_id("GET", "/users/{userId}/orders")  # "getUserOrders"

Sub-modules:

* :mod:`~oasregistry.paths.splitter` -- Split a template into
  :class:`~oasregistry.models.PathSegment` objects, pairing each collection
  word with the ``{...Id}`` placeholder that addresses it.
* :mod:`~oasregistry.paths.operation_id` -- Singularize addressed words,
  Pascal-case them, and prefix the lower-cased method.
"""

from oasregistry.paths.operation_id import synthesize_operation_id
from oasregistry.paths.splitter import split_path

__all__ = ["split_path", "synthesize_operation_id"]
