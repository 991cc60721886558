"""Numeric process exit codes used by the ``oasreg`` command line tool.

Each constant maps to one failure category and is referenced by the
corresponding :class:`~oasregistry.exceptions.RegistryError` subclass.
CI scripts that export a document can inspect the exit code to tell a
misconfigured endpoint apart from a broken import without parsing stderr.

Example::

    $ oasreg export acme.billing.api:registry
    $ echo $?
    4   # EXIT_DUPLICATE_REGISTRATION -- two endpoints share an operationId
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or an unloadable target."""

EXIT_USAGE_ORDER = 3
"""A registry or operation builder was used after the document was built."""

EXIT_DUPLICATE_REGISTRATION = 4
"""An operation, endpoint, field, or response status was registered twice."""

EXIT_UNSUPPORTED_SHAPE = 5
"""A method, path template, payload type, or status code is not supported."""

EXIT_SCHEMA_NAMING = 6
"""A payload type could not be named, collided with another type, or is cyclic."""
