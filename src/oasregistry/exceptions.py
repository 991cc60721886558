"""Exception hierarchy for oasregistry.

All exceptions inherit from :class:`RegistryError`, which carries an
``exit_code`` attribute mapped to a constant from
:mod:`oasregistry.exit_codes`. Every failure is a programmer-input error:
the registry never retries and never emits a partial document, so these
exceptions always propagate to the immediate caller. The ``oasreg`` entry
point in :func:`oasregistry.app.main` catches ``RegistryError`` and exits
with the appropriate code.

Subclass hierarchy::

    RegistryError (exit 1)
    +-- UsageOrderError               (exit 3)
    +-- DuplicateRegistrationError    (exit 4)
    |   +-- DuplicateOperationIdError
    |   +-- DuplicateEndpointError
    |   +-- DuplicateFieldError
    |   +-- DuplicateResponseError
    +-- UnsupportedShapeError         (exit 5)
    |   +-- PathFormatError
    |   +-- UnsupportedMethodError
    |   +-- UnsupportedKindError
    |   +-- SchemaNotImplementedError
    |   +-- StatusCodeError
    +-- SchemaNamingError             (exit 6)
    |   +-- ForeignTypeError
    |   +-- NamingCollisionError
    |   +-- SchemaCycleError
    +-- SchemaGenerationError         (exit 6)
    +-- ConfigError                   (exit 1)
    +-- TargetLoadError               (exit 2)
"""

from oasregistry.exit_codes import (
    EXIT_DUPLICATE_REGISTRATION,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_SCHEMA_NAMING,
    EXIT_UNSUPPORTED_SHAPE,
    EXIT_USAGE_ORDER,
)


class RegistryError(Exception):
    """Base exception for all oasregistry errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`oasregistry.exit_codes`.

    Args:
        message: Human-readable error description.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


# --- Usage order ---


class UsageOrderError(RegistryError):
    """Raised when a built registry, or a builder it issued, is mutated or built again."""

    exit_code = EXIT_USAGE_ORDER


# --- Duplicate registration ---


class DuplicateRegistrationError(RegistryError):
    """Base class for anything registered twice within one registry."""

    exit_code = EXIT_DUPLICATE_REGISTRATION


class DuplicateOperationIdError(DuplicateRegistrationError):
    """Raised when two endpoints synthesize the same ``operationId``."""


class DuplicateEndpointError(DuplicateRegistrationError):
    """Raised when the same method and path pair is registered twice."""


class DuplicateFieldError(DuplicateRegistrationError):
    """Raised when an exactly-once operation field (summary, description, request body) is set again."""


class DuplicateResponseError(DuplicateRegistrationError):
    """Raised when a response for the same status code is added twice to one operation."""


# --- Unsupported shapes ---


class UnsupportedShapeError(RegistryError):
    """Base class for inputs the registry does not know how to describe."""

    exit_code = EXIT_UNSUPPORTED_SHAPE


class PathFormatError(UnsupportedShapeError):
    """Raised when a path template cannot be turned into an operation id."""


class UnsupportedMethodError(UnsupportedShapeError):
    """Raised for HTTP methods other than GET, POST, PUT, DELETE and PATCH."""


class UnsupportedKindError(UnsupportedShapeError):
    """Raised for payload types with no schema representation (unions, callables, ``Any``...)."""


class SchemaNotImplementedError(UnsupportedShapeError):
    """Raised for mapping payload types, which are not implemented yet."""


class StatusCodeError(UnsupportedShapeError):
    """Raised when a response status code is outside ``[0, 600)``."""


# --- Schema naming ---


class SchemaNamingError(RegistryError):
    """Base class for failures deriving or reserving a component schema name."""

    exit_code = EXIT_SCHEMA_NAMING


class ForeignTypeError(SchemaNamingError):
    """Raised when a payload type's declaring module is unknown or outside the host organization."""


class NamingCollisionError(SchemaNamingError):
    """Raised when two distinct types derive the same component schema name."""


class SchemaCycleError(SchemaNamingError):
    """Raised when a payload type's schema refers back to itself."""


class SchemaGenerationError(RegistryError):
    """Raised when pydantic cannot produce a JSON schema for a payload type."""

    exit_code = EXIT_SCHEMA_NAMING


# --- Tooling ---


class ConfigError(RegistryError):
    """Raised for configuration problems (invalid JSON, failed validation, bad env values)."""

    exit_code = EXIT_GENERIC_FAILURE


class TargetLoadError(RegistryError):
    """Raised when an ``oasreg`` target cannot be imported or does not yield a document."""

    exit_code = EXIT_INVALID_USAGE
