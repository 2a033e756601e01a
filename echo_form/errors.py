"""Exception hierarchy for echo-form.

Schema errors are startup-fatal. Field errors are programmer errors.
Validation and persistence failures are recoverable by the caller.
"""

from typing import Any


class EchoFormError(Exception):
    """Base class for all echo-form errors."""

    pass


class SchemaIntegrityError(EchoFormError):
    """Raised when a field schema is internally inconsistent."""

    pass


class SchemaLoadError(EchoFormError):
    """Raised when a schema document cannot be read or fails validation."""

    pass


class UnknownFieldError(EchoFormError, KeyError):
    """Raised when a field name is not part of the schema."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(name)

    def __str__(self) -> str:
        return f"Unknown field: {self.name!r}"


class ReadOnlyFieldError(EchoFormError):
    """Raised when a computed field is written directly."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Field {name!r} is computed and cannot be set directly")


class ValidationFailure(EchoFormError):
    """Raised when a submission fails required-field validation."""

    def __init__(self, result: Any) -> None:
        self.result = result
        super().__init__(result.reason or "Validation failed")


class PersistenceFailure(EchoFormError):
    """Raised when the storage collaborator fails to persist a record."""

    pass


class ReportNotFoundError(EchoFormError):
    """Raised when a stored report does not exist."""

    pass
