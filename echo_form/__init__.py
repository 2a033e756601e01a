"""echo-form: declarative form engine for echocardiography reports."""

__version__ = "0.1.0"

from echo_form.errors import (
    EchoFormError,
    PersistenceFailure,
    ReadOnlyFieldError,
    ReportNotFoundError,
    SchemaIntegrityError,
    SchemaLoadError,
    UnknownFieldError,
    ValidationFailure,
)
from echo_form.registry import FieldDefinition, FieldSchema, default_schema, load_field_schema
from echo_form.session import ReportSession, SubmissionMessage
from echo_form.state import FieldChange, FormState
from echo_form.validation import ValidationResult

__all__ = [
    "__version__",
    "EchoFormError",
    "FieldChange",
    "FieldDefinition",
    "FieldSchema",
    "FormState",
    "PersistenceFailure",
    "ReadOnlyFieldError",
    "ReportNotFoundError",
    "ReportSession",
    "SchemaIntegrityError",
    "SchemaLoadError",
    "SubmissionMessage",
    "UnknownFieldError",
    "ValidationFailure",
    "ValidationResult",
    "default_schema",
    "load_field_schema",
]
