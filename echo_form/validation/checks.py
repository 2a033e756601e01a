"""Required-field validation for report submissions.

Validation is fail-fast and ordered:
1. Base-required fields (required, unconditional), in declaration order.
   All missing base fields are reported together in one reason.
2. Required conditional fields that are currently active, in declaration
   order. The first missing one fails.

Values are not type- or format-checked here.
"""

from __future__ import annotations

import logging
from typing import Any, Literal

from pydantic import BaseModel, Field

from echo_form.registry.models import FieldDefinition
from echo_form.registry.schema import FieldSchema
from echo_form.visibility.resolver import Values, VisibilityResolver

logger = logging.getLogger(__name__)


class ValidationResult(BaseModel):
    """Outcome of validating a form state: Valid, or Invalid with a reason."""

    valid: bool
    reason: str | None = None
    missing_fields: list[str] = Field(default_factory=list)
    stage: Literal["required", "conditional"] | None = None

    @classmethod
    def ok(cls) -> ValidationResult:
        """A passing result."""
        return cls(valid=True)

    @classmethod
    def fail(
        cls,
        reason: str,
        missing_fields: list[str],
        stage: Literal["required", "conditional"],
    ) -> ValidationResult:
        """A failing result."""
        return cls(valid=False, reason=reason, missing_fields=missing_fields, stage=stage)

    def __bool__(self) -> bool:
        return self.valid


def is_empty(value: Any) -> bool:
    """Whether a stored value counts as unanswered.

    None, "" and whitespace-only text are empty. Zero is an answer.
    """
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def _join_labels(labels: list[str]) -> str:
    if len(labels) == 1:
        return labels[0]
    return ", ".join(labels[:-1]) + f", and {labels[-1]}"


class Validator:
    """Checks required and conditionally-required fields."""

    def __init__(self, schema: FieldSchema, resolver: VisibilityResolver | None = None) -> None:
        """Initialize the validator.

        Args:
            schema: The field schema.
            resolver: Visibility resolver. Defaults to one over the same schema.
        """
        self.schema = schema
        self.resolver = resolver or VisibilityResolver(schema)

    def validate(self, state: Values) -> ValidationResult:
        """Validate a form state.

        Args:
            state: A FormState or a complete snapshot mapping.

        Returns:
            ValidationResult. Fails on the first failing stage.
        """
        missing = [
            field for field in self.schema
            if field.is_required and not field.is_conditional and is_empty(state[field.name])
        ]
        if missing:
            labels = _join_labels([field.label for field in missing])
            result = ValidationResult.fail(
                f"Please fill in required fields: {labels}.",
                missing_fields=[field.name for field in missing],
                stage="required",
            )
            logger.info("Validation failed: %s", result.reason)
            return result

        for field in self.schema.conditional_fields:
            if not field.is_required:
                continue
            if not self.resolver.is_active(field.name, state):
                continue
            if is_empty(state[field.name]):
                result = ValidationResult.fail(
                    self._conditional_reason(field, state),
                    missing_fields=[field.name],
                    stage="conditional",
                )
                logger.info("Validation failed: %s", result.reason)
                return result

        return ValidationResult.ok()

    def _conditional_reason(self, field: FieldDefinition, state: Values) -> str:
        controller = self.schema.get(field.controlling_field)
        return (
            f"{controller.label} is '{state[controller.name]}': "
            f"please enter the {field.label}."
        )
