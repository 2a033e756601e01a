"""Validation of required and conditionally-required fields."""

from echo_form.validation.checks import ValidationResult, Validator, is_empty

__all__ = [
    "ValidationResult",
    "Validator",
    "is_empty",
]
