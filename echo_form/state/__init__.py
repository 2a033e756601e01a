"""Form state store for in-progress reports."""

from echo_form.state.store import FieldChange, FormState, Listener, normalize_value

__all__ = [
    "FieldChange",
    "FormState",
    "Listener",
    "normalize_value",
]
