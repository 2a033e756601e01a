"""Visibility resolver.

Decides which conditional fields are active. Visibility is never stored:
every call reads the controlling values from the state it is given, so
display, validation and export always agree with the current state.
"""

from collections.abc import Mapping
from typing import Union

from echo_form.registry.models import FieldDefinition, Scalar
from echo_form.registry.schema import FieldSchema
from echo_form.state.store import FormState

Values = Union[FormState, Mapping[str, Scalar]]


class VisibilityResolver:
    """Resolves active/inactive status for schema fields.

    Works on a live FormState or on any complete snapshot mapping.
    """

    def __init__(self, schema: FieldSchema) -> None:
        self.schema = schema

    def is_active(self, name: str, state: Values) -> bool:
        """Whether a field is currently active.

        Unconditional fields are always active. A conditional field is
        active iff its controlling field's current value is one of its
        activation values.

        Raises:
            UnknownFieldError: If the name is not in the schema.
        """
        return self._is_active(self.schema.get(name), state)

    def _is_active(self, field: FieldDefinition, state: Values) -> bool:
        if not field.is_conditional:
            return True
        return field.activates_on(state[field.controlling_field])

    def active_fields(self, state: Values) -> set[str]:
        """Names of all currently active fields."""
        return {field.name for field in self.schema if self._is_active(field, state)}

    def inactive_fields(self, state: Values) -> set[str]:
        """Names of all currently inactive (conditional) fields."""
        return {field.name for field in self.schema if not self._is_active(field, state)}

    def visible_fields(
        self,
        state: Values,
        section: str | None = None,
    ) -> list[FieldDefinition]:
        """Active field definitions in declaration order.

        Args:
            state: Current values.
            section: Optional section to restrict to.
        """
        fields = self.schema.fields if section is None else self.schema.fields_in_section(section)
        return [field for field in fields if self._is_active(field, state)]
