"""Ordered field catalogue with startup integrity checks."""

import logging
from collections.abc import Iterable, Iterator

from echo_form.errors import SchemaIntegrityError, UnknownFieldError
from echo_form.registry.models import FieldDefinition

logger = logging.getLogger(__name__)


class FieldSchema:
    """Read-only, ordered collection of field definitions.

    Construction validates the whole catalogue and raises
    SchemaIntegrityError on the first problem found:
    - duplicate field names
    - controlling fields that do not exist
    - cycles in the controlling relation (including self-control)
    - activation values that are not options of a single-choice controller
    """

    def __init__(self, fields: Iterable[FieldDefinition]) -> None:
        self._fields: tuple[FieldDefinition, ...] = tuple(fields)
        self._by_name: dict[str, FieldDefinition] = {}

        for field in self._fields:
            if field.name in self._by_name:
                raise SchemaIntegrityError(f"Duplicate field name: {field.name!r}")
            self._by_name[field.name] = field

        self._check_controlling_fields()
        self._check_acyclic()

        logger.debug(
            "Loaded field schema: %d fields in %d sections",
            len(self._fields),
            len(self.sections),
        )

    def _check_controlling_fields(self) -> None:
        for field in self.conditional_fields:
            controller = self._by_name.get(field.controlling_field)
            if controller is None:
                raise SchemaIntegrityError(
                    f"Field {field.name!r} is controlled by unknown field "
                    f"{field.controlling_field!r}"
                )
            if controller.input_kind == "single_choice":
                unknown = [
                    value for value in field.activation_values
                    if value not in controller.choice_options
                ]
                if unknown:
                    raise SchemaIntegrityError(
                        f"Field {field.name!r} activates on values {unknown} "
                        f"that are not options of {controller.name!r}"
                    )

    def _check_acyclic(self) -> None:
        # Each field has at most one controller, so walking the chain
        # upwards from every field finds any cycle.
        for field in self.conditional_fields:
            seen = [field.name]
            current = field
            while current.is_conditional:
                parent = current.controlling_field
                if parent in seen:
                    chain = " -> ".join(seen + [parent])
                    raise SchemaIntegrityError(f"Cyclic controlling relation: {chain}")
                seen.append(parent)
                current = self._by_name[parent]

    @property
    def fields(self) -> tuple[FieldDefinition, ...]:
        """All field definitions in declaration order."""
        return self._fields

    @property
    def names(self) -> list[str]:
        """All field names in declaration order."""
        return [field.name for field in self._fields]

    @property
    def sections(self) -> list[str]:
        """Section identifiers in order of first appearance."""
        return list(dict.fromkeys(field.section for field in self._fields))

    @property
    def conditional_fields(self) -> list[FieldDefinition]:
        """Conditional fields in declaration order."""
        return [field for field in self._fields if field.is_conditional]

    @property
    def computed_fields(self) -> list[FieldDefinition]:
        """Computed fields in declaration order."""
        return [field for field in self._fields if field.is_computed]

    def get(self, name: str) -> FieldDefinition:
        """Look up a field by name.

        Raises:
            UnknownFieldError: If the name is not in the schema.
        """
        try:
            return self._by_name[name]
        except KeyError:
            raise UnknownFieldError(name) from None

    def fields_in_section(self, section: str) -> list[FieldDefinition]:
        """Fields belonging to a section, in declaration order."""
        return [field for field in self._fields if field.section == section]

    def dependents_of(self, name: str) -> list[FieldDefinition]:
        """Conditional fields directly controlled by the named field."""
        return [field for field in self.conditional_fields if field.controlling_field == name]

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    def __iter__(self) -> Iterator[FieldDefinition]:
        return iter(self._fields)

    def __len__(self) -> int:
        return len(self._fields)
