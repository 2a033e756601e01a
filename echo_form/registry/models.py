"""Pydantic models for field definitions."""

from typing import Literal, Union

from pydantic import BaseModel, ConfigDict, model_validator

# A stored field value: text, a number, or the empty value "".
Scalar = Union[str, int, float]

EMPTY: Scalar = ""

InputKind = Literal["short_text", "numeric", "date", "single_choice"]


class FieldDefinition(BaseModel):
    """A single report form field.

    Conditional fields carry the name of their controlling field and the
    set of controlling values that activate them. Computed fields are
    owned by the derived field evaluator and are never edited directly.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    label: str
    input_kind: InputKind
    section: str
    choice_options: tuple[str, ...] | None = None
    is_computed: bool = False
    is_conditional: bool = False
    controlling_field: str | None = None
    activation_values: tuple[Scalar, ...] = ()
    is_required: bool = False
    placeholder: str | None = None
    suffix: str | None = None
    tooltip: str | None = None

    @model_validator(mode="after")
    def check_shape(self) -> "FieldDefinition":
        """Check kind-specific and condition-specific attributes."""
        if self.input_kind == "single_choice":
            if not self.choice_options:
                raise ValueError(f"{self.name}: single_choice field needs choice_options")
        elif self.choice_options is not None:
            raise ValueError(f"{self.name}: choice_options only apply to single_choice fields")

        if self.is_conditional:
            if not self.controlling_field:
                raise ValueError(f"{self.name}: conditional field needs a controlling_field")
            if not self.activation_values:
                raise ValueError(f"{self.name}: conditional field needs activation_values")
        elif self.controlling_field is not None or self.activation_values:
            raise ValueError(
                f"{self.name}: controlling_field/activation_values require is_conditional"
            )
        return self

    @property
    def default(self) -> Scalar:
        """Initial value: the first option for choice fields, empty otherwise."""
        if self.input_kind == "single_choice" and self.choice_options:
            return self.choice_options[0]
        return EMPTY

    def activates_on(self, value: Scalar) -> bool:
        """Whether a controlling value activates this field."""
        return value in self.activation_values
