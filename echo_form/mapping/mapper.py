"""Mapper from a validated form state to a submission record.

The mapper is purely mechanical: a fixed list of column bindings pulls
named fields into indexed columns, and the full state is copied into
the snapshot. Visibility plays no part in either.
"""

import uuid
from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict

from echo_form.errors import SchemaIntegrityError, ValidationFailure
from echo_form.registry.catalogue import (
    AGE_FIELD,
    DOB_FIELD,
    ID_FIELD,
    INDICATION_FIELD,
    INTERVENTION_DATE_FIELD,
    NAME_FIELD,
    PRE_OP_FIELD,
)
from echo_form.registry.models import Scalar
from echo_form.registry.schema import FieldSchema
from echo_form.validation.checks import ValidationResult, is_empty
from echo_form.visibility.resolver import Values


class ColumnBinding(BaseModel):
    """Binds an indexed record column to a schema field."""

    model_config = ConfigDict(frozen=True)

    column: str
    field: str


DEFAULT_PROJECTION: tuple[ColumnBinding, ...] = (
    ColumnBinding(column="patient_name", field=NAME_FIELD),
    ColumnBinding(column="clinic_id", field=ID_FIELD),
    ColumnBinding(column="dob", field=DOB_FIELD),
    ColumnBinding(column="age", field=AGE_FIELD),
    ColumnBinding(column="indication", field=INDICATION_FIELD),
    ColumnBinding(column="date_of_intervention", field=INTERVENTION_DATE_FIELD),
    ColumnBinding(column="pre_op_specify", field=PRE_OP_FIELD),
)


class SubmissionRecord(BaseModel):
    """A persisted report: indexed columns plus the full snapshot."""

    model_config = ConfigDict(frozen=True)

    record_id: str
    created_at: str
    columns: dict[str, Scalar | None]
    snapshot: dict[str, Scalar]


class SubmissionMapper:
    """Projects a validated form state into a SubmissionRecord."""

    def __init__(
        self,
        schema: FieldSchema,
        projection: tuple[ColumnBinding, ...] = DEFAULT_PROJECTION,
        deterministic_ids: bool = False,
    ) -> None:
        """Initialize the mapper.

        Args:
            schema: The field schema.
            projection: Column bindings for the indexed columns.
            deterministic_ids: If True, generate deterministic record IDs (for testing).

        Raises:
            SchemaIntegrityError: If a binding names an unknown field or a
                column is bound twice.
        """
        columns = [binding.column for binding in projection]
        if len(set(columns)) != len(columns):
            raise SchemaIntegrityError(f"Duplicate record column in projection: {columns}")
        for binding in projection:
            if binding.field not in schema:
                raise SchemaIntegrityError(
                    f"Column {binding.column!r} is bound to unknown field {binding.field!r}"
                )

        self.schema = schema
        self.projection = projection
        self.deterministic_ids = deterministic_ids
        self._id_counter = 0

    def _generate_id(self, seed: str = "") -> str:
        """Generate a record ID."""
        if self.deterministic_ids:
            self._id_counter += 1
            namespace = uuid.UUID("6ba7b810-9dad-11d1-80b4-00c04fd430c8")
            return uuid.uuid5(namespace, f"{seed}:{self._id_counter}").hex
        return uuid.uuid4().hex

    def map(self, state: Values, validation: ValidationResult) -> SubmissionRecord:
        """Build the submission record for a validated state.

        Args:
            state: The form state (or a complete snapshot mapping).
            validation: The result of validating this state.

        Returns:
            The SubmissionRecord.

        Raises:
            ValidationFailure: If the validation result is not valid.
        """
        if not validation.valid:
            raise ValidationFailure(validation)

        snapshot = {field.name: state[field.name] for field in self.schema}
        columns: dict[str, Scalar | None] = {}
        for binding in self.projection:
            value = snapshot[binding.field]
            columns[binding.column] = None if is_empty(value) else value

        return SubmissionRecord(
            record_id=self._generate_id(str(snapshot.get(ID_FIELD, ""))),
            created_at=datetime.now(timezone.utc).isoformat(),
            columns=columns,
            snapshot=snapshot,
        )


def default_projection(schema: FieldSchema) -> tuple[ColumnBinding, ...]:
    """The default column bindings whose fields exist in the schema."""
    return tuple(binding for binding in DEFAULT_PROJECTION if binding.field in schema)
