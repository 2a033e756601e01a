"""Report session.

A ReportSession owns one FormState and drives it from first edit to
submission. Edits go through the store so derived fields are always
recomputed; any change clears the outstanding submission message.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from datetime import date
from typing import Any, Literal

from pydantic import BaseModel

from echo_form.derived.evaluator import DerivedFieldEvaluator, default_evaluator
from echo_form.errors import PersistenceFailure, ValidationFailure
from echo_form.mapping.mapper import (
    ColumnBinding,
    SubmissionMapper,
    SubmissionRecord,
    default_projection,
)
from echo_form.registry.catalogue import default_schema
from echo_form.registry.models import FieldDefinition, Scalar
from echo_form.registry.schema import FieldSchema
from echo_form.state.store import FieldChange, FormState
from echo_form.storage.store import ReportStore
from echo_form.validation.checks import ValidationResult, Validator
from echo_form.visibility.resolver import VisibilityResolver

logger = logging.getLogger(__name__)

SAVE_SUCCESS_TEXT = "Report saved successfully"
SAVE_ERROR_TEXT = "Error saving report"


class SubmissionMessage(BaseModel):
    """Feedback shown to the user after a submission attempt."""

    kind: Literal["success", "error"]
    text: str


class ReportSession:
    """A single report being filled in and submitted."""

    def __init__(
        self,
        schema: FieldSchema | None = None,
        store: ReportStore | None = None,
        evaluator: DerivedFieldEvaluator | None = None,
        projection: tuple[ColumnBinding, ...] | None = None,
        today: Callable[[], date] = date.today,
        deterministic_ids: bool = False,
    ) -> None:
        """Initialize the session with a fresh form state.

        Args:
            schema: Field schema. Defaults to the echocardiography catalogue.
            store: Storage collaborator. If None, submit() only builds the record.
            evaluator: Derived field evaluator. Defaults to the echo relations.
            projection: Record column bindings. Defaults to those present in the schema.
            today: Clock for age calculation (ignored when evaluator is given).
            deterministic_ids: If True, generate deterministic record IDs (for testing).
        """
        self.schema = schema if schema is not None else default_schema()
        self.store = store
        if evaluator is None:
            evaluator = default_evaluator(self.schema, today)
        self.evaluator = evaluator
        self.state = FormState(self.schema, evaluator=self.evaluator)
        self.resolver = VisibilityResolver(self.schema)
        self.validator = Validator(self.schema, self.resolver)
        self.mapper = SubmissionMapper(
            self.schema,
            projection=projection if projection is not None else default_projection(self.schema),
            deterministic_ids=deterministic_ids,
        )
        self.message: SubmissionMessage | None = None
        self.state.subscribe(self._on_change)

    def _on_change(self, change: FieldChange) -> None:
        self.message = None

    def get(self, name: str) -> Scalar:
        """Current value of a field."""
        return self.state.get(name)

    def set(self, name: str, value: Any) -> None:
        """Apply a user edit."""
        self.state.set(name, value)

    def update(self, answers: Mapping[str, Any]) -> None:
        """Apply several user edits in order."""
        self.state.update(answers)

    def load_answers(self, answers: Mapping[str, Any], strict: bool = True) -> None:
        """Replay answers from an external source, skipping computed fields."""
        self.state.apply_answers(answers, strict=strict)

    def is_active(self, name: str) -> bool:
        """Whether a field is currently active."""
        return self.resolver.is_active(name, self.state)

    def active_fields(self) -> set[str]:
        """Names of all currently active fields."""
        return self.resolver.active_fields(self.state)

    def visible_fields(self, section: str | None = None) -> list[FieldDefinition]:
        """Active field definitions in declaration order."""
        return self.resolver.visible_fields(self.state, section)

    def validate(self) -> ValidationResult:
        """Validate the current state."""
        return self.validator.validate(self.state)

    def snapshot(self) -> dict[str, Scalar]:
        """Read-only copy of every field value, for export."""
        return self.state.snapshot()

    def submit(self) -> SubmissionRecord:
        """Validate, map and persist the report.

        Returns:
            The submission record handed to the store.

        Raises:
            ValidationFailure: If required fields are missing.
            PersistenceFailure: If the store fails. The session does not retry.
        """
        result = self.validate()
        if not result.valid:
            self.message = SubmissionMessage(
                kind="error", text=result.reason or "Validation failed"
            )
            raise ValidationFailure(result)

        record = self.mapper.map(self.state, result)

        if self.store is not None:
            try:
                saved = self.store.persist(record)
            except Exception as e:
                logger.error("Persisting report %s failed: %s", record.record_id, e)
                self.message = SubmissionMessage(kind="error", text=SAVE_ERROR_TEXT)
                raise PersistenceFailure(SAVE_ERROR_TEXT) from e
            if not saved:
                logger.error("Store rejected report %s", record.record_id)
                self.message = SubmissionMessage(kind="error", text=SAVE_ERROR_TEXT)
                raise PersistenceFailure(SAVE_ERROR_TEXT)

        logger.info("Submitted report %s", record.record_id)
        self.message = SubmissionMessage(kind="success", text=SAVE_SUCCESS_TEXT)
        return record
