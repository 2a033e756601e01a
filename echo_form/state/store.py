"""Form state store.

Holds the current value of every schema field for one report. User
edits go through set(); computed fields are written only by the derived
field evaluator through write_computed(). Every real change is published
to subscribers as a FieldChange.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator, Mapping
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict

from echo_form.derived.evaluator import DerivedFieldEvaluator, default_evaluator
from echo_form.errors import ReadOnlyFieldError, UnknownFieldError
from echo_form.registry.models import EMPTY, Scalar
from echo_form.registry.schema import FieldSchema

logger = logging.getLogger(__name__)


class FieldChange(BaseModel):
    """A single value change published to subscribers."""

    model_config = ConfigDict(frozen=True)

    name: str
    old: Scalar
    new: Scalar
    origin: Literal["user", "derived"]


Listener = Callable[[FieldChange], None]


def normalize_value(name: str, value: Any) -> Scalar:
    """Coerce a caller-supplied value into a storable scalar.

    None becomes the empty value. Booleans and containers are rejected.
    """
    if value is None:
        return EMPTY
    if isinstance(value, bool) or not isinstance(value, (str, int, float)):
        raise TypeError(
            f"Field {name!r} accepts text, numbers or None, got {type(value).__name__}"
        )
    return value


class FormState:
    """Current values for one in-progress report.

    Values are keyed by field name and start at each field's default.
    Supports `state[name]`, `name in state`, iteration over field names
    and len().
    """

    def __init__(
        self,
        schema: FieldSchema,
        evaluator: DerivedFieldEvaluator | None = None,
    ) -> None:
        """Initialize every field at its default, then compute derived fields.

        Args:
            schema: The field schema this state follows.
            evaluator: Derived field evaluator run after each user edit.
                Defaults to the echo relations present in the schema.
        """
        self.schema = schema
        self.evaluator = evaluator if evaluator is not None else default_evaluator(schema)
        self._values: dict[str, Scalar] = {field.name: field.default for field in schema}
        self._listeners: list[Listener] = []
        self.evaluator.recompute(self)

    @classmethod
    def from_answers(
        cls,
        schema: FieldSchema,
        answers: Mapping[str, Any],
        evaluator: DerivedFieldEvaluator | None = None,
        strict: bool = True,
    ) -> FormState:
        """Build a state by replaying a mapping of answers as user edits.

        Values for computed fields are ignored since the evaluator owns them.

        Args:
            schema: The field schema.
            answers: Mapping of field name to value.
            evaluator: Derived field evaluator. Defaults to the echo relations.
            strict: If True, unknown field names raise UnknownFieldError.
                If False, they are skipped with a warning.

        Raises:
            UnknownFieldError: If strict and an answer names an unknown field.
        """
        state = cls(schema, evaluator=evaluator)
        state.apply_answers(answers, strict=strict)
        return state

    def apply_answers(self, answers: Mapping[str, Any], strict: bool = True) -> None:
        """Replay externally supplied answers as user edits.

        Unlike update(), values for computed fields are skipped with a
        warning, and unknown names are skipped when not strict.

        Raises:
            UnknownFieldError: If strict and an answer names an unknown field.
        """
        for name, value in answers.items():
            if name not in self.schema:
                if strict:
                    raise UnknownFieldError(name)
                logger.warning("Skipping unknown field in answers: %r", name)
                continue
            if self.schema.get(name).is_computed:
                logger.warning("Ignoring supplied value for computed field %r", name)
                continue
            self.set(name, value)

    def get(self, name: str) -> Scalar:
        """Return the current value of a field.

        Raises:
            UnknownFieldError: If the name is not in the schema.
        """
        try:
            return self._values[name]
        except KeyError:
            raise UnknownFieldError(name) from None

    def set(self, name: str, value: Any) -> None:
        """Apply a user edit to a non-computed field.

        Publishes a FieldChange and runs the derived field evaluator when
        the value actually changes. Setting the current value again is a
        no-op.

        Raises:
            UnknownFieldError: If the name is not in the schema.
            ReadOnlyFieldError: If the field is computed.
            TypeError: If the value is not text, a number or None.
        """
        field = self.schema.get(name)
        if field.is_computed:
            raise ReadOnlyFieldError(name)

        value = normalize_value(name, value)
        old = self._values[name]
        if old == value:
            return

        self._values[name] = value
        logger.debug("Set %r: %r -> %r", name, old, value)
        self._publish(FieldChange(name=name, old=old, new=value, origin="user"))

        self.evaluator.recompute(self, changed=[name])

    def update(self, answers: Mapping[str, Any]) -> None:
        """Apply several user edits in order."""
        for name, value in answers.items():
            self.set(name, value)

    def write_computed(self, name: str, value: Scalar) -> FieldChange | None:
        """Store a freshly computed value for a computed field.

        Returns:
            The published FieldChange, or None if the value was unchanged.

        Raises:
            UnknownFieldError: If the name is not in the schema.
            ValueError: If the field is not computed.
        """
        field = self.schema.get(name)
        if not field.is_computed:
            raise ValueError(f"Field {name!r} is not a computed field")

        old = self._values[name]
        if old == value and type(old) is type(value):
            return None

        self._values[name] = value
        logger.debug("Recomputed %r: %r -> %r", name, old, value)
        change = FieldChange(name=name, old=old, new=value, origin="derived")
        self._publish(change)
        return change

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a change listener.

        Returns:
            A callable that removes the listener.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _publish(self, change: FieldChange) -> None:
        for listener in list(self._listeners):
            listener(change)

    def snapshot(self) -> dict[str, Scalar]:
        """Return a copy of every field's current value, active or not."""
        return dict(self._values)

    def __getitem__(self, name: str) -> Scalar:
        return self.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"FormState({len(self._values)} fields)"
