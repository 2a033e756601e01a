"""Tests for the form state store."""

from datetime import date

import pytest

from echo_form.derived import DerivedFieldEvaluator, age_in_years
from echo_form.errors import ReadOnlyFieldError, UnknownFieldError
from echo_form.registry import FieldDefinition, FieldSchema
from echo_form.state import FieldChange, FormState, normalize_value


class TestInitialValues:
    """Tests for default values."""

    def test_choice_fields_start_at_first_option(self, state: FormState) -> None:
        """Single-choice fields start at their first option."""
        assert state.get("Indication") == "Assessment of cardiac function for ischaemic heart disease"
        assert state.get("Mitral stenosis") == "No"
        assert state.get("Pericardium") == "No effusion"

    def test_other_fields_start_empty(self, state: FormState) -> None:
        """Text, numeric and date fields start empty."""
        assert state.get("Name") == ""
        assert state.get("LV EDD") == ""
        assert state.get("DOB") == ""

    def test_computed_fields_start_derived(self, state: FormState) -> None:
        """Computed fields start at the value of their empty sources."""
        assert state.get("Age") == ""
        assert state.get("Score Total") == 0

    def test_default_evaluator(self, schema: FieldSchema) -> None:
        """A state built without an evaluator still recomputes derived fields."""
        state = FormState(schema)
        state.set("DOB", "1980-03-20")

        assert state.get("Age") == age_in_years("1980-03-20", date.today())
        assert state.get("Score Total") == 0

    def test_default_evaluator_on_custom_schema(self) -> None:
        """Schemas without the echo fields get an evaluator with no relations."""
        schema = FieldSchema(
            [FieldDefinition(name="Notes", label="Notes", input_kind="short_text", section="S")]
        )
        state = FormState(schema)
        state.set("Notes", "x")
        assert state.evaluator.relations == ()

    def test_every_field_has_a_value(self, schema: FieldSchema, state: FormState) -> None:
        """The state holds one value per schema field."""
        assert len(state) == len(schema)
        assert list(state) == schema.names


class TestSet:
    """Tests for user edits."""

    def test_set_and_get(self, state: FormState) -> None:
        """A set value is returned by get and by indexing."""
        state.set("LV EDD", "45.2")
        assert state.get("LV EDD") == "45.2"
        assert state["LV EDD"] == "45.2"

    def test_none_becomes_empty(self, state: FormState) -> None:
        """Setting None stores the empty value."""
        state.set("Name", "Jane")
        state.set("Name", None)
        assert state.get("Name") == ""

    def test_numbers_are_stored_as_given(self, state: FormState) -> None:
        """Numbers are kept as numbers."""
        state.set("EF", 60)
        assert state.get("EF") == 60

    def test_unknown_field(self, state: FormState) -> None:
        """Setting an unknown field raises."""
        with pytest.raises(UnknownFieldError):
            state.set("Heart rate", "72")

    def test_get_unknown_field(self, state: FormState) -> None:
        """Reading an unknown field raises."""
        with pytest.raises(UnknownFieldError):
            state.get("Heart rate")

    def test_computed_field_is_read_only(self, state: FormState) -> None:
        """Computed fields cannot be set by the user."""
        with pytest.raises(ReadOnlyFieldError, match="Age"):
            state.set("Age", 30)
        assert state.get("Age") == ""

    @pytest.mark.parametrize("value", [True, ["a"], {"a": 1}])
    def test_rejects_non_scalar(self, state: FormState, value) -> None:
        """Booleans and containers are rejected."""
        with pytest.raises(TypeError):
            state.set("Name", value)

    def test_update_applies_in_order(self, state: FormState) -> None:
        """update() applies each edit."""
        state.update({"Name": "Jane", "ID": "C1"})
        assert state.get("Name") == "Jane"
        assert state.get("ID") == "C1"


class TestNotifications:
    """Tests for change listeners."""

    def test_listener_receives_user_change(self, state: FormState) -> None:
        """A user edit is published with its old and new value."""
        changes: list[FieldChange] = []
        state.subscribe(changes.append)

        state.set("Name", "Jane")

        assert changes == [FieldChange(name="Name", old="", new="Jane", origin="user")]

    def test_same_value_is_silent(self, state: FormState) -> None:
        """Setting the current value again publishes nothing."""
        state.set("Name", "Jane")
        changes: list[FieldChange] = []
        state.subscribe(changes.append)

        state.set("Name", "Jane")

        assert changes == []

    def test_derived_changes_follow_user_change(self, state: FormState) -> None:
        """A DOB edit publishes the user change and then the age change."""
        changes: list[FieldChange] = []
        state.subscribe(changes.append)

        state.set("DOB", "1980-03-20")

        assert [(c.name, c.origin) for c in changes] == [("DOB", "user"), ("Age", "derived")]
        assert changes[1].new == 45

    def test_unsubscribe(self, state: FormState) -> None:
        """An unsubscribed listener receives nothing more."""
        changes: list[FieldChange] = []
        unsubscribe = state.subscribe(changes.append)
        unsubscribe()

        state.set("Name", "Jane")

        assert changes == []


class TestWriteComputed:
    """Tests for the evaluator's write path."""

    def test_rejects_non_computed_field(self, state: FormState) -> None:
        """Only computed fields can be written this way."""
        with pytest.raises(ValueError, match="not a computed field"):
            state.write_computed("Name", "Jane")

    def test_unchanged_value_returns_none(self, state: FormState) -> None:
        """Writing the stored value is a no-op."""
        assert state.write_computed("Age", "") is None

    def test_changed_value_returns_change(self, state: FormState) -> None:
        """Writing a new value returns the published change."""
        change = state.write_computed("Age", 30)
        assert change == FieldChange(name="Age", old="", new=30, origin="derived")
        assert state.get("Age") == 30


class TestFromAnswers:
    """Tests for building a state from an answers mapping."""

    def test_replays_answers(self, schema: FieldSchema, evaluator: DerivedFieldEvaluator) -> None:
        """Answers are applied and derived fields recomputed."""
        state = FormState.from_answers(schema, {"Name": "Jane", "DOB": "1980-03-20"}, evaluator)
        assert state.get("Name") == "Jane"
        assert state.get("Age") == 45

    def test_computed_answers_are_ignored(
        self, schema: FieldSchema, evaluator: DerivedFieldEvaluator
    ) -> None:
        """A supplied value for a computed field does not override the computation."""
        state = FormState.from_answers(schema, {"DOB": "1980-03-20", "Age": 99}, evaluator)
        assert state.get("Age") == 45

    def test_strict_rejects_unknown(self, schema: FieldSchema) -> None:
        """Unknown names raise in strict mode."""
        with pytest.raises(UnknownFieldError, match="Heart rate"):
            FormState.from_answers(schema, {"Heart rate": "72"})

    def test_lenient_skips_unknown(self, schema: FieldSchema) -> None:
        """Unknown names are skipped when not strict."""
        state = FormState.from_answers(schema, {"Heart rate": "72", "Name": "Jane"}, strict=False)
        assert state.get("Name") == "Jane"
        assert "Heart rate" not in state


class TestSnapshot:
    """Tests for snapshots."""

    def test_snapshot_is_a_copy(self, state: FormState) -> None:
        """Mutating a snapshot does not affect the state."""
        snapshot = state.snapshot()
        snapshot["Name"] = "Changed"
        assert state.get("Name") == ""

    def test_snapshot_includes_inactive_fields(self, state: FormState) -> None:
        """Inactive conditional fields keep their values in the snapshot."""
        state.set("Indication", "Pre operative assessment")
        state.set("Pre-Op Specify", "CABG work-up")
        state.set("Indication", "Assessment of valvular heart disease")

        assert state.snapshot()["Pre-Op Specify"] == "CABG work-up"


def test_normalize_value() -> None:
    """normalize_value maps None to empty and passes scalars through."""
    assert normalize_value("Name", None) == ""
    assert normalize_value("EF", 55.5) == 55.5
    with pytest.raises(TypeError, match="Name"):
        normalize_value("Name", object())
