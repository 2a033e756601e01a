"""Pytest configuration and shared fixtures."""

from datetime import date

import pytest

from echo_form.derived import DerivedFieldEvaluator, default_evaluator
from echo_form.mapping import SubmissionRecord
from echo_form.registry import FieldSchema, default_schema
from echo_form.session import ReportSession
from echo_form.state import FormState

FIXED_TODAY = date(2025, 6, 15)


class RecordingStore:
    """In-memory storage collaborator that records persisted reports."""

    def __init__(self, result: bool = True, error: Exception | None = None) -> None:
        self.result = result
        self.error = error
        self.records: list[SubmissionRecord] = []

    def persist(self, record: SubmissionRecord) -> bool:
        if self.error is not None:
            raise self.error
        if self.result:
            self.records.append(record)
        return self.result


@pytest.fixture
def today() -> date:
    """The fixed reference date used for age calculations."""
    return FIXED_TODAY


@pytest.fixture
def schema() -> FieldSchema:
    """The built-in echocardiography schema."""
    return default_schema()


@pytest.fixture
def evaluator(schema: FieldSchema, today: date) -> DerivedFieldEvaluator:
    """Evaluator with the echo relations and a fixed clock."""
    return default_evaluator(schema, today=lambda: today)


@pytest.fixture
def state(schema: FieldSchema, evaluator: DerivedFieldEvaluator) -> FormState:
    """A fresh form state wired to the evaluator."""
    return FormState(schema, evaluator=evaluator)


@pytest.fixture
def complete_answers() -> dict:
    """Answers covering every base-required field."""
    return {
        "Name": "Jane Doe",
        "ID": "C12345",
        "DOB": "1980-03-20",
        "LV EDD": "45.2",
    }


@pytest.fixture
def recording_store() -> RecordingStore:
    """A store that accepts every record."""
    return RecordingStore()


@pytest.fixture
def session(schema: FieldSchema, today: date, recording_store: RecordingStore) -> ReportSession:
    """A report session with a fixed clock and a recording store."""
    return ReportSession(
        schema=schema,
        store=recording_store,
        today=lambda: today,
        deterministic_ids=True,
    )


@pytest.fixture
def make_store():
    """Factory for recording stores with a chosen outcome."""
    return RecordingStore
