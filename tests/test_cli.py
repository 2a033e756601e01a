"""Tests for the echo-form command line."""

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from echo_form import __version__
from echo_form.cli import app
from echo_form.config import REPORT_STORE_ENV, SCHEMA_ENV
from echo_form.registry.catalogue import INTERVENTION_OPTION_VALUE
from echo_form.storage import JsonlReportStore

runner = CliRunner()


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv(REPORT_STORE_ENV, raising=False)
    monkeypatch.delenv(SCHEMA_ENV, raising=False)


@pytest.fixture
def store_path(tmp_path: Path) -> Path:
    return tmp_path / "reports.jsonl"


def _write_answers(tmp_path: Path, answers: dict) -> Path:
    path = tmp_path / "answers.json"
    path.write_text(json.dumps(answers))
    return path


class TestVersion:
    def test_version(self) -> None:
        """--version prints the package version."""
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.stdout


class TestFields:
    """Tests for the fields command."""

    def test_json_output(self) -> None:
        """--json prints a loadable schema document."""
        result = runner.invoke(app, ["fields", "--json"])

        assert result.exit_code == 0
        document = json.loads(result.stdout)
        assert document["type"] == "field_schema"
        assert document["fields"][0]["name"] == "Name"

    def test_table(self) -> None:
        """The default output is a table."""
        result = runner.invoke(app, ["fields", "--section", "Septal Assessment"])
        assert result.exit_code == 0
        assert "Report fields" in result.stdout

    def test_unknown_section(self) -> None:
        """An unknown section is an error."""
        result = runner.invoke(app, ["fields", "--section", "Nope"])
        assert result.exit_code == 1
        assert "Unknown section" in result.stdout

    def test_custom_schema(self, tmp_path: Path) -> None:
        """--schema loads a schema document instead of the built-in one."""
        schema_path = tmp_path / "schema.json"
        schema_path.write_text(
            json.dumps(
                {
                    "type": "field_schema",
                    "fields": [
                        {"name": "Notes", "label": "Notes", "input_kind": "short_text", "section": "S"}
                    ],
                }
            )
        )

        result = runner.invoke(app, ["fields", "--json", "--schema", str(schema_path)])

        assert result.exit_code == 0
        assert [f["name"] for f in json.loads(result.stdout)["fields"]] == ["Notes"]

    def test_bad_schema(self, tmp_path: Path) -> None:
        """A broken schema document is reported as an error."""
        schema_path = tmp_path / "schema.json"
        schema_path.write_text("{")
        result = runner.invoke(app, ["fields", "--schema", str(schema_path)])
        assert result.exit_code == 1
        assert "Error" in result.stdout


class TestCheck:
    """Tests for the check command."""

    def test_valid(self, tmp_path: Path, complete_answers: dict) -> None:
        """A complete answers file is valid."""
        result = runner.invoke(app, ["check", str(_write_answers(tmp_path, complete_answers))])
        assert result.exit_code == 0
        assert "Valid" in result.stdout
        assert "Derived values" in result.stdout

    def test_invalid(self, tmp_path: Path, complete_answers: dict) -> None:
        """A missing intervention date fails with exit code 1."""
        answers = {**complete_answers, "Indication": INTERVENTION_OPTION_VALUE}
        result = runner.invoke(app, ["check", str(_write_answers(tmp_path, answers))])
        assert result.exit_code == 1
        assert "Invalid" in result.stdout

    def test_missing_file(self, tmp_path: Path) -> None:
        """A missing answers file is an error."""
        result = runner.invoke(app, ["check", str(tmp_path / "nope.json")])
        assert result.exit_code == 1
        assert "not found" in result.stdout

    def test_unknown_field_strict(self, tmp_path: Path, complete_answers: dict) -> None:
        """Unknown fields fail unless --lenient is given."""
        path = _write_answers(tmp_path, {**complete_answers, "Heart rate": "72"})

        strict = runner.invoke(app, ["check", str(path)])
        lenient = runner.invoke(app, ["check", "--lenient", str(path)])

        assert strict.exit_code == 1
        assert "Unknown field" in strict.stdout
        assert lenient.exit_code == 0


class TestSubmitAndReports:
    """Tests for submit and the reports sub-commands."""

    def test_submit_persists(self, tmp_path: Path, store_path: Path, complete_answers: dict) -> None:
        """A valid submission is written to the store."""
        answers = _write_answers(tmp_path, complete_answers)

        result = runner.invoke(app, ["submit", str(answers), "--store", str(store_path)])

        assert result.exit_code == 0
        assert "Report saved successfully" in result.stdout
        records = JsonlReportStore(store_path).list_reports()
        assert len(records) == 1
        assert records[0].record_id in result.stdout

    def test_submit_store_from_env(
        self,
        tmp_path: Path,
        store_path: Path,
        complete_answers: dict,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """The store path can come from the environment."""
        monkeypatch.setenv(REPORT_STORE_ENV, str(store_path))
        answers = _write_answers(tmp_path, complete_answers)

        result = runner.invoke(app, ["submit", str(answers)])

        assert result.exit_code == 0
        assert len(JsonlReportStore(store_path).list_reports()) == 1

    def test_submit_invalid(self, tmp_path: Path, store_path: Path) -> None:
        """An invalid submission writes nothing."""
        answers = _write_answers(tmp_path, {"Name": "Jane Doe"})

        result = runner.invoke(app, ["submit", str(answers), "--store", str(store_path)])

        assert result.exit_code == 1
        assert "Invalid" in result.stdout
        assert JsonlReportStore(store_path).list_reports() == []

    def test_list_show_print_delete(
        self, tmp_path: Path, store_path: Path, complete_answers: dict
    ) -> None:
        """Stored reports can be listed, shown, printed and deleted."""
        answers = _write_answers(tmp_path, complete_answers)
        runner.invoke(app, ["submit", str(answers), "--store", str(store_path)])
        record_id = JsonlReportStore(store_path).list_reports()[0].record_id

        listed = runner.invoke(app, ["reports", "list", "--store", str(store_path)])
        assert listed.exit_code == 0
        assert "Reports (1)" in listed.stdout

        shown = runner.invoke(app, ["reports", "show", record_id, "--store", str(store_path)])
        assert shown.exit_code == 0
        assert json.loads(shown.stdout)["columns"]["clinic_id"] == "C12345"

        printed = runner.invoke(app, ["reports", "print", record_id, "--store", str(store_path)])
        assert printed.exit_code == 0
        assert "Echocardiography Report" in printed.stdout
        assert "Jane Doe" in printed.stdout

        deleted = runner.invoke(app, ["reports", "delete", record_id, "--store", str(store_path)])
        assert deleted.exit_code == 0
        assert JsonlReportStore(store_path).list_reports() == []

    def test_empty_list(self, store_path: Path) -> None:
        """An empty store says so."""
        result = runner.invoke(app, ["reports", "list", "--store", str(store_path)])
        assert result.exit_code == 0
        assert "No reports" in result.stdout

    def test_show_missing(self, store_path: Path) -> None:
        """Unknown report IDs are errors."""
        result = runner.invoke(app, ["reports", "show", "nope", "--store", str(store_path)])
        assert result.exit_code == 1
        assert "Report not found" in result.stdout

    def test_print_with_other_schema(
        self, tmp_path: Path, store_path: Path, complete_answers: dict
    ) -> None:
        """A stored report prints against a schema with fields it never had."""
        answers = _write_answers(tmp_path, complete_answers)
        runner.invoke(app, ["submit", str(answers), "--store", str(store_path)])
        record_id = JsonlReportStore(store_path).list_reports()[0].record_id
        schema_path = tmp_path / "schema.json"
        schema_path.write_text(
            json.dumps(
                {
                    "type": "field_schema",
                    "fields": [
                        {
                            "name": "Rhythm",
                            "label": "Rhythm",
                            "input_kind": "single_choice",
                            "section": "ECG",
                            "choice_options": ["Sinus", "AF"],
                        },
                        {
                            "name": "Rate",
                            "label": "Rate",
                            "input_kind": "numeric",
                            "section": "ECG",
                            "is_conditional": True,
                            "controlling_field": "Rhythm",
                            "activation_values": ["AF"],
                        },
                    ],
                }
            )
        )

        args = ["reports", "print", record_id, "--store", str(store_path)]
        result = runner.invoke(app, [*args, "--schema", str(schema_path)])

        assert result.exit_code == 0
        assert "Jane Doe" in result.stdout
        assert "Good LV systolic function" in result.stdout
