"""CLI for echo-form report engine."""

import json
import logging
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from echo_form import __version__
from echo_form.config import REPORT_STORE_ENV, SCHEMA_ENV, EngineConfig
from echo_form.errors import (
    EchoFormError,
    PersistenceFailure,
    ReportNotFoundError,
    UnknownFieldError,
    ValidationFailure,
)
from echo_form.export import ReportDocument, build_report
from echo_form.io import read_answers
from echo_form.registry import FieldSchema, default_schema, dump_field_schema, load_field_schema
from echo_form.session import ReportSession
from echo_form.storage import JsonlReportStore

app = typer.Typer(
    name="echo-form",
    help="Declarative form engine for echocardiography reports.",
    no_args_is_help=True,
)
reports_app = typer.Typer(help="Manage stored reports.", no_args_is_help=True)
app.add_typer(reports_app, name="reports")

console = Console()

SchemaOption = Annotated[
    Path | None,
    typer.Option("--schema", envvar=SCHEMA_ENV, help="Field schema JSON (default: built-in)"),
]
StoreOption = Annotated[
    Path | None,
    typer.Option("--store", "-s", envvar=REPORT_STORE_ENV, help="Report store JSONL path"),
]


def version_callback(value: bool) -> None:
    if value:
        console.print(f"echo-form version {__version__}")
        raise typer.Exit()


def configure_logging(verbose: bool) -> None:
    """Route log records through rich, at DEBUG when verbose."""
    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(RichHandler(console=Console(stderr=True), show_path=False))
    root_logger.setLevel(logging.DEBUG if verbose else logging.WARNING)


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option("--version", "-v", callback=version_callback, is_eager=True),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-V", help="Enable debug logging"),
    ] = False,
) -> None:
    """echo-form: Declarative form engine for echocardiography reports."""
    configure_logging(verbose)


def _fail(message: str) -> None:
    console.print(f"[red]Error:[/red] {message}")
    raise typer.Exit(1)


def _load_schema(config: EngineConfig) -> FieldSchema:
    if config.schema_path is None:
        return default_schema()
    try:
        return load_field_schema(config.schema_path)
    except EchoFormError as e:
        _fail(str(e))


def _load_session(answers_path: Path, config: EngineConfig, store=None) -> ReportSession:
    if not answers_path.exists():
        _fail(f"Answers file not found: {answers_path}")

    session = ReportSession(schema=_load_schema(config), store=store)
    try:
        session.load_answers(read_answers(answers_path), strict=config.strict)
    except UnknownFieldError as e:
        _fail(f"{e}. Use --lenient to skip unknown fields.")
    except (ValueError, TypeError) as e:
        _fail(str(e))
    return session


@app.command()
def fields(
    section: Annotated[
        str | None,
        typer.Option("--section", help="Only list fields in this section"),
    ] = None,
    as_json: Annotated[
        bool,
        typer.Option("--json", help="Print the schema as a JSON document"),
    ] = False,
    schema_path: SchemaOption = None,
) -> None:
    """List the fields of the report schema."""
    config = EngineConfig.from_env(schema_path=schema_path)
    schema = _load_schema(config)

    if as_json:
        console.print_json(json.dumps(dump_field_schema(schema)))
        return

    if section is not None and section not in schema.sections:
        _fail(f"Unknown section: {section}")

    table = Table(title="Report fields")
    table.add_column("Name")
    table.add_column("Label")
    table.add_column("Kind")
    table.add_column("Section")
    table.add_column("Shown when")
    table.add_column("Flags")

    for field in schema.fields if section is None else schema.fields_in_section(section):
        condition = ""
        if field.is_conditional:
            values = ", ".join(str(value) for value in field.activation_values)
            condition = f"{field.controlling_field}: {values}"
        flags = []
        if field.is_required:
            flags.append("required")
        if field.is_computed:
            flags.append("computed")
        table.add_row(
            field.name, field.label, field.input_kind, field.section, condition, ", ".join(flags)
        )

    console.print(table)


@app.command()
def check(
    answers_path: Annotated[Path, typer.Argument(help="JSON file of field answers")],
    lenient: Annotated[
        bool,
        typer.Option("--lenient", help="Skip unknown fields instead of failing"),
    ] = False,
    schema_path: SchemaOption = None,
) -> None:
    """Evaluate an answers file: derived values, active fields, validation."""
    config = EngineConfig.from_env(schema_path=schema_path, strict=not lenient)
    session = _load_session(answers_path, config)

    console.print(f"[bold]echo-form[/bold] v{__version__}")
    console.print(f"  Answers: {answers_path}")

    computed = session.schema.computed_fields
    if computed:
        console.print("\n[bold]Derived values:[/bold]")
        for field in computed:
            value = session.get(field.name)
            console.print(f"  {field.label}: {value if value != '' else '-'}")

    active = session.active_fields()
    conditional = [field for field in session.schema.conditional_fields if field.name in active]
    console.print(f"\n[bold]Active conditional fields:[/bold] {len(conditional)}")
    for field in conditional:
        controlling_value = session.get(field.controlling_field)
        console.print(f"  {field.name} ({field.controlling_field} = {controlling_value})")

    result = session.validate()
    if result.valid:
        console.print("\n[green]Valid[/green]")
    else:
        console.print(f"\n[red]Invalid:[/red] {result.reason}")
        raise typer.Exit(1)


@app.command()
def submit(
    answers_path: Annotated[Path, typer.Argument(help="JSON file of field answers")],
    store_path: StoreOption = None,
    lenient: Annotated[
        bool,
        typer.Option("--lenient", help="Skip unknown fields instead of failing"),
    ] = False,
    schema_path: SchemaOption = None,
) -> None:
    """Validate an answers file and save it to the report store."""
    config = EngineConfig.from_env(
        report_store_path=store_path, schema_path=schema_path, strict=not lenient
    )
    store = JsonlReportStore(config.report_store_path)
    session = _load_session(answers_path, config, store=store)

    try:
        record = session.submit()
    except ValidationFailure as e:
        console.print(f"[red]Invalid:[/red] {e.result.reason}")
        raise typer.Exit(1)
    except PersistenceFailure as e:
        _fail(str(e))

    console.print(f"[green]{session.message.text}[/green]")
    console.print(f"  Report ID: {record.record_id}")
    console.print(f"  Store: {config.report_store_path}")


def _open_store(store_path: Path | None) -> JsonlReportStore:
    config = EngineConfig.from_env(report_store_path=store_path)
    return JsonlReportStore(config.report_store_path)


@reports_app.command("list")
def list_reports(store_path: StoreOption = None) -> None:
    """List stored reports, newest first."""
    store = _open_store(store_path)
    records = store.list_reports()
    if not records:
        console.print(f"No reports in {store.path}")
        return

    table = Table(title=f"Reports ({len(records)})")
    table.add_column("ID")
    table.add_column("Created")
    table.add_column("Patient")
    table.add_column("Clinic ID")
    table.add_column("Indication")
    for record in records:
        table.add_row(
            record.record_id,
            record.created_at,
            str(record.columns.get("patient_name") or ""),
            str(record.columns.get("clinic_id") or ""),
            str(record.columns.get("indication") or ""),
        )
    console.print(table)


@reports_app.command("show")
def show_report(
    record_id: Annotated[str, typer.Argument(help="Report ID")],
    store_path: StoreOption = None,
) -> None:
    """Print a stored report as JSON."""
    store = _open_store(store_path)
    try:
        record = store.get(record_id)
    except ReportNotFoundError as e:
        _fail(str(e))
    console.print_json(record.model_dump_json())


@reports_app.command("delete")
def delete_report(
    record_id: Annotated[str, typer.Argument(help="Report ID")],
    store_path: StoreOption = None,
) -> None:
    """Delete a stored report."""
    store = _open_store(store_path)
    try:
        store.delete(record_id)
    except ReportNotFoundError as e:
        _fail(str(e))
    console.print(f"[green]Report deleted successfully:[/green] {record_id}")


@reports_app.command("print")
def print_report(
    record_id: Annotated[str, typer.Argument(help="Report ID")],
    store_path: StoreOption = None,
    schema_path: SchemaOption = None,
) -> None:
    """Render the printable summary of a stored report."""
    config = EngineConfig.from_env(report_store_path=store_path, schema_path=schema_path)
    store = JsonlReportStore(config.report_store_path)
    try:
        record = store.get(record_id)
    except ReportNotFoundError as e:
        _fail(str(e))

    _render_report(build_report(record.snapshot, schema=_load_schema(config)))


def _render_report(document: ReportDocument) -> None:
    console.print(f"[bold]{document.title}[/bold]")
    console.rule()
    console.print("[bold]Patient Information[/bold]")
    for line in document.patient:
        console.print(f"  {line.label}: {line.value}")
    console.rule()
    console.print("[bold]Key Findings[/bold]")
    for line in document.findings:
        console.print(f"  {line.label}: {line.value}")
    console.rule()
    for section in document.sections:
        if not section.lines:
            continue
        console.print(f"[bold]{section.heading}[/bold]")
        for line in section.lines:
            console.print(f"  {line.label}: {line.value}")
    console.rule()
    console.print("[bold]Conclusion[/bold]")
    console.print(f"  {document.conclusion}")
    console.print(f"\nReport generated on: {document.generated_on}")


if __name__ == "__main__":
    app()
