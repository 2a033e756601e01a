"""Printable report summaries.

Builds the content of the printed echocardiography report from a
snapshot. Layout and rendering belong to the caller; this module only
decides what goes on the page. Snapshots are read, never modified.
"""

from collections.abc import Mapping
from datetime import date

from pydantic import BaseModel, Field

from echo_form.registry.catalogue import (
    AGE_FIELD,
    CONCLUSION_FIELD,
    DIASTOLIC_COMMENT_FIELD,
    DOB_FIELD,
    ID_FIELD,
    NAME_FIELD,
    SYSTOLIC_COMMENT_FIELD,
    default_schema,
)
from echo_form.registry.models import EMPTY, Scalar
from echo_form.registry.schema import FieldSchema
from echo_form.validation.checks import is_empty
from echo_form.visibility.resolver import VisibilityResolver

NOT_AVAILABLE = "N/A"
NOT_ASSESSED = "Not assessed."
NO_CONCLUSION = "No conclusion provided."


class ReportLine(BaseModel):
    """A single labelled value on the report."""

    label: str
    value: str


class ReportSection(BaseModel):
    """A section of the report listing its active, answered fields."""

    heading: str
    lines: list[ReportLine] = Field(default_factory=list)


class ReportDocument(BaseModel):
    """Content of a printable echocardiography report."""

    title: str = "Echocardiography Report"
    patient: list[ReportLine]
    findings: list[ReportLine]
    conclusion: str
    sections: list[ReportSection]
    generated_on: str


def _text(value: Scalar | None, fallback: str) -> str:
    return fallback if is_empty(value) else str(value)


def _with_suffix(value: Scalar, suffix: str | None) -> str:
    return f"{value} {suffix}" if suffix else str(value)


def build_report(
    snapshot: Mapping[str, Scalar],
    schema: FieldSchema | None = None,
    generated_on: date | None = None,
) -> ReportDocument:
    """Build the printable report for a snapshot.

    Args:
        snapshot: Field values, e.g. from FormState.snapshot() or a stored
            SubmissionRecord. Schema fields missing from it count as empty.
        schema: The field schema. Defaults to the echocardiography catalogue.
        generated_on: Date printed in the footer. Defaults to today.

    Returns:
        The ReportDocument.
    """
    schema = schema if schema is not None else default_schema()
    resolver = VisibilityResolver(schema)
    generated_on = generated_on or date.today()
    values = {field.name: snapshot.get(field.name, EMPTY) for field in schema}

    patient = [
        ReportLine(label="Patient Name", value=_text(snapshot.get(NAME_FIELD), NOT_AVAILABLE)),
        ReportLine(label="Clinic ID", value=_text(snapshot.get(ID_FIELD), NOT_AVAILABLE)),
        ReportLine(label="Date of Birth", value=_text(snapshot.get(DOB_FIELD), NOT_AVAILABLE)),
        ReportLine(label="Age", value=_text(snapshot.get(AGE_FIELD), NOT_AVAILABLE)),
    ]
    findings = [
        ReportLine(
            label="LV Systolic Function",
            value=_text(snapshot.get(SYSTOLIC_COMMENT_FIELD), NOT_ASSESSED),
        ),
        ReportLine(
            label="LV Diastolic Function",
            value=_text(snapshot.get(DIASTOLIC_COMMENT_FIELD), NOT_ASSESSED),
        ),
    ]

    sections: list[ReportSection] = []
    for heading in schema.sections:
        lines = [
            ReportLine(label=field.label, value=_with_suffix(values[field.name], field.suffix))
            for field in resolver.visible_fields(values, heading)
            if not is_empty(values[field.name])
        ]
        sections.append(ReportSection(heading=heading, lines=lines))

    return ReportDocument(
        patient=patient,
        findings=findings,
        conclusion=_text(snapshot.get(CONCLUSION_FIELD), NO_CONCLUSION),
        sections=sections,
        generated_on=generated_on.strftime("%d/%m/%Y"),
    )
