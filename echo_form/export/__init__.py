"""Read-only export of report snapshots."""

from echo_form.export.report import (
    NO_CONCLUSION,
    NOT_ASSESSED,
    NOT_AVAILABLE,
    ReportDocument,
    ReportLine,
    ReportSection,
    build_report,
)

__all__ = [
    "NOT_ASSESSED",
    "NOT_AVAILABLE",
    "NO_CONCLUSION",
    "ReportDocument",
    "ReportLine",
    "ReportSection",
    "build_report",
]
