"""Storage collaborators for submission records."""

from echo_form.storage.store import JsonlReportStore, ReportStore

__all__ = [
    "JsonlReportStore",
    "ReportStore",
]
