"""Report storage.

ReportStore is the single-operation protocol the session persists
through. JsonlReportStore keeps one record per line in a local file and
adds the list/get/delete operations used by the command line.
"""

import logging
from pathlib import Path
from typing import Protocol, runtime_checkable

from echo_form.errors import ReportNotFoundError
from echo_form.io import read_jsonl, write_jsonl
from echo_form.mapping.mapper import SubmissionRecord

logger = logging.getLogger(__name__)


@runtime_checkable
class ReportStore(Protocol):
    """Protocol for storage collaborators."""

    def persist(self, record: SubmissionRecord) -> bool:
        """Store a submission record.

        Args:
            record: The record to store.

        Returns:
            True on success, False on failure. Raising is also treated as failure.
        """
        ...


class JsonlReportStore:
    """File-backed report store using one JSON line per record."""

    def __init__(self, path: Path | str) -> None:
        """Initialize the store.

        Args:
            path: Path to the JSONL file. Parent directories are created.
        """
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)

    def persist(self, record: SubmissionRecord) -> bool:
        """Append a record to the store."""
        write_jsonl(self.path, [record.model_dump(mode="json")], append=True)
        logger.info("Saved report %s to %s", record.record_id, self.path)
        return True

    def list_reports(self) -> list[SubmissionRecord]:
        """All stored reports, newest first."""
        if not self.path.exists():
            return []
        records = [SubmissionRecord.model_validate(data) for data in read_jsonl(self.path)]
        return sorted(records, key=lambda record: record.created_at, reverse=True)

    def get(self, record_id: str) -> SubmissionRecord:
        """Get a stored report by ID.

        Raises:
            ReportNotFoundError: If no report has this ID.
        """
        for record in self.list_reports():
            if record.record_id == record_id:
                return record
        raise ReportNotFoundError(f"Report not found: {record_id}")

    def delete(self, record_id: str) -> None:
        """Delete a stored report.

        Raises:
            ReportNotFoundError: If no report has this ID.
        """
        if not self.path.exists():
            raise ReportNotFoundError(f"Report not found: {record_id}")

        rows = list(read_jsonl(self.path))
        kept = [row for row in rows if row.get("record_id") != record_id]
        if len(kept) == len(rows):
            raise ReportNotFoundError(f"Report not found: {record_id}")

        write_jsonl(self.path, kept)
        logger.info("Deleted report %s from %s", record_id, self.path)
