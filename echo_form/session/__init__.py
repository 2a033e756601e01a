"""Report sessions: one form state from first edit to submission."""

from echo_form.session.session import ReportSession, SubmissionMessage

__all__ = [
    "ReportSession",
    "SubmissionMessage",
]
