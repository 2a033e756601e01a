"""Mapping from validated form state to submission records."""

from echo_form.mapping.mapper import (
    DEFAULT_PROJECTION,
    ColumnBinding,
    SubmissionMapper,
    SubmissionRecord,
    default_projection,
)

__all__ = [
    "DEFAULT_PROJECTION",
    "ColumnBinding",
    "SubmissionMapper",
    "SubmissionRecord",
    "default_projection",
]
