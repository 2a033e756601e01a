"""Environment-driven configuration for echo-form."""

import os
from pathlib import Path

from pydantic import BaseModel

REPORT_STORE_ENV = "ECHO_FORM_REPORT_STORE"
SCHEMA_ENV = "ECHO_FORM_SCHEMA"

DEFAULT_REPORT_STORE = "reports.jsonl"


def get_report_store_path() -> Path:
    """Report store path from ECHO_FORM_REPORT_STORE, or reports.jsonl."""
    return Path(os.environ.get(REPORT_STORE_ENV, DEFAULT_REPORT_STORE))


def get_schema_path() -> Path | None:
    """Schema document path from ECHO_FORM_SCHEMA, or None for the built-in catalogue."""
    env_path = os.environ.get(SCHEMA_ENV)
    return Path(env_path) if env_path else None


class EngineConfig(BaseModel):
    """Configuration for command line runs."""

    report_store_path: Path
    schema_path: Path | None = None
    strict: bool = True

    @classmethod
    def from_env(cls, **overrides) -> "EngineConfig":
        """Build a config from the environment, with explicit overrides winning."""
        values = {
            "report_store_path": get_report_store_path(),
            "schema_path": get_schema_path(),
        }
        values.update({key: value for key, value in overrides.items() if value is not None})
        return cls(**values)
