"""Load field schemas from JSON documents.

A schema document looks like:
    {
        "type": "field_schema",
        "schema_id": "echo_report",
        "version": "1.0.0",
        "fields": [{"name": "...", "label": "...", ...}, ...]
    }

Documents are validated against FIELD_SCHEMA_DOCUMENT with jsonschema,
then each field is parsed into a FieldDefinition and the whole list is
checked by FieldSchema.
"""

import json
import logging
from pathlib import Path
from typing import Any

import jsonschema
from pydantic import ValidationError

from echo_form.errors import SchemaLoadError
from echo_form.registry.models import FieldDefinition
from echo_form.registry.schema import FieldSchema

logger = logging.getLogger(__name__)

_SCALAR = {"type": ["string", "number"]}

FIELD_SCHEMA_DOCUMENT: dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "required": ["type", "fields"],
    "properties": {
        "type": {"const": "field_schema"},
        "schema_id": {"type": "string"},
        "version": {"type": "string"},
        "fields": {
            "type": "array",
            "minItems": 1,
            "items": {
                "type": "object",
                "required": ["name", "label", "input_kind", "section"],
                "additionalProperties": False,
                "properties": {
                    "name": {"type": "string", "minLength": 1},
                    "label": {"type": "string"},
                    "input_kind": {
                        "enum": ["short_text", "numeric", "date", "single_choice"],
                    },
                    "section": {"type": "string"},
                    "choice_options": {
                        "type": ["array", "null"],
                        "items": {"type": "string"},
                    },
                    "is_computed": {"type": "boolean"},
                    "is_conditional": {"type": "boolean"},
                    "controlling_field": {"type": ["string", "null"]},
                    "activation_values": {"type": "array", "items": _SCALAR},
                    "is_required": {"type": "boolean"},
                    "placeholder": {"type": ["string", "null"]},
                    "suffix": {"type": ["string", "null"]},
                    "tooltip": {"type": ["string", "null"]},
                },
            },
        },
    },
}


def load_field_schema(path: Path | str) -> FieldSchema:
    """Load and validate a field schema document.

    Args:
        path: Path to the JSON schema document.

    Returns:
        The validated FieldSchema.

    Raises:
        SchemaLoadError: If the file is missing, is not JSON, or fails
            document or field validation.
        SchemaIntegrityError: If the fields are inconsistent with each other.
    """
    path = Path(path)
    if not path.exists():
        raise SchemaLoadError(f"Schema document not found: {path}")

    with open(path) as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise SchemaLoadError(f"Invalid JSON in schema document {path}: {e}") from e

    return parse_field_schema(data, source=str(path))


def parse_field_schema(data: dict[str, Any], source: str = "<memory>") -> FieldSchema:
    """Build a FieldSchema from an already-parsed schema document."""
    try:
        jsonschema.validate(data, FIELD_SCHEMA_DOCUMENT)
    except jsonschema.ValidationError as e:
        raise SchemaLoadError(f"Schema document validation failed for {source}: {e.message}") from e

    fields: list[FieldDefinition] = []
    for entry in data["fields"]:
        try:
            fields.append(FieldDefinition.model_validate(entry))
        except ValidationError as e:
            raise SchemaLoadError(
                f"Invalid field {entry.get('name')!r} in {source}: {e}"
            ) from e

    schema = FieldSchema(fields)
    logger.info("Loaded %d fields from %s", len(schema), source)
    return schema


def dump_field_schema(
    schema: FieldSchema,
    schema_id: str = "echo_report",
    version: str = "1.0.0",
) -> dict[str, Any]:
    """Serialize a FieldSchema into the document shape read by load_field_schema."""
    return {
        "type": "field_schema",
        "schema_id": schema_id,
        "version": version,
        "fields": [field.model_dump(mode="json") for field in schema],
    }
