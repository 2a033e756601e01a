"""Field registry: definitions, the schema catalogue, and schema loading."""

from echo_form.registry.catalogue import ECHO_FIELDS, default_schema
from echo_form.registry.loader import dump_field_schema, load_field_schema, parse_field_schema
from echo_form.registry.models import EMPTY, FieldDefinition, InputKind, Scalar
from echo_form.registry.schema import FieldSchema

__all__ = [
    "ECHO_FIELDS",
    "EMPTY",
    "FieldDefinition",
    "FieldSchema",
    "InputKind",
    "Scalar",
    "default_schema",
    "dump_field_schema",
    "load_field_schema",
    "parse_field_schema",
]
