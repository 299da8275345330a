"""JSON Schema exporter module for modelschema."""

from .jsonschema import model_to_json_schema, translate_to_jsonschema
from .options import JsonSchemaOptions, load_jsonschema_options
from .schema_writer import write_schema

__all__ = [
    "JsonSchemaOptions",
    "load_jsonschema_options",
    "model_to_json_schema",
    "translate_to_jsonschema",
    "write_schema",
]
