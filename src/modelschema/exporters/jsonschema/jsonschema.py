import json
from typing import Any

from modelschema import log
from modelschema.metadata import ModelDescriptor

from .options import JsonSchemaOptions
from .transformer import JsonSchemaTransformer


def model_to_json_schema(model: ModelDescriptor, options: JsonSchemaOptions | None = None) -> dict[str, Any]:
    """
    Convert a model descriptor to a JSON Schema (Draft-06) document.

    Args:
        model: The model to convert
        options: Conversion options, defaults apply when omitted

    Returns:
        dict: JSON Schema with ``title``, ``properties`` and, when other models
        are referenced, ``definitions``

    Raises:
        InvalidModelError: If a reached model has nothing to convert
        UnsupportedTypeError: If a property type has no JSON Schema mapping
        UnresolvedRelationError: If a referenced model cannot be resolved
    """
    transformer = JsonSchemaTransformer(model, options)
    return transformer.transform()


def translate_to_jsonschema(
    model: ModelDescriptor,
    options: JsonSchemaOptions | None = None,
    indent: int | None = 2,
) -> str:
    """
    Translate a model descriptor to a JSON Schema string.

    Args:
        model: The model to convert
        options: Conversion options, defaults apply when omitted
        indent: JSON indentation, None for compact output

    Returns:
        str: JSON Schema representation as a string
    """
    json_schema = model_to_json_schema(model, options)
    json_schema_str = json.dumps(json_schema, indent=indent)

    log.info(f"Serialized JSON Schema of '{json_schema['title']}'")

    return json_schema_str
