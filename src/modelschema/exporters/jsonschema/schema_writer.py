import json
from pathlib import Path
from typing import Any

from modelschema import log


def write_schema(schema: dict[str, Any] | str, output_path: Path, indent: int | None = 2) -> Path:
    """
    Write a JSON Schema document to a file, creating missing parent directories.

    Args:
        schema: The schema as returned by ``model_to_json_schema``, or already serialized JSON text
        output_path: Path where the schema should be written
        indent: Indentation used when serializing a schema dict

    Returns:
        Path: The written file
    """
    content = schema if isinstance(schema, str) else json.dumps(schema, indent=indent)
    if not content.endswith("\n"):
        content += "\n"

    log.info(f"Writing JSON Schema to: {output_path}")
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(content, encoding="utf-8")
    except OSError as e:
        log.error(f"Failed to write schema to {output_path}: {e}")
        raise

    log.debug(f"Wrote {len(content)} characters to {output_path}")
    return output_path
