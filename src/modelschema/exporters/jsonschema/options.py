from pathlib import Path
from typing import Any, cast

import yaml
from pydantic import BaseModel, ConfigDict, Field

from modelschema import log


class JsonSchemaOptions(BaseModel):
    """Options controlling how a model is converted to JSON Schema."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid", frozen=True)

    include_relations: bool = Field(False, alias="includeRelations")
    inline_leaf_models: bool = Field(False, alias="inlineLeafModels")


def load_jsonschema_options(config_path: Path | None) -> JsonSchemaOptions | None:
    """
    Load and validate JSON Schema export options from a YAML file.

    Args:
        config_path: Path to the YAML configuration file, or None to skip loading.

    Returns:
        Validated JsonSchemaOptions, or None if config_path is None.

    Raises:
        OSError: If the file cannot be read.
        yaml.YAMLError: If the file is not valid YAML.
        TypeError: If the YAML root is not a mapping.
        ValidationError: If validation against JsonSchemaOptions fails.
    """
    if config_path is None:
        log.debug("No JSON Schema options file provided")
        return None

    raw: Any
    with config_path.open("r", encoding="utf-8") as f:
        raw = yaml.safe_load(f)

    log.debug("Loaded JSON Schema options from %s", config_path)

    # Treat empty file or explicit YAML null as "defaults"
    if raw is None or raw == {}:
        return JsonSchemaOptions()

    if not isinstance(raw, dict):
        raise TypeError(f"Options root must be a mapping (YAML object), got {type(raw).__name__}")

    return JsonSchemaOptions.model_validate(cast(dict[str, Any], raw))
