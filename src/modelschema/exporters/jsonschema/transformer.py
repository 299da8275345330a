from copy import deepcopy
from typing import Any

from modelschema import log
from modelschema.errors import InvalidModelError, UnsupportedTypeError
from modelschema.exporters.jsonschema.options import JsonSchemaOptions
from modelschema.exporters.jsonschema.traverser import (
    find_inlineable_models,
    get_exposed_relations,
    get_schema_name,
)
from modelschema.metadata import (
    ArrayType,
    ModelDescriptor,
    ModelRef,
    PropertyDescriptor,
    PropertyType,
    RelationDescriptor,
    ScalarType,
)

SCALAR_KIND_TO_JSON_SCHEMA: dict[str, dict[str, Any]] = {
    "string": {"type": "string"},
    "number": {"type": "number"},
    "integer": {"type": "integer"},
    "boolean": {"type": "boolean"},
    "object": {"type": "object"},
    "null": {"type": "null"},
    "date": {"type": "string", "format": "date-time"},
    "any": {},
}

DEFINITIONS_REF_PREFIX = "#/definitions/"


class JsonSchemaTransformer:
    """
    Transformer class to convert a model descriptor to a JSON Schema document.

    One instance handles one top-level conversion. It keeps the visitation
    state of that conversion: schemas already built or in progress are
    referenced through ``$ref`` instead of being built again, which breaks
    reference cycles. Every referenced schema is hoisted into the top-level
    ``definitions``.
    """

    def __init__(self, model: ModelDescriptor, options: JsonSchemaOptions | None = None):
        self.model = model
        self.options = options or JsonSchemaOptions()
        self.include_relations = self.options.include_relations
        self.root_name = get_schema_name(model, self.include_relations)

        # schema name -> built schema, None while the build is in progress
        self.visited: dict[str, dict[str, Any] | None] = {}
        self.definitions: dict[str, dict[str, Any]] = {}
        self.models_by_name: dict[str, ModelDescriptor] = {}
        self.inlineable: set[str] = set()

    def transform(self) -> dict[str, Any]:
        """
        Transform the model to a JSON Schema document.

        Returns:
            Dict[str, Any]: JSON Schema with referenced models under ``definitions``
        """
        log.info(f"Starting JSON Schema transformation of model '{self.model.name}'")

        if self.options.inline_leaf_models:
            self.inlineable = find_inlineable_models(self.model, self.include_relations)
            log.debug(f"Inlineable models: {sorted(self.inlineable)}")

        self.register_model_name(self.model, self.root_name)
        self.visited[self.root_name] = None
        json_schema = self.transform_model(self.model)
        self.visited[self.root_name] = json_schema

        if self.definitions:
            json_schema["definitions"] = self.definitions

        log.info(f"Successfully transformed '{self.root_name}' with {len(self.definitions)} definitions")
        return json_schema

    def transform_model(self, model: ModelDescriptor) -> dict[str, Any]:
        """
        Build the schema of a single model, without ``definitions``.

        Args:
            model: The model descriptor

        Returns:
            Dict[str, Any]: JSON Schema definition of the model
        """
        if not model.has_content():
            raise InvalidModelError(model.name, "model declares no properties and no relations")

        definition: dict[str, Any] = {
            "title": get_schema_name(model, self.include_relations),
            "properties": {},
        }

        if model.description:
            definition["description"] = model.description

        required_fields = []
        for property_name, prop in model.effective_properties().items():
            definition["properties"][property_name] = self.transform_property(model, prop)
            if prop.required:
                required_fields.append(property_name)

        if self.include_relations:
            for relation in get_exposed_relations(model):
                definition["properties"][relation.name] = self.transform_relation(relation)

        if required_fields:
            definition["required"] = required_fields

        if model.strict is not None:
            definition["additionalProperties"] = not model.strict

        log.debug(f"Transformed model: {model.name}")
        return definition

    def transform_property(self, model: ModelDescriptor, prop: PropertyDescriptor) -> dict[str, Any]:
        """
        Transform a model property to a JSON Schema property.

        Args:
            model: The model declaring the property
            prop: The property descriptor

        Returns:
            JSON Schema property definition
        """
        definition = self.get_type_definition(model, prop.name, prop.type)

        if prop.description:
            definition["description"] = prop.description

        if prop.json_schema:
            definition.update(deepcopy(dict(prop.json_schema)))

        return definition

    def get_type_definition(
        self, model: ModelDescriptor, property_name: str, property_type: PropertyType
    ) -> dict[str, Any]:
        """
        Get JSON Schema definition for a property type.

        Args:
            model: The model declaring the property
            property_name: Name of the property, for error reporting
            property_type: The property type

        Returns:
            JSON Schema type definition
        """
        if isinstance(property_type, ScalarType):
            json_type = SCALAR_KIND_TO_JSON_SCHEMA.get(property_type.kind)
            if json_type is None:
                raise UnsupportedTypeError(model.name, property_name, property_type.kind)

            definition = dict(json_type)
            if property_type.enum is not None:
                definition["enum"] = list(property_type.enum)
            return definition

        if isinstance(property_type, ArrayType):
            return {"type": "array", "items": self.get_type_definition(model, property_name, property_type.items)}

        if isinstance(property_type, ModelRef):
            return self.reference_model(property_type.resolve())

        raise UnsupportedTypeError(model.name, property_name, property_type)

    def transform_relation(self, relation: RelationDescriptor) -> dict[str, Any]:
        """
        Transform a relation to the property exposing the related model(s).

        Args:
            relation: The relation descriptor

        Returns:
            Reference to the target schema, wrapped in an array for to-many relations
        """
        target_definition = self.reference_model(relation.resolve_target())

        if relation.targets_many:
            return {"type": "array", "items": target_definition}
        return target_definition

    def reference_model(self, model: ModelDescriptor) -> dict[str, Any]:
        """
        Reference a model from within the schema being built.

        Builds the model's schema on first encounter. Models already built or in
        progress are referenced through ``$ref``; inlineable leaf models are
        returned in full.

        Args:
            model: The referenced model

        Returns:
            Dict[str, Any]: A ``$ref`` object, or the inlined schema
        """
        schema_name = get_schema_name(model, self.include_relations)
        self.register_model_name(model, schema_name)

        if schema_name in self.visited:
            return {"$ref": f"{DEFINITIONS_REF_PREFIX}{schema_name}"}

        self.visited[schema_name] = None
        definition = self.transform_model(model)
        self.visited[schema_name] = definition

        if schema_name in self.inlineable:
            log.debug(f"Inlining model: {schema_name}")
            return definition

        self.definitions[schema_name] = definition
        return {"$ref": f"{DEFINITIONS_REF_PREFIX}{schema_name}"}

    def register_model_name(self, model: ModelDescriptor, schema_name: str) -> None:
        known = self.models_by_name.setdefault(schema_name, model)
        if known is not model:
            raise InvalidModelError(model.name, "another model with the same name is reachable from this model")
