"""Load model descriptors from GraphQL SDL.

Every object type becomes a model. Relations are declared with directives::

    type Product {
      id: Float @id
      categoryId: Float @belongsTo(model: "Category")
    }

    type Category {
      id: Float @id
      products: [Product] @hasMany(foreignKey: "categoryId")
    }

A ``@hasMany`` field is a relation only; it does not become a property.
"""

from pathlib import Path
from typing import Any

from ariadne import load_schema_from_path
from graphql import (
    DirectiveDefinitionNode,
    FloatValueNode,
    GraphQLEnumType,
    GraphQLField,
    GraphQLList,
    GraphQLNonNull,
    GraphQLObjectType,
    GraphQLScalarType,
    GraphQLSchema,
    GraphQLType,
    IntValueNode,
    build_schema,
    get_named_type,
    is_list_type,
    is_non_null_type,
    is_object_type,
    parse,
)

from modelschema import log
from modelschema.errors import InvalidModelError, UnsupportedTypeError
from modelschema.metadata import (
    ArrayType,
    ModelDescriptor,
    ModelRef,
    PropertyDescriptor,
    PropertyType,
    RelationDescriptor,
    ScalarType,
    belongs_to,
    has_many,
)
from modelschema.registry import ModelRegistry

RELATION_DIRECTIVE_DEFINITIONS = {
    "id": "directive @id on FIELD_DEFINITION",
    "belongsTo": "directive @belongsTo(model: String!, name: String) on FIELD_DEFINITION",
    "hasMany": "directive @hasMany(foreignKey: String!) on FIELD_DEFINITION",
}

GRAPHQL_SCALAR_TO_KIND = {
    "String": "string",
    "ID": "string",
    "Int": "integer",
    "Float": "number",
    "Boolean": "boolean",
}

ROOT_TYPE_NAMES = {"Query", "Mutation", "Subscription"}


def get_directive_arguments(field: GraphQLField, directive_name: str) -> dict[str, Any] | None:
    """
    Extract the arguments of a directive applied to a field.

    Args:
        field: The GraphQL field
        directive_name: Name of the directive

    Returns:
        The directive arguments, or None if the directive is not applied
    """
    if not field.ast_node or not field.ast_node.directives:
        return None

    directive = next((d for d in field.ast_node.directives if d.name.value == directive_name), None)
    if directive is None:
        return None

    args: dict[str, Any] = {}
    for arg in directive.arguments:
        if isinstance(arg.value, IntValueNode):
            args[arg.name.value] = int(arg.value.value)
        elif isinstance(arg.value, FloatValueNode):
            args[arg.name.value] = float(arg.value.value)
        else:
            args[arg.name.value] = getattr(arg.value, "value", arg.value)
    return args


def build_model_schema(sdl: str) -> GraphQLSchema:
    """Build a GraphQL schema from SDL, declaring the relation directives if the SDL does not."""
    declared = {
        definition.name.value
        for definition in parse(sdl).definitions
        if isinstance(definition, DirectiveDefinitionNode)
    }
    missing = [sdl_line for name, sdl_line in RELATION_DIRECTIVE_DEFINITIONS.items() if name not in declared]
    return build_schema("\n".join([*missing, sdl]))


def get_model_types(schema: GraphQLSchema) -> list[GraphQLObjectType]:
    return [
        named_type
        for name, named_type in schema.type_map.items()
        if is_object_type(named_type) and not name.startswith("__") and name not in ROOT_TYPE_NAMES
    ]


def get_property_type(
    model_name: str, field_name: str, field_type: GraphQLType, registry: ModelRegistry
) -> PropertyType:
    """
    Map a GraphQL field type to a property type.

    Args:
        model_name: Name of the model declaring the field
        field_name: Name of the field
        field_type: The GraphQL field type
        registry: Registry resolving object type references

    Returns:
        PropertyType: The corresponding property type

    Raises:
        UnsupportedTypeError: For union, interface and input object types
    """
    if isinstance(field_type, GraphQLNonNull):
        return get_property_type(model_name, field_name, field_type.of_type, registry)

    if isinstance(field_type, GraphQLList):
        return ArrayType(get_property_type(model_name, field_name, field_type.of_type, registry))

    if isinstance(field_type, GraphQLScalarType):
        return ScalarType(GRAPHQL_SCALAR_TO_KIND.get(field_type.name, field_type.name.lower()))

    if isinstance(field_type, GraphQLEnumType):
        return ScalarType("string", enum=tuple(field_type.values))

    if isinstance(field_type, GraphQLObjectType):
        return ModelRef(registry.ref(field_type.name))

    raise UnsupportedTypeError(model_name, field_name, str(field_type))


def build_model_descriptor(object_type: GraphQLObjectType, registry: ModelRegistry) -> ModelDescriptor:
    """
    Build the descriptor of a model declared as a GraphQL object type.

    Args:
        object_type: The GraphQL object type
        registry: Registry resolving references to other models

    Returns:
        ModelDescriptor: The model descriptor
    """
    properties: list[PropertyDescriptor] = []
    relations: list[RelationDescriptor] = []

    for field_name, field in object_type.fields.items():
        has_many_args = get_directive_arguments(field, "hasMany")
        if has_many_args is not None:
            relations.append(_build_has_many(object_type.name, field_name, field, has_many_args, registry))
            continue

        properties.append(
            PropertyDescriptor(
                name=field_name,
                type=get_property_type(object_type.name, field_name, field.type, registry),
                id=get_directive_arguments(field, "id") is not None,
                required=is_non_null_type(field.type),
                description=field.description,
            )
        )

        belongs_to_args = get_directive_arguments(field, "belongsTo")
        if belongs_to_args is not None:
            relations.append(
                belongs_to(
                    registry.ref(belongs_to_args["model"]),
                    foreign_key=field_name,
                    name=belongs_to_args.get("name"),
                    source=object_type.name,
                )
            )

    return ModelDescriptor(
        name=object_type.name,
        properties=properties,
        relations=relations,
        description=object_type.description,
    )


def _build_has_many(
    model_name: str,
    field_name: str,
    field: GraphQLField,
    args: dict[str, Any],
    registry: ModelRegistry,
) -> RelationDescriptor:
    field_type = field.type.of_type if is_non_null_type(field.type) else field.type
    target_type = get_named_type(field.type)
    if not is_list_type(field_type) or not is_object_type(target_type):
        raise InvalidModelError(model_name, f"@hasMany field '{field_name}' must be a list of an object type")
    return has_many(registry.ref(target_type.name), name=field_name, foreign_key=args["foreignKey"])


def load_models_from_sdl(sdl: str) -> ModelRegistry:
    """
    Load model descriptors from a GraphQL SDL string.

    Args:
        sdl: GraphQL SDL declaring the models

    Returns:
        ModelRegistry: Registry holding one descriptor per object type
    """
    schema = build_model_schema(sdl)
    registry = ModelRegistry()

    for object_type in get_model_types(schema):
        registry.register(build_model_descriptor(object_type, registry))

    log.info(f"Loaded {len(registry)} models from GraphQL SDL")
    return registry


def load_models(paths: Path | list[Path]) -> ModelRegistry:
    """Load model descriptors from GraphQL files or directories of GraphQL files."""
    if isinstance(paths, Path):
        paths = [paths]

    sdl = "\n".join(load_schema_from_path(path) for path in paths)
    log.debug(f"Read model SDL from {len(paths)} path(s)")
    return load_models_from_sdl(sdl)
