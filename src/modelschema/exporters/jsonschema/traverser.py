"""
Graph traversal utilities for model reference analysis.
"""

from collections import Counter

from modelschema import log
from modelschema.metadata import ArrayType, ModelDescriptor, ModelRef, PropertyType, RelationDescriptor

WITH_RELATIONS_SUFFIX = "WithRelations"


def get_schema_name(model: ModelDescriptor, include_relations: bool) -> str:
    """Name of the schema generated for a model, used as title and definitions key."""
    return f"{model.name}{WITH_RELATIONS_SUFFIX}" if include_relations else model.name


def get_exposed_relations(model: ModelDescriptor) -> list[RelationDescriptor]:
    """
    Get the relations that add a property to the model's relation-aware schema.

    A declared property, or an earlier relation, of the same name shadows the relation.

    Args:
        model: The model whose relations are inspected

    Returns:
        list[RelationDescriptor]: Relations in declaration order, shadowed ones left out
    """
    taken = set(model.effective_properties())
    exposed = []
    for relation in model.effective_relations():
        if relation.name in taken:
            log.debug(f"Relation '{model.name}.{relation.name}' shadowed by a property of the same name")
            continue
        taken.add(relation.name)
        exposed.append(relation)
    return exposed


def is_leaf_model(model: ModelDescriptor, include_relations: bool) -> bool:
    """
    Check whether a model's schema references no other model.

    Args:
        model: The model to check
        include_relations: Whether relations contribute properties

    Returns:
        bool: True if no property (and no relation, when included) points at another model
    """
    if include_relations and get_exposed_relations(model):
        return False
    return not any(_references_model(prop.type) for prop in model.effective_properties().values())


def _references_model(property_type: PropertyType) -> bool:
    while isinstance(property_type, ArrayType):
        property_type = property_type.items
    return isinstance(property_type, ModelRef)


def count_model_references(
    root: ModelDescriptor, include_relations: bool
) -> tuple[Counter[str], dict[str, ModelDescriptor]]:
    """
    Count how often each model is referenced in the graph reachable from the root model.

    Args:
        root: The model to start traversal from
        include_relations: Whether relation targets count as references

    Returns:
        tuple: Reference counts per schema name, and the reached models per schema name
    """
    visited: set[str] = set()
    counts: Counter[str] = Counter()
    reached: dict[str, ModelDescriptor] = {}

    def visit_model(model: ModelDescriptor) -> None:
        schema_name = get_schema_name(model, include_relations)
        if schema_name in visited:
            return

        visited.add(schema_name)
        reached[schema_name] = model

        for prop in model.effective_properties().values():
            visit_property_type(prop.type)

        if include_relations:
            for relation in get_exposed_relations(model):
                visit_reference(relation.resolve_target())

    def visit_property_type(property_type: PropertyType) -> None:
        if isinstance(property_type, ArrayType):
            visit_property_type(property_type.items)
        elif isinstance(property_type, ModelRef):
            visit_reference(property_type.resolve())

    def visit_reference(model: ModelDescriptor) -> None:
        counts[get_schema_name(model, include_relations)] += 1
        visit_model(model)

    visit_model(root)

    log.debug(f"Found {len(reached) - 1} models referenced from '{root.name}'")
    return counts, reached


def find_inlineable_models(root: ModelDescriptor, include_relations: bool) -> set[str]:
    """
    Find the models that can be inlined instead of referenced through definitions.

    A model is inlineable when it is a leaf and referenced exactly once; shared
    models keep a single definitions entry.

    Args:
        root: The top-level model
        include_relations: Whether relations contribute properties

    Returns:
        set[str]: Schema names of inlineable models
    """
    counts, reached = count_model_references(root, include_relations)
    root_name = get_schema_name(root, include_relations)

    return {
        schema_name
        for schema_name, model in reached.items()
        if schema_name != root_name and counts[schema_name] == 1 and is_leaf_model(model, include_relations)
    }
