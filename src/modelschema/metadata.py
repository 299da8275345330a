"""Model metadata descriptors consumed by the JSON Schema exporter.

Descriptors are immutable. Circular model graphs are expressed with lazy
targets: a zero-argument callable that returns the target ``ModelDescriptor``
when the exporter asks for it.
"""

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from types import MappingProxyType
from typing import Any, TypeAlias, Union

from modelschema.errors import InvalidModelError, UnresolvedRelationError

PYTHON_TYPE_TO_KIND: dict[type, str] = {
    str: "string",
    int: "integer",
    float: "number",
    bool: "boolean",
    dict: "object",
    datetime: "date",
    date: "date",
}


@dataclass(frozen=True)
class ScalarType:
    """A scalar property type.

    Args:
        kind: JSON-ish type name, e.g. ``string``, ``number``, ``date``
        enum: allowed values, if the scalar is an enumeration
    """

    kind: str
    enum: tuple[str, ...] | None = None

    @classmethod
    def from_python(cls, python_type: type) -> "ScalarType":
        """Build a scalar type from a Python type such as ``str`` or ``float``.

        Types without a known kind keep their lowercase name, which the
        exporter later reports as unsupported.
        """
        return cls(PYTHON_TYPE_TO_KIND.get(python_type, python_type.__name__.lower()))


@dataclass(frozen=True)
class ArrayType:
    """An array property type whose items are of another property type."""

    items: "PropertyType"


@dataclass(frozen=True, eq=False)
class ModelRef:
    """A property type referencing another model."""

    target: "ModelTarget"

    def resolve(self) -> "ModelDescriptor":
        return resolve_model(self.target)


@dataclass(frozen=True)
class PropertyDescriptor:
    """A single declared property of a model.

    Args:
        name: property name
        type: the property type (scalar, array or model reference)
        id: whether the property is (part of) the model identifier
        required: whether the property must be present
        description: human readable description
        json_schema: extra JSON Schema keywords merged into the generated fragment
    """

    name: str
    type: "PropertyType"
    id: bool = False
    required: bool = False
    description: str | None = None
    json_schema: Mapping[str, Any] | None = None


class RelationType(str, Enum):
    BELONGS_TO = "belongsTo"
    HAS_MANY = "hasMany"


@dataclass(frozen=True, eq=False)
class RelationDescriptor:
    """A relation between two models.

    For ``belongsTo`` the foreign key is a property of the source model, for
    ``hasMany`` it is a property of the target model.

    Args:
        type: relation kind
        name: name of the navigation property exposing the related model(s)
        target: the related model, or a resolver returning it
        foreign_key: name of the foreign-key property
        key_type: type of the foreign key, inferred from the target identifier if omitted
    """

    type: RelationType
    name: str
    target: "ModelTarget"
    foreign_key: str
    key_type: "PropertyType | None" = None

    @property
    def targets_many(self) -> bool:
        return self.type == RelationType.HAS_MANY

    def resolve_target(self) -> "ModelDescriptor":
        return resolve_model(self.target)


@dataclass(frozen=True, eq=False)
class ModelDescriptor:
    """Structural description of a model: its properties, relations and base model.

    Args:
        name: model name, unique within a conversion
        properties: declared properties, in declaration order
        relations: declared relations
        base: the model this one inherits properties and relations from
        description: human readable description
        strict: when set, rendered as ``additionalProperties: not strict``
    """

    name: str
    properties: Sequence[PropertyDescriptor] = ()
    relations: Sequence[RelationDescriptor] = ()
    base: "ModelDescriptor | None" = None
    description: str | None = None
    strict: bool | None = None
    _property_map: Mapping[str, PropertyDescriptor] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        if not self.name:
            raise InvalidModelError(repr(self.name), "model name must not be empty")

        property_map: dict[str, PropertyDescriptor] = {}
        for prop in self.properties:
            if prop.name in property_map:
                raise InvalidModelError(self.name, f"duplicate property '{prop.name}'")
            property_map[prop.name] = prop

        # Frozen dataclass: bypass __setattr__ to store the normalized fields
        object.__setattr__(self, "properties", tuple(self.properties))
        object.__setattr__(self, "relations", tuple(self.relations))
        object.__setattr__(self, "_property_map", MappingProxyType(property_map))

    def declared_properties(self) -> dict[str, PropertyDescriptor]:
        """Return inherited and own properties, base model first.

        Own declarations override inherited ones of the same name but keep the
        inherited position.
        """
        inherited = self.base.declared_properties() if self.base is not None else {}
        inherited.update(self._property_map)
        return inherited

    def effective_relations(self) -> tuple[RelationDescriptor, ...]:
        inherited = self.base.effective_relations() if self.base is not None else ()
        return inherited + tuple(self.relations)

    def effective_properties(self) -> dict[str, PropertyDescriptor]:
        """Return declared properties plus foreign keys implied by belongs-to relations."""
        properties = self.declared_properties()
        for relation in self.effective_relations():
            if relation.type != RelationType.BELONGS_TO or relation.foreign_key in properties:
                continue
            properties[relation.foreign_key] = PropertyDescriptor(
                name=relation.foreign_key,
                type=self._foreign_key_type(relation),
            )
        return properties

    def identifier_property(self) -> PropertyDescriptor | None:
        return next((prop for prop in self.declared_properties().values() if prop.id), None)

    def has_content(self) -> bool:
        return bool(self.declared_properties() or self.effective_relations())

    def _foreign_key_type(self, relation: RelationDescriptor) -> "PropertyType":
        if relation.key_type is not None:
            return relation.key_type

        target = relation.resolve_target()
        identifier = target.identifier_property()
        if identifier is None:
            raise InvalidModelError(
                self.name,
                f"cannot infer type of foreign key '{relation.foreign_key}': "
                f"model '{target.name}' declares no identifier property",
            )
        return identifier.type


PropertyType: TypeAlias = ScalarType | ArrayType | ModelRef
ModelTarget: TypeAlias = Union[ModelDescriptor, Callable[[], ModelDescriptor]]


def resolve_model(target: ModelTarget) -> ModelDescriptor:
    """Resolve a model target to its descriptor.

    Args:
        target: a descriptor, or a zero-argument callable returning one

    Returns:
        The resolved ModelDescriptor

    Raises:
        UnresolvedRelationError: If the resolver fails or returns something else
    """
    if isinstance(target, ModelDescriptor):
        return target

    if not callable(target):
        raise UnresolvedRelationError(repr(target), "expected a model descriptor or a resolver")

    target_name = getattr(target, "__name__", repr(target))
    try:
        resolved = target()
    except (NameError, LookupError) as e:
        raise UnresolvedRelationError(target_name, str(e)) from e

    if not isinstance(resolved, ModelDescriptor):
        raise UnresolvedRelationError(target_name, f"resolver returned {type(resolved).__name__}")
    return resolved


def belongs_to(
    target: ModelTarget,
    foreign_key: str,
    name: str | None = None,
    key_type: PropertyType | None = None,
    *,
    source: str | None = None,
) -> RelationDescriptor:
    """Declare a belongs-to relation.

    The relation name defaults to the foreign key without its ``Id`` suffix,
    e.g. ``categoryId`` -> ``category``. ``source`` names the declaring model
    in error messages.

    Raises:
        InvalidModelError: If no name is given and the foreign key has no ``Id`` suffix
    """
    if name is None:
        if not foreign_key.endswith("Id") or len(foreign_key) <= 2:
            raise InvalidModelError(
                source or "<unknown>",
                f"cannot derive a relation name from foreign key '{foreign_key}', pass name explicitly",
            )
        name = foreign_key[:-2]
    return RelationDescriptor(RelationType.BELONGS_TO, name, target, foreign_key, key_type)


def has_many(target: ModelTarget, name: str, foreign_key: str) -> RelationDescriptor:
    """Declare a has-many relation; ``foreign_key`` is a property of the target model."""
    return RelationDescriptor(RelationType.HAS_MANY, name, target, foreign_key)
