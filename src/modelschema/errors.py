"""
Exceptions raised while turning model metadata into JSON Schema.

Exception Hierarchy:
    ModelSchemaError (base)
    ├── InvalidModelError (model has nothing to convert, or inconsistent metadata)
    ├── UnsupportedTypeError (property type without a schema mapping)
    └── UnresolvedRelationError (target model metadata missing)
"""


class ModelSchemaError(ValueError):
    """Base exception for all modelschema errors."""


class InvalidModelError(ModelSchemaError):
    """Raised when a model cannot be converted as declared."""

    def __init__(self, model_name: str, reason: str) -> None:
        self.model_name = model_name
        self.reason = reason
        super().__init__(f"Invalid model '{model_name}': {reason}")


class UnsupportedTypeError(ModelSchemaError):
    """Raised when a property's declared type has no JSON Schema mapping."""

    def __init__(self, model_name: str, property_name: str, declared_type: object) -> None:
        self.model_name = model_name
        self.property_name = property_name
        self.declared_type = declared_type
        super().__init__(
            f"Property '{model_name}.{property_name}' has unsupported type {declared_type!r}"
        )


class UnresolvedRelationError(ModelSchemaError):
    """Raised when the target model of a relation or reference cannot be resolved."""

    def __init__(self, target: str, reason: str) -> None:
        self.target = target
        super().__init__(f"Cannot resolve target model '{target}': {reason}")
