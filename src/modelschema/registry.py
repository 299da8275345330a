from collections.abc import Callable, Iterable, Iterator
from functools import partial

from modelschema import log
from modelschema.errors import InvalidModelError, UnresolvedRelationError
from modelschema.metadata import ModelDescriptor


class ModelRegistry:
    """
    Name-indexed collection of model descriptors.

    Models that reference each other are registered one by one and point at
    each other through ``ref(name)``, which is only resolved when the exporter
    walks the reference.
    """

    def __init__(self, models: Iterable[ModelDescriptor] = ()) -> None:
        self._models: dict[str, ModelDescriptor] = {}
        for model in models:
            self.register(model)

    def register(self, model: ModelDescriptor) -> ModelDescriptor:
        """
        Register a model under its name.

        Args:
            model: The model descriptor to register

        Returns:
            ModelDescriptor: The registered model

        Raises:
            InvalidModelError: If another model is already registered under the same name
        """
        if model.name in self._models:
            raise InvalidModelError(model.name, "a model with this name is already registered")
        self._models[model.name] = model
        log.debug(f"Registered model: {model.name}")
        return model

    def get(self, name: str) -> ModelDescriptor:
        try:
            return self._models[name]
        except KeyError:
            raise UnresolvedRelationError(name, "no model registered under this name") from None

    def ref(self, name: str) -> Callable[[], ModelDescriptor]:
        """Return a lazy target resolving ``name`` against this registry."""
        return partial(self.get, name)

    def names(self) -> list[str]:
        return list(self._models)

    def __contains__(self, name: object) -> bool:
        return name in self._models

    def __iter__(self) -> Iterator[ModelDescriptor]:
        return iter(self._models.values())

    def __len__(self) -> int:
        return len(self._models)
