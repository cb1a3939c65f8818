"""Model registry -- name to ``Model`` lookup used when resolving scaffolds."""

from __future__ import annotations

import logging

from pydantic import ValidationError

from ur_scaffold.errors import ConfigurationError, ModelNotFoundError
from ur_scaffold.model.models import Model, QueryMapping

logger = logging.getLogger(__name__)


class ModelRegistry:
    """In-memory registry of remote resource definitions."""

    def __init__(self) -> None:
        self._models: dict[str, Model] = {}

    def define(
        self, name: str, url: str, query: QueryMapping | None = None
    ) -> ModelRegistry:
        """Register a model and return the registry so calls can be chained.

        Raises ConfigurationError if the name is taken or the definition
        does not validate.
        """
        try:
            model = Model(name=name, url=url, defaults=query or {})
        except ValidationError as exc:
            raise ConfigurationError(f"Invalid model {name!r}: {exc}") from exc
        return self.add(model)

    def add(self, model: Model) -> ModelRegistry:
        if model.name in self._models:
            raise ConfigurationError(f"Duplicate model registered: {model.name!r}")
        self._models[model.name] = model
        logger.debug("Defined model %s -> %s", model.name, model.url)
        return self

    def resolve(self, name: str) -> Model:
        model = self._models.get(name)
        if model is None:
            raise ModelNotFoundError(name)
        return model

    def get(self, name: str) -> Model | None:
        return self._models.get(name)

    def all(self) -> list[Model]:
        return list(self._models.values())

    def __contains__(self, name: object) -> bool:
        return name in self._models
