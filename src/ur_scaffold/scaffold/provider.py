"""Scaffold provider -- named registrations resolved to lazy singletons.

The provider is an explicit object owned by the application root rather
than module state, so tests and separate app instances never share
scaffolds.  ``reset()`` drops live instances, ``clear()`` drops
registrations too.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from ur_scaffold.errors import ConfigurationError, ScaffoldNotFoundError
from ur_scaffold.model.models import Model
from ur_scaffold.model.registry import ModelRegistry
from ur_scaffold.scaffold.models import ScaffoldOptions
from ur_scaffold.scaffold.pagination import PaginatedScaffold
from ur_scaffold.scaffold.scaffold import Scaffold
from ur_scaffold.telemetry import NoOpTelemetrySink, TelemetrySink
from ur_scaffold.transport.base import HttpTransport

logger = logging.getLogger(__name__)


def _build_options(
    name: str, options: Mapping[str, Any] | ScaffoldOptions | None, overrides: dict[str, Any]
) -> ScaffoldOptions:
    if isinstance(options, ScaffoldOptions) and not overrides:
        return options
    if isinstance(options, ScaffoldOptions):
        data = options.model_dump()
        data["model"] = options.model
    else:
        data = dict(options or {})
    data.update(overrides)
    try:
        return ScaffoldOptions(**data)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid options for scaffold {name!r}: {exc}") from exc


class ScaffoldProvider:
    def __init__(
        self,
        models: ModelRegistry,
        transport: HttpTransport,
        *,
        telemetry_sink: TelemetrySink | None = None,
    ) -> None:
        self.models = models
        self.transport = transport
        self.telemetry = telemetry_sink or NoOpTelemetrySink()
        self._options: dict[str, ScaffoldOptions] = {}
        self._instances: dict[str, Scaffold] = {}

    def register(
        self,
        name: str,
        options: Mapping[str, Any] | ScaffoldOptions | None = None,
        **overrides: Any,
    ) -> ScaffoldProvider:
        """Register *name* with ``model``/``query``/``paginate`` options.

        Options may be given as a mapping, as keywords, or both (keywords
        win).  Re-registering replaces the options and drops the cached
        instance.  Returns the provider so calls can be chained.
        """
        self._options[name] = _build_options(name, options, overrides)
        if self._instances.pop(name, None) is not None:
            logger.debug("Dropped cached scaffold %s after re-registration", name)
        return self

    def resolve(
        self,
        name: str,
        options: Mapping[str, Any] | ScaffoldOptions | None = None,
        **overrides: Any,
    ) -> Scaffold:
        """Return the scaffold for *name*, creating it (and its first fetch) lazily.

        Passing options registers or updates the scaffold first.  Must be
        called with a running event loop.

        Raises:
            ScaffoldNotFoundError: *name* was never registered and no
                options were given.
            ModelNotFoundError: the scaffold's model is not defined.
        """
        if options is not None or overrides:
            wanted = _build_options(name, options, overrides)
            if self._options.get(name) != wanted:
                self.register(name, wanted)

        instance = self._instances.get(name)
        if instance is not None:
            return instance

        registered = self._options.get(name)
        if registered is None:
            raise ScaffoldNotFoundError(name)

        instance = self._build(name, registered)
        self._instances[name] = instance
        return instance

    def _resolve_model(self, name: str, options: ScaffoldOptions) -> Model:
        if isinstance(options.model, Model):
            return options.model
        return self.models.resolve(options.model or name)

    def _build(self, name: str, options: ScaffoldOptions) -> Scaffold:
        model = self._resolve_model(name, options)
        logger.debug("Creating scaffold %s for model %s", name, model.name)
        if options.paginate is not None:
            return PaginatedScaffold(
                name,
                model,
                self.transport,
                query=options.query,
                limit=options.paginate.limit,
                page=options.paginate.page,
                telemetry_sink=self.telemetry,
            )
        return Scaffold(
            name,
            model,
            self.transport,
            query=options.query,
            telemetry_sink=self.telemetry,
        )

    def get(self, name: str) -> Scaffold | None:
        """Return the live instance for *name* without creating it."""
        return self._instances.get(name)

    def options(self, name: str) -> ScaffoldOptions | None:
        return self._options.get(name)

    def names(self) -> list[str]:
        return list(self._options)

    def reset(self) -> None:
        self._instances.clear()

    def clear(self) -> None:
        self._instances.clear()
        self._options.clear()

    def __contains__(self, name: object) -> bool:
        return name in self._options
