"""YAML configuration loading. Files starting with underscore are skipped.

A configuration file holds two optional maps::

    models:
      Dogs:
        url: http://api/dogs
        query: {active: true}
      Cats: http://api/cats

    scaffolds:
      Dogs: {}
      Boxers:
        model: Dogs
        query: {breed: boxer}
        paginate: {limit: 20}
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from ur_scaffold.errors import ConfigurationError
from ur_scaffold.model.models import Model
from ur_scaffold.model.registry import ModelRegistry
from ur_scaffold.scaffold.models import ScaffoldOptions
from ur_scaffold.scaffold.provider import ScaffoldProvider

logger = logging.getLogger(__name__)


def load_config_directory(
    directory: str | Path,
    models: ModelRegistry,
    provider: ScaffoldProvider | None = None,
) -> tuple[int, int]:
    """Load every YAML file under *directory*. Returns (models, scaffolds) loaded."""
    directory = Path(directory)
    if not directory.is_dir():
        logger.warning("Config directory does not exist: %s", directory)
        return 0, 0

    model_count = scaffold_count = 0
    for path in sorted(directory.rglob("*.yaml")):
        if path.name.startswith("_"):
            continue
        try:
            loaded_models, loaded_scaffolds = load_config_file(path, models, provider)
        except (yaml.YAMLError, OSError, ConfigurationError) as exc:
            logger.exception("Failed to load config from %s: %s", path, exc)
            continue
        model_count += loaded_models
        scaffold_count += loaded_scaffolds
    return model_count, scaffold_count


def load_config_file(
    path: str | Path,
    models: ModelRegistry,
    provider: ScaffoldProvider | None = None,
) -> tuple[int, int]:
    """Load one YAML file. Nothing is registered unless the whole file validates."""
    with open(path, encoding="utf-8") as f:
        data: Any = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"{path}: expected a mapping at the top level")

    model_defs = _section(data, "models", path)
    scaffold_defs = _section(data, "scaffolds", path)
    if scaffold_defs and provider is None:
        raise ConfigurationError(f"{path}: scaffold definitions need a ScaffoldProvider")

    new_models = [
        _parse_model(str(name), definition, path) for name, definition in model_defs.items()
    ]
    for model in new_models:
        if model.name in models:
            raise ConfigurationError(f"{path}: Duplicate model registered: {model.name!r}")
    new_scaffolds = [
        (str(name), _parse_scaffold(str(name), definition, path))
        for name, definition in scaffold_defs.items()
    ]

    for model in new_models:
        models.add(model)
    for name, options in new_scaffolds:
        provider.register(name, options)

    return len(new_models), len(new_scaffolds)


def _parse_model(name: str, definition: Any, path: str | Path) -> Model:
    if isinstance(definition, str):
        definition = {"url": definition}
    if not isinstance(definition, dict) or "url" not in definition:
        raise ConfigurationError(f"{path}: model {name!r} needs a url")
    try:
        return Model(name=name, url=definition["url"], defaults=definition.get("query") or {})
    except ValidationError as exc:
        raise ConfigurationError(f"{path}: Invalid model {name!r}: {exc}") from exc


def _parse_scaffold(name: str, definition: Any, path: str | Path) -> ScaffoldOptions:
    definition = definition or {}
    if not isinstance(definition, dict):
        raise ConfigurationError(f"{path}: scaffold {name!r} must be a mapping")
    try:
        return ScaffoldOptions.model_validate(definition)
    except ValidationError as exc:
        raise ConfigurationError(f"{path}: Invalid options for scaffold {name!r}: {exc}") from exc


def _section(data: dict[str, Any], key: str, path: str | Path) -> dict[str, Any]:
    section = data.get(key) or {}
    if not isinstance(section, dict):
        raise ConfigurationError(f"{path}: {key!r} must be a mapping")
    return section
