"""Pydantic models for remote resources and their default queries."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

Scalar = str | int | float | bool | None
QueryMapping = dict[str, Scalar]


class _StrictModel(BaseModel):
    """Shared strict model settings for registry contracts."""

    model_config = ConfigDict(extra="forbid", validate_assignment=True)


def _normalize_query(query: QueryMapping) -> QueryMapping:
    """Trim keys and drop empty ones while preserving insertion order."""
    normalized: QueryMapping = {}
    for key, value in query.items():
        cleaned = key.strip()
        if cleaned:
            normalized[cleaned] = value
    return normalized


class Model(_StrictModel):
    """A named remote resource: its base endpoint and default query.

    Models are frozen once built; scaffolds hold a reference and never
    mutate it.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str
    url: str
    defaults: QueryMapping = Field(default_factory=dict)

    @field_validator("name", "url")
    @classmethod
    def normalize_text(cls, value: str) -> str:
        cleaned = value.strip()
        if not cleaned:
            raise ValueError("must not be empty")
        return cleaned

    @field_validator("defaults")
    @classmethod
    def normalize_defaults(cls, value: QueryMapping) -> QueryMapping:
        return _normalize_query(value)
