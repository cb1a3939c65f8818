"""Pydantic models for scaffold registration options."""

from __future__ import annotations

from typing import Any

from pydantic import ConfigDict, Field, field_validator

from ur_scaffold.model.models import Model, QueryMapping, _normalize_query, _StrictModel


class PaginateOptions(_StrictModel):
    """Paging configuration.

    ``limit=None`` sends no ``limit`` parameter; ``page`` is the page the
    first fetch asks for.
    """

    limit: int | None = Field(default=None, gt=0)
    page: int = Field(default=1, ge=1)


class ScaffoldOptions(_StrictModel):
    """Options accepted by ``ScaffoldProvider.register``.

    ``paginate`` accepts ``True``/``False``, a mapping with ``limit`` or a
    ``PaginateOptions``; it is normalised to ``PaginateOptions | None``.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    model: Model | str | None = None
    query: QueryMapping = Field(default_factory=dict)
    paginate: PaginateOptions | None = None

    @field_validator("model", mode="before")
    @classmethod
    def normalize_model(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip() or None
        return value

    @field_validator("query", mode="before")
    @classmethod
    def default_query(cls, value: Any) -> Any:
        return {} if value is None else value

    @field_validator("query")
    @classmethod
    def normalize_query(cls, value: QueryMapping) -> QueryMapping:
        return _normalize_query(value)

    @field_validator("paginate", mode="before")
    @classmethod
    def normalize_paginate(cls, value: Any) -> Any:
        if value is None or value is False:
            return None
        if value is True:
            return PaginateOptions()
        return value
