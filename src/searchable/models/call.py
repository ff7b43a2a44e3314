"""Deferred call model."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class DeferredCall(BaseModel):
    """A builder method invocation recorded for later replay."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    method: str = Field(min_length=1, description="Name of the builder method to invoke")
    args: tuple[Any, ...] = Field(default=(), description="Positional arguments")
    kwargs: dict[str, Any] = Field(default_factory=dict, description="Keyword arguments")
