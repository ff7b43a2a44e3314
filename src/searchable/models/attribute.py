"""Searchable attribute: One column an aspect searches and how it matches."""

from __future__ import annotations

from collections.abc import Iterable

from pydantic import BaseModel, ConfigDict, Field


class SearchableAttribute(BaseModel):
    """A column name plus its matching mode.

    Partial attributes match case-insensitive substrings; exact attributes
    match the whole value, case-sensitively.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1, description="Mapped attribute (column) name")
    partial: bool = Field(default=True, description="Substring match when true, equality when false")

    @classmethod
    def create(cls, name: str, partial: bool = True) -> SearchableAttribute:
        return cls(name=name, partial=partial)

    @classmethod
    def create_exact(cls, name: str) -> SearchableAttribute:
        return cls(name=name, partial=False)

    @classmethod
    def create_many(cls, names: Iterable[str]) -> list[SearchableAttribute]:
        return [cls.create(name) for name in names]
