"""App definition document: the JSON stored in an APP model's editor field."""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class AppModelDefinition(BaseModel):
    model_config = ConfigDict(
        extra="ignore", populate_by_name=True, protected_namespaces=(), coerce_numbers_to_str=True
    )

    id: int | None = None
    name: str | None = None
    version: int | None = None
    model_type: int | None = Field(default=None, alias="modelType")
    description: str | None = None
    created_by: str | None = Field(default=None, alias="createdBy")
    last_updated_by: str | None = Field(default=None, alias="lastUpdatedBy")


class AppDefinition(BaseModel):
    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    models: list[AppModelDefinition] | None = None
    theme: str | None = None
    icon: str | None = None
