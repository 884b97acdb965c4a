from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from app.models.employee import CamelModel


class ItemCreate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str = Field(min_length=1)
    description: str = ""
    price: float = Field(default=0, ge=0)
    tags: list[str] = []


class ItemUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(default=None, min_length=1)
    description: str | None = None
    price: float | None = Field(default=None, ge=0)
    tags: list[str] | None = None


class Item(CamelModel):
    id: str
    name: str
    description: str = ""
    price: float = 0
    tags: list[str] = []
    created_at: datetime
    updated_at: datetime


class ItemPage(BaseModel):
    data: list[Item]
    total: int
    page: int
    limit: int
