"""Pydantic schemas for gospel resources."""

from datetime import datetime

from pydantic import Field

from ministering.db.enums import ResourceType
from ministering.schemas.common import CamelModel


class ResourceCreate(CamelModel):
    """Request to add a curated resource."""

    title: str = Field(..., min_length=1, max_length=255)
    author: str | None = Field(default=None, max_length=255)
    type: ResourceType
    url: str | None = Field(default=None, max_length=500)
    description: str | None = None
    tags: list[str] | None = None
    featured: bool = False


class ResourceRead(CamelModel):
    """Resource response."""

    id: int
    title: str
    author: str | None = None
    type: str
    url: str | None = None
    description: str | None = None
    tags: list[str] | None = None
    featured: bool
    created_at: datetime
