"""Pydantic schemas for editable app content and settings."""

from datetime import datetime

from pydantic import Field

from ministering.db.enums import ContentType
from ministering.schemas.common import CamelModel


class ContentCreate(CamelModel):
    key: str = Field(..., min_length=1, max_length=100)
    title: str | None = Field(default=None, max_length=200)
    content: str
    content_type: ContentType = ContentType.TEXT
    is_active: bool = True
    category: str | None = Field(default=None, max_length=50)
    sort_order: int = 0


class ContentUpdate(CamelModel):
    title: str | None = Field(default=None, max_length=200)
    content: str | None = None
    content_type: ContentType | None = None
    is_active: bool | None = None
    category: str | None = Field(default=None, max_length=50)
    sort_order: int | None = None


class ContentRead(CamelModel):
    id: int
    key: str
    title: str | None = None
    content: str
    content_type: str
    is_active: bool
    category: str | None = None
    sort_order: int
    created_at: datetime
    updated_at: datetime


class SettingCreate(CamelModel):
    key: str = Field(..., min_length=1, max_length=100)
    value: str
    description: str | None = None
    category: str | None = Field(default=None, max_length=50)
    is_public: bool = False


class SettingUpdate(CamelModel):
    value: str | None = None
    description: str | None = None
    category: str | None = Field(default=None, max_length=50)
    is_public: bool | None = None


class PublicSettingRead(CamelModel):
    """Setting as exposed to clients. Only public rows are ever serialized."""

    key: str
    value: str
    description: str | None = None
    category: str | None = None
