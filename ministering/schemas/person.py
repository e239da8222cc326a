"""Pydantic schemas for ministered persons."""

from datetime import datetime

from pydantic import Field

from ministering.db.enums import PersonStatus
from ministering.schemas.common import CamelModel


class PersonCreate(CamelModel):
    """Request to add a person or family."""

    name: str = Field(..., min_length=1, max_length=255)
    family: str | None = Field(default=None, max_length=255)
    tags: list[str] | None = None
    status: PersonStatus = PersonStatus.ACTIVE


class PersonUpdate(CamelModel):
    """Partial update; only fields present in the body are changed."""

    name: str | None = Field(default=None, min_length=1, max_length=255)
    family: str | None = Field(default=None, max_length=255)
    tags: list[str] | None = None
    status: PersonStatus | None = None


class PersonRead(CamelModel):
    """Person response."""

    id: int
    user_id: str
    name: str
    family: str | None = None
    tags: list[str] | None = None
    status: str
    created_at: datetime
    updated_at: datetime


class PersonListItem(PersonRead):
    """Person with a preview of the most recent visit."""

    last_entry_preview: str = ""
    last_contact: datetime | None = None
    total_entries: int = 0
