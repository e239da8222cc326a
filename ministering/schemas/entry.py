"""Pydantic schemas for ministering entries."""

from datetime import datetime

from pydantic import Field, field_validator

from ministering.schemas.common import CamelModel


class EntryCreate(CamelModel):
    """Body of POST /api/save_entry. `date` defaults to now when absent."""

    person_id: int
    date: datetime | None = None
    transcript: str
    summary: str | None = None
    followups: list[str] = Field(default_factory=list)
    scriptures: list[str] = Field(default_factory=list)
    talks: list[str] = Field(default_factory=list)
    notes: str | None = None
    audio_url: str | None = Field(default=None, max_length=500)

    @field_validator("date", mode="before")
    @classmethod
    def _blank_date_is_missing(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value


class EntryUpdate(CamelModel):
    """Partial update of a saved entry. List fields are replaced wholesale."""

    date: datetime | None = None
    summary: str | None = None
    followups: list[str] | None = None
    scriptures: list[str] | None = None
    talks: list[str] | None = None
    notes: str | None = None
    audio_url: str | None = Field(default=None, max_length=500)


class EntryRead(CamelModel):
    """Entry response."""

    id: int
    user_id: str
    person_id: int
    date: datetime
    transcript: str
    summary: str | None = None
    followups: list[str] | None = None
    scriptures: list[str] | None = None
    talks: list[str] | None = None
    notes: str | None = None
    audio_url: str | None = None
    created_at: datetime
    updated_at: datetime
