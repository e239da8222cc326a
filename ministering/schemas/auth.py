"""Authentication-related Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel

from ministering.schemas.common import CamelModel


class UserSession(BaseModel):
    """
    Session context for authenticated requests.

    `user_id` is the identity provider's subject claim; every storage call
    is scoped by it.
    """
    sid: str
    user_id: str
    email: str | None = None
    claims: dict = {}


class UserRead(CamelModel):
    """Response schema for GET /api/auth/user."""
    id: str
    email: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    profile_image_url: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
