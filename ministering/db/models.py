"""SQLAlchemy ORM models."""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import (
    JSON,
    Boolean,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    func,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ministering.db.base import Base
from ministering.db.enums import DEFAULT_PERSON_STATUS, ContentType
from ministering.db.types import StringList


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Session(Base):
    """
    Server-side login session.

    The cookie carries only the session id; the identity claims live in
    `sess` and are only trusted until `expire`.
    """

    __tablename__ = "sessions"
    __table_args__ = (Index("idx_session_expire", "expire"),)

    sid: Mapped[str] = mapped_column(String(128), primary_key=True)
    sess: Mapped[dict] = mapped_column(JSON, nullable=False)
    expire: Mapped[datetime] = mapped_column(nullable=False)


class User(Base):
    """
    Application user.

    Identity is established by the OpenID Connect provider; `id` is the
    provider's stable subject claim. No passwords stored.
    """

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(255), primary_key=True)
    email: Mapped[str | None] = mapped_column(String(255), unique=True, nullable=True)
    first_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    last_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    profile_image_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        default=utc_now, server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        default=utc_now, server_default=func.now(), nullable=False
    )

    persons: Mapped[list[MinisteredPerson]] = relationship(
        back_populates="user", cascade="all, delete-orphan"
    )


class MinisteredPerson(Base):
    """A person or family being ministered to. Owned by exactly one user."""

    __tablename__ = "ministered_persons"
    __table_args__ = (
        Index("idx_ministered_persons_user_updated", "user_id", "updated_at"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(
        String(255), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    family: Mapped[str | None] = mapped_column(String(255), nullable=True)
    tags: Mapped[list[str] | None] = mapped_column(StringList, nullable=True)
    status: Mapped[str] = mapped_column(
        String(20),
        default=DEFAULT_PERSON_STATUS.value,
        server_default=text(f"'{DEFAULT_PERSON_STATUS.value}'"),
        nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(
        default=utc_now, server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        default=utc_now, server_default=func.now(), nullable=False
    )

    user: Mapped[User] = relationship(back_populates="persons")
    entries: Mapped[list[MinisteringEntry]] = relationship(
        back_populates="person", cascade="all, delete-orphan"
    )


class MinisteringEntry(Base):
    """
    One recorded visit.

    AI fields (summary, followups, scriptures, talks) are snapshots taken at
    save time; they are never recomputed.
    """

    __tablename__ = "ministering_entries"
    __table_args__ = (
        Index("idx_ministering_entries_person_date", "person_id", "date"),
        Index("idx_ministering_entries_user", "user_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(
        String(255), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    person_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("ministered_persons.id", ondelete="CASCADE"), nullable=False
    )
    date: Mapped[datetime] = mapped_column(nullable=False)
    transcript: Mapped[str] = mapped_column(Text, nullable=False)
    summary: Mapped[str | None] = mapped_column(Text, nullable=True)
    followups: Mapped[list[str] | None] = mapped_column(StringList, nullable=True)
    scriptures: Mapped[list[str] | None] = mapped_column(StringList, nullable=True)
    talks: Mapped[list[str] | None] = mapped_column(StringList, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    audio_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        default=utc_now, server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        default=utc_now, server_default=func.now(), nullable=False
    )

    person: Mapped[MinisteredPerson] = relationship(back_populates="entries")


class GospelResource(Base):
    """Curated talk, scripture, article or service idea. Global, not user-owned."""

    __tablename__ = "gospel_resources"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    author: Mapped[str | None] = mapped_column(String(255), nullable=True)
    type: Mapped[str] = mapped_column(String(20), nullable=False)
    url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    tags: Mapped[list[str] | None] = mapped_column(StringList, nullable=True)
    featured: Mapped[bool] = mapped_column(
        Boolean, default=False, server_default=text("false"), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        default=utc_now, server_default=func.now(), nullable=False
    )


class AppContent(Base):
    """Keyed, categorized copy shown by the client (landing, dashboard, ...)."""

    __tablename__ = "app_content"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    key: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    title: Mapped[str | None] = mapped_column(String(200), nullable=True)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    content_type: Mapped[str] = mapped_column(
        String(50),
        default=ContentType.TEXT.value,
        server_default=text(f"'{ContentType.TEXT.value}'"),
        nullable=False,
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean, default=True, server_default=text("true"), nullable=False
    )
    category: Mapped[str | None] = mapped_column(String(50), nullable=True)
    sort_order: Mapped[int] = mapped_column(
        Integer, default=0, server_default=text("0"), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        default=utc_now, server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        default=utc_now, server_default=func.now(), nullable=False
    )


class AppSetting(Base):
    """Keyed configuration value. Only `is_public` rows are exposed to clients."""

    __tablename__ = "app_settings"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    key: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    value: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    category: Mapped[str | None] = mapped_column(String(50), nullable=True)
    is_public: Mapped[bool] = mapped_column(
        Boolean, default=False, server_default=text("false"), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        default=utc_now, server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        default=utc_now, server_default=func.now(), nullable=False
    )
