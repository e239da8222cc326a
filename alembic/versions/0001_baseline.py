"""Baseline migration - users, sessions, people, entries, resources, content

Revision ID: 0001_baseline
Revises:
Create Date: 2026-10-19

Creates every table of the ministering schema.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

from ministering.db.types import StringList


# revision identifiers, used by Alembic.
revision: str = '0001_baseline'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def upgrade() -> None:
    """Create all tables."""

    # ==========================================================================
    # Sessions and users
    # ==========================================================================
    op.create_table(
        "sessions",
        sa.Column("sid", sa.String(128), primary_key=True),
        sa.Column("sess", sa.JSON(), nullable=False),
        sa.Column("expire", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("idx_session_expire", "sessions", ["expire"])

    op.create_table(
        "users",
        sa.Column("id", sa.String(255), primary_key=True),
        sa.Column("email", sa.String(255), unique=True, nullable=True),
        sa.Column("first_name", sa.String(255), nullable=True),
        sa.Column("last_name", sa.String(255), nullable=True),
        sa.Column("profile_image_url", sa.String(500), nullable=True),
        *_timestamps(),
    )

    # ==========================================================================
    # People and visits
    # ==========================================================================
    op.create_table(
        "ministered_persons",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "user_id",
            sa.String(255),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("family", sa.String(255), nullable=True),
        sa.Column("tags", StringList(), nullable=True),
        sa.Column("status", sa.String(20), server_default=sa.text("'active'"), nullable=False),
        *_timestamps(),
    )
    op.create_index(
        "idx_ministered_persons_user_updated", "ministered_persons", ["user_id", "updated_at"]
    )

    op.create_table(
        "ministering_entries",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "user_id",
            sa.String(255),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "person_id",
            sa.Integer(),
            sa.ForeignKey("ministered_persons.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("transcript", sa.Text(), nullable=False),
        sa.Column("summary", sa.Text(), nullable=True),
        sa.Column("followups", StringList(), nullable=True),
        sa.Column("scriptures", StringList(), nullable=True),
        sa.Column("talks", StringList(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("audio_url", sa.String(500), nullable=True),
        *_timestamps(),
    )
    op.create_index(
        "idx_ministering_entries_person_date", "ministering_entries", ["person_id", "date"]
    )
    op.create_index("idx_ministering_entries_user", "ministering_entries", ["user_id"])

    # ==========================================================================
    # Shared catalog and app copy
    # ==========================================================================
    op.create_table(
        "gospel_resources",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("author", sa.String(255), nullable=True),
        sa.Column("type", sa.String(20), nullable=False),
        sa.Column("url", sa.String(500), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("tags", StringList(), nullable=True),
        sa.Column("featured", sa.Boolean(), server_default=sa.text("false"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )

    op.create_table(
        "app_content",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("key", sa.String(100), unique=True, nullable=False),
        sa.Column("title", sa.String(200), nullable=True),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("content_type", sa.String(50), server_default=sa.text("'text'"), nullable=False),
        sa.Column("is_active", sa.Boolean(), server_default=sa.text("true"), nullable=False),
        sa.Column("category", sa.String(50), nullable=True),
        sa.Column("sort_order", sa.Integer(), server_default=sa.text("0"), nullable=False),
        *_timestamps(),
    )

    op.create_table(
        "app_settings",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("key", sa.String(100), unique=True, nullable=False),
        sa.Column("value", sa.Text(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("category", sa.String(50), nullable=True),
        sa.Column("is_public", sa.Boolean(), server_default=sa.text("false"), nullable=False),
        *_timestamps(),
    )


def downgrade() -> None:
    op.drop_table("app_settings")
    op.drop_table("app_content")
    op.drop_table("gospel_resources")
    op.drop_index("idx_ministering_entries_user", table_name="ministering_entries")
    op.drop_index("idx_ministering_entries_person_date", table_name="ministering_entries")
    op.drop_table("ministering_entries")
    op.drop_index("idx_ministered_persons_user_updated", table_name="ministered_persons")
    op.drop_table("ministered_persons")
    op.drop_table("users")
    op.drop_index("idx_session_expire", table_name="sessions")
    op.drop_table("sessions")
