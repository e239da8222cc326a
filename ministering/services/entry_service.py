"""Entry service - recorded visits, scoped to their owner."""

import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from ministering.db.models import MinisteringEntry, utc_now
from ministering.schemas.entry import EntryCreate, EntryUpdate

logger = logging.getLogger(__name__)


def get_entries_for_person(
    db: Session, person_id: int, user_id: str
) -> list[MinisteringEntry]:
    """Entries for a person, newest visit date first."""
    stmt = (
        select(MinisteringEntry)
        .where(
            MinisteringEntry.person_id == person_id,
            MinisteringEntry.user_id == user_id,
        )
        .order_by(MinisteringEntry.date.desc(), MinisteringEntry.id.desc())
    )
    return list(db.scalars(stmt).all())


def get_entry(db: Session, entry_id: int, user_id: str) -> MinisteringEntry | None:
    """Get an entry by ID (owner-scoped)."""
    stmt = select(MinisteringEntry).where(
        MinisteringEntry.id == entry_id,
        MinisteringEntry.user_id == user_id,
    )
    return db.scalars(stmt).first()


def create_entry(db: Session, user_id: str, data: EntryCreate) -> MinisteringEntry:
    """
    Persist a visit. The caller has already verified that `data.person_id`
    belongs to `user_id`. Missing `date` defaults to now.
    """
    entry = MinisteringEntry(
        user_id=user_id,
        person_id=data.person_id,
        date=data.date or utc_now(),
        transcript=data.transcript,
        summary=data.summary,
        followups=list(data.followups),
        scriptures=list(data.scriptures),
        talks=list(data.talks),
        notes=data.notes,
        audio_url=data.audio_url,
    )
    db.add(entry)
    db.commit()
    db.refresh(entry)
    logger.info("Saved entry %s for person %s", entry.id, data.person_id)
    return entry


def update_entry(
    db: Session, entry_id: int, user_id: str, data: EntryUpdate
) -> MinisteringEntry | None:
    """
    Update entry fields.

    Uses exclude_unset=True so only explicitly provided fields are updated.
    The transcript and person are fixed once saved.
    """
    entry = get_entry(db, entry_id, user_id)
    if entry is None:
        return None

    for field, value in data.model_dump(exclude_unset=True).items():
        if value is None and field == "date":
            continue
        setattr(entry, field, value)
    entry.updated_at = utc_now()

    db.commit()
    db.refresh(entry)
    return entry


def delete_entry(db: Session, entry_id: int, user_id: str) -> bool:
    entry = get_entry(db, entry_id, user_id)
    if entry is None:
        return False
    db.delete(entry)
    db.commit()
    return True
