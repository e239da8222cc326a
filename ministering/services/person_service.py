"""Person service - people and families ministered to, scoped to their owner."""

import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from ministering.db.models import MinisteredPerson, utc_now
from ministering.schemas.person import PersonCreate, PersonListItem, PersonRead, PersonUpdate

logger = logging.getLogger(__name__)

PREVIEW_LENGTH = 100


def get_ministered_persons(db: Session, user_id: str) -> list[MinisteredPerson]:
    """All people owned by the user, most recently updated first."""
    stmt = (
        select(MinisteredPerson)
        .where(MinisteredPerson.user_id == user_id)
        .order_by(MinisteredPerson.updated_at.desc(), MinisteredPerson.id.desc())
    )
    return list(db.scalars(stmt).all())


def get_ministered_person(
    db: Session, person_id: int, user_id: str
) -> MinisteredPerson | None:
    """Get a person by ID (owner-scoped). None when absent or owned by someone else."""
    stmt = select(MinisteredPerson).where(
        MinisteredPerson.id == person_id,
        MinisteredPerson.user_id == user_id,
    )
    return db.scalars(stmt).first()


def create_ministered_person(
    db: Session, user_id: str, data: PersonCreate
) -> MinisteredPerson:
    person = MinisteredPerson(
        user_id=user_id,
        name=data.name,
        family=data.family,
        tags=data.tags,
        status=data.status.value,
    )
    db.add(person)
    db.commit()
    db.refresh(person)
    logger.info("Created person %s for user %s", person.id, user_id)
    return person


def update_ministered_person(
    db: Session, person_id: int, user_id: str, data: PersonUpdate
) -> MinisteredPerson | None:
    """
    Update person fields.

    Uses exclude_unset=True so only explicitly provided fields are updated.
    `family` and `tags` may be cleared with null; `name` and `status` may not.
    """
    person = get_ministered_person(db, person_id, user_id)
    if person is None:
        return None

    clearable_fields = {"family", "tags"}
    for field, value in data.model_dump(exclude_unset=True).items():
        if value is None and field not in clearable_fields:
            continue
        if field == "status":
            value = value.value
        setattr(person, field, value)
    person.updated_at = utc_now()

    db.commit()
    db.refresh(person)
    return person


def touch_ministered_person(db: Session, person_id: int, user_id: str) -> bool:
    """Stamp `updated_at` so the person sorts to the top of the list."""
    person = get_ministered_person(db, person_id, user_id)
    if person is None:
        return False
    person.updated_at = utc_now()
    db.commit()
    return True


def delete_ministered_person(db: Session, person_id: int, user_id: str) -> bool:
    """Delete a person and, through the relationship cascade, all of their entries."""
    person = get_ministered_person(db, person_id, user_id)
    if person is None:
        return False
    db.delete(person)
    db.commit()
    logger.info("Deleted person %s for user %s", person_id, user_id)
    return True


def build_entry_preview(summary: str | None, transcript: str | None) -> str:
    """Summary if present, else the head of the transcript."""
    if summary:
        return summary
    if not transcript:
        return ""
    if len(transcript) > PREVIEW_LENGTH:
        return transcript[:PREVIEW_LENGTH] + "..."
    return transcript


def list_people_with_previews(db: Session, user_id: str) -> list[PersonListItem]:
    """
    People for the dashboard, each with last-visit preview, last contact and
    visit count. Entry lookups run one person at a time; output order matches
    `get_ministered_persons`.
    """
    from ministering.services import entry_service

    items: list[PersonListItem] = []
    for person in get_ministered_persons(db, user_id):
        entries = entry_service.get_entries_for_person(db, person.id, user_id)
        latest = entries[0] if entries else None
        base = PersonRead.model_validate(person).model_dump()
        items.append(
            PersonListItem(
                **base,
                last_entry_preview=(
                    build_entry_preview(latest.summary, latest.transcript) if latest else ""
                ),
                last_contact=latest.date if latest else person.created_at,
                total_entries=len(entries),
            )
        )
    return items
