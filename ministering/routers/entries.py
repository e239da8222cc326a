"""Entries router - recorded visits."""

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from ministering.core.deps import get_current_session, get_db, require_csrf_header
from ministering.schemas.auth import UserSession
from ministering.schemas.common import MessageResponse
from ministering.schemas.entry import EntryCreate, EntryRead, EntryUpdate
from ministering.services import entry_service, person_service

router = APIRouter()


def _parse_person_id(raw: str | None) -> int:
    try:
        person_id = int(raw) if raw is not None else 0
    except ValueError:
        person_id = 0
    if person_id <= 0:
        raise HTTPException(status_code=400, detail="person_id is required")
    return person_id


@router.get("/entries", response_model=list[EntryRead])
def list_entries(
    person_id: str | None = Query(default=None),
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    """Entries for one of the caller's people, newest visit first."""
    pid = _parse_person_id(person_id)
    if not person_service.get_ministered_person(db, pid, session.user_id):
        raise HTTPException(status_code=404, detail="Person not found")
    return entry_service.get_entries_for_person(db, pid, session.user_id)


@router.get("/entries/{entry_id}", response_model=EntryRead)
def get_entry(
    entry_id: int,
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    entry = entry_service.get_entry(db, entry_id, session.user_id)
    if not entry:
        raise HTTPException(status_code=404, detail="Entry not found")
    return entry


@router.post(
    "/save_entry",
    response_model=EntryRead,
    dependencies=[Depends(require_csrf_header)],
)
def save_entry(
    data: EntryCreate,
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    """
    Persist a visit for one of the caller's people.

    The person is checked before anything is written; saving also moves the
    person to the top of the people list.
    """
    if not person_service.get_ministered_person(db, data.person_id, session.user_id):
        raise HTTPException(status_code=404, detail="Person not found")

    entry = entry_service.create_entry(db, session.user_id, data)
    person_service.touch_ministered_person(db, data.person_id, session.user_id)
    return entry


@router.put(
    "/entries/{entry_id}",
    response_model=EntryRead,
    dependencies=[Depends(require_csrf_header)],
)
def update_entry(
    entry_id: int,
    data: EntryUpdate,
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    entry = entry_service.update_entry(db, entry_id, session.user_id, data)
    if not entry:
        raise HTTPException(status_code=404, detail="Entry not found")
    return entry


@router.delete(
    "/entries/{entry_id}",
    response_model=MessageResponse,
    dependencies=[Depends(require_csrf_header)],
)
def delete_entry(
    entry_id: int,
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    if not entry_service.delete_entry(db, entry_id, session.user_id):
        raise HTTPException(status_code=404, detail="Entry not found")
    return MessageResponse(message="Entry deleted successfully")
