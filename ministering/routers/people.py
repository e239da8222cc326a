"""People router - the caller's ministered persons and families."""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from ministering.core.deps import get_current_session, get_db, require_csrf_header
from ministering.schemas.auth import UserSession
from ministering.schemas.common import MessageResponse
from ministering.schemas.person import PersonCreate, PersonListItem, PersonRead, PersonUpdate
from ministering.services import person_service

router = APIRouter()


@router.get("/people", response_model=list[PersonListItem])
def list_people(
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    """People, most recently updated first, each with a last-visit preview."""
    return person_service.list_people_with_previews(db, session.user_id)


@router.get("/people/{person_id}", response_model=PersonRead)
def get_person(
    person_id: int,
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    person = person_service.get_ministered_person(db, person_id, session.user_id)
    if not person:
        raise HTTPException(status_code=404, detail="Person not found")
    return person


@router.post(
    "/people",
    response_model=PersonRead,
    dependencies=[Depends(require_csrf_header)],
)
def create_person(
    data: PersonCreate,
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    return person_service.create_ministered_person(db, session.user_id, data)


@router.put(
    "/people/{person_id}",
    response_model=PersonRead,
    dependencies=[Depends(require_csrf_header)],
)
def update_person(
    person_id: int,
    data: PersonUpdate,
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    person = person_service.update_ministered_person(db, person_id, session.user_id, data)
    if not person:
        raise HTTPException(status_code=404, detail="Person not found")
    return person


@router.delete(
    "/people/{person_id}",
    response_model=MessageResponse,
    dependencies=[Depends(require_csrf_header)],
)
def delete_person(
    person_id: int,
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    """Delete a person together with all of their visit entries."""
    if not person_service.delete_ministered_person(db, person_id, session.user_id):
        raise HTTPException(status_code=404, detail="Person not found")
    return MessageResponse(message="Person deleted successfully")
