"""Gospel resources router. Reads are public; the catalog is shared by all users."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ministering.core.deps import get_current_session, get_db, require_csrf_header
from ministering.schemas.auth import UserSession
from ministering.schemas.resource import ResourceCreate, ResourceRead
from ministering.services import resource_service

router = APIRouter()


@router.get("/resources", response_model=list[ResourceRead])
def list_resources(db: Session = Depends(get_db)):
    """All resources, featured first."""
    return resource_service.get_gospel_resources(db)


@router.get("/resources/featured", response_model=list[ResourceRead])
def list_featured_resources(db: Session = Depends(get_db)):
    return resource_service.get_featured_resources(db)


@router.post(
    "/resources",
    response_model=ResourceRead,
    dependencies=[Depends(require_csrf_header)],
)
def create_resource(
    data: ResourceCreate,
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    return resource_service.create_gospel_resource(db, data)
