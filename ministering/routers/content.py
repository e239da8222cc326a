"""Public content and settings router."""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from ministering.core.deps import get_db
from ministering.schemas.content import ContentRead, PublicSettingRead
from ministering.services import content_service, settings_service

router = APIRouter()


@router.get("/content", response_model=list[ContentRead])
def list_content(category: str | None = None, db: Session = Depends(get_db)):
    """Active content blocks, optionally limited to one category."""
    if category:
        return content_service.get_content_by_category(db, category)
    return content_service.get_all_content(db)


@router.get("/content/{key}", response_model=ContentRead)
def get_content(key: str, db: Session = Depends(get_db)):
    content = content_service.get_content_by_key(db, key)
    if not content:
        raise HTTPException(status_code=404, detail="Content not found")
    return content


@router.get("/settings/public", response_model=list[PublicSettingRead])
def list_public_settings(db: Session = Depends(get_db)):
    return settings_service.get_public_settings(db)
