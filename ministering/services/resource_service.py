"""Gospel resource service - global curated catalog."""

from sqlalchemy import select
from sqlalchemy.orm import Session

from ministering.db.models import GospelResource
from ministering.schemas.resource import ResourceCreate


def get_gospel_resources(db: Session) -> list[GospelResource]:
    """All resources, featured first, then newest."""
    stmt = select(GospelResource).order_by(
        GospelResource.featured.desc(),
        GospelResource.created_at.desc(),
        GospelResource.id.desc(),
    )
    return list(db.scalars(stmt).all())


def get_featured_resources(db: Session) -> list[GospelResource]:
    stmt = (
        select(GospelResource)
        .where(GospelResource.featured.is_(True))
        .order_by(GospelResource.created_at.desc(), GospelResource.id.desc())
    )
    return list(db.scalars(stmt).all())


def create_gospel_resource(db: Session, data: ResourceCreate) -> GospelResource:
    resource = GospelResource(
        title=data.title,
        author=data.author,
        type=data.type.value,
        url=data.url,
        description=data.description,
        tags=data.tags,
        featured=data.featured,
    )
    db.add(resource)
    db.commit()
    db.refresh(resource)
    return resource
