"""App content service - keyed copy blocks rendered by the client."""

from sqlalchemy import select
from sqlalchemy.orm import Session

from ministering.db.models import AppContent, utc_now
from ministering.schemas.content import ContentCreate, ContentUpdate


def get_content_by_key(db: Session, key: str) -> AppContent | None:
    """Active content for a key; inactive rows are treated as missing."""
    stmt = select(AppContent).where(
        AppContent.key == key,
        AppContent.is_active.is_(True),
    )
    return db.scalars(stmt).first()


def get_content_by_category(db: Session, category: str) -> list[AppContent]:
    stmt = (
        select(AppContent)
        .where(AppContent.category == category, AppContent.is_active.is_(True))
        .order_by(AppContent.sort_order, AppContent.title)
    )
    return list(db.scalars(stmt).all())


def get_all_content(db: Session) -> list[AppContent]:
    stmt = (
        select(AppContent)
        .where(AppContent.is_active.is_(True))
        .order_by(AppContent.category, AppContent.sort_order, AppContent.title)
    )
    return list(db.scalars(stmt).all())


def create_content(db: Session, data: ContentCreate) -> AppContent:
    content = AppContent(
        key=data.key,
        title=data.title,
        content=data.content,
        content_type=data.content_type.value,
        is_active=data.is_active,
        category=data.category,
        sort_order=data.sort_order,
    )
    db.add(content)
    db.commit()
    db.refresh(content)
    return content


def update_content(db: Session, key: str, data: ContentUpdate) -> AppContent | None:
    """Update a content block by key, active or not."""
    content = db.scalars(select(AppContent).where(AppContent.key == key)).first()
    if content is None:
        return None

    clearable_fields = {"title", "category"}
    for field, value in data.model_dump(exclude_unset=True).items():
        if value is None and field not in clearable_fields:
            continue
        if field == "content_type":
            value = value.value
        setattr(content, field, value)
    content.updated_at = utc_now()

    db.commit()
    db.refresh(content)
    return content
