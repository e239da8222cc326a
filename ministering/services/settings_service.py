"""App settings service - keyed values, some of them public."""

from sqlalchemy import select
from sqlalchemy.orm import Session

from ministering.db.models import AppSetting, utc_now
from ministering.schemas.content import SettingCreate, SettingUpdate


def get_setting_by_key(db: Session, key: str) -> AppSetting | None:
    return db.scalars(select(AppSetting).where(AppSetting.key == key)).first()


def get_public_settings(db: Session) -> list[AppSetting]:
    stmt = (
        select(AppSetting)
        .where(AppSetting.is_public.is_(True))
        .order_by(AppSetting.category, AppSetting.key)
    )
    return list(db.scalars(stmt).all())


def create_setting(db: Session, data: SettingCreate) -> AppSetting:
    setting = AppSetting(
        key=data.key,
        value=data.value,
        description=data.description,
        category=data.category,
        is_public=data.is_public,
    )
    db.add(setting)
    db.commit()
    db.refresh(setting)
    return setting


def update_setting(db: Session, key: str, data: SettingUpdate) -> AppSetting | None:
    setting = get_setting_by_key(db, key)
    if setting is None:
        return None

    clearable_fields = {"description", "category"}
    for field, value in data.model_dump(exclude_unset=True).items():
        if value is None and field not in clearable_fields:
            continue
        setattr(setting, field, value)
    setting.updated_at = utc_now()

    db.commit()
    db.refresh(setting)
    return setting
