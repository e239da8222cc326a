"""User service - identities established by the login provider."""

from sqlalchemy.orm import Session

from ministering.db.models import User, utc_now

_USER_FIELDS = ("email", "first_name", "last_name", "profile_image_url")


def get_user(db: Session, user_id: str) -> User | None:
    return db.get(User, user_id)


def upsert_user(db: Session, user_id: str, data: dict) -> User:
    """
    Insert the user, or refresh their profile fields if they already exist.

    `user_id` is the provider's subject claim. Unknown keys in `data` are ignored.
    """
    user = db.get(User, user_id)
    if user is None:
        user = User(id=user_id)
        db.add(user)

    for field in _USER_FIELDS:
        if field in data:
            setattr(user, field, data[field])
    user.updated_at = utc_now()

    db.commit()
    db.refresh(user)
    return user
