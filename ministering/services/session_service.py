"""Session service - server-side login sessions backing the session cookie."""

import logging
from datetime import datetime, timedelta, timezone

from sqlalchemy import delete, select
from sqlalchemy.orm import Session as DbSession

from ministering.core.config import settings
from ministering.core.security import generate_session_id
from ministering.db.models import Session

logger = logging.getLogger(__name__)


def create_session(db: DbSession, claims: dict) -> Session:
    """
    Create a session row for a freshly authenticated user.

    Args:
        db: Database session
        claims: Verified identity claims; must include `sub`

    Returns:
        The created Session with a random `sid`
    """
    expire = datetime.now(timezone.utc) + timedelta(hours=settings.SESSION_TTL_HOURS)
    record = Session(
        sid=generate_session_id(),
        sess={"claims": claims},
        expire=expire,
    )
    db.add(record)
    db.commit()
    db.refresh(record)

    logger.info("Created session for user %s", claims.get("sub"))
    return record


def get_active_session(db: DbSession, sid: str) -> Session | None:
    """Find a session by id. Returns None if it doesn't exist or is expired."""
    if not sid:
        return None
    stmt = select(Session).where(
        Session.sid == sid,
        Session.expire > datetime.now(timezone.utc),
    )
    return db.scalars(stmt).first()


def delete_session(db: DbSession, sid: str) -> bool:
    """Delete a session (used during logout)."""
    result = db.execute(delete(Session).where(Session.sid == sid))
    db.commit()
    return result.rowcount > 0


def purge_expired_sessions(db: DbSession) -> int:
    """Delete every expired session. Returns the number removed."""
    stmt = (
        delete(Session)
        .where(Session.expire <= datetime.now(timezone.utc))
        .execution_options(synchronize_session=False)
    )
    result = db.execute(stmt)
    db.commit()

    count = result.rowcount or 0
    if count:
        logger.info("Purged %d expired sessions", count)
    return count
