"""FastAPI dependencies for authentication, database access and vendor services."""

from typing import Generator

from fastapi import Depends, HTTPException, Request
from sqlalchemy.orm import Session

from ministering.core.config import settings
from ministering.core.security import decode_session_token
from ministering.db.session import SessionLocal


# Cookie and header names
COOKIE_NAME = "ministering_session"
CSRF_HEADER = "X-Requested-With"
CSRF_HEADER_VALUE = "XMLHttpRequest"


def get_db() -> Generator[Session, None, None]:
    """
    Database session dependency.

    Yields a database session and ensures it's closed after the request.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_current_session(
    request: Request,
    db: Session = Depends(get_db)
):
    """
    Resolve the caller's identity from the session cookie.

    Validates:
    - Session cookie exists and its JWT signature/expiry are valid
    - The referenced session row exists and has not expired
    - The row's subject matches the token's subject

    Raises:
        HTTPException 401: Authentication failed
    """
    # Import here to avoid circular imports
    from ministering.schemas.auth import UserSession
    from ministering.services import session_service

    token = request.cookies.get(COOKIE_NAME)
    if not token:
        raise HTTPException(status_code=401, detail="Unauthorized")

    try:
        payload = decode_session_token(token)
    except Exception:
        raise HTTPException(status_code=401, detail="Invalid session")

    record = session_service.get_active_session(db, payload.get("sid", ""))
    if not record:
        raise HTTPException(status_code=401, detail="Session expired")

    claims = record.sess.get("claims") or {}
    if claims.get("sub") != payload.get("sub"):
        raise HTTPException(status_code=401, detail="Invalid session")

    return UserSession(
        sid=record.sid,
        user_id=claims["sub"],
        email=claims.get("email"),
        claims=claims,
    )


def require_csrf_header(request: Request) -> None:
    """
    Verify CSRF header on mutations.

    Apply to state-changing endpoints (POST, PUT, DELETE).

    Raises:
        HTTPException 403: Missing or invalid CSRF header
    """
    if request.headers.get(CSRF_HEADER) != CSRF_HEADER_VALUE:
        raise HTTPException(
            status_code=403,
            detail=f"Missing CSRF header. Include '{CSRF_HEADER}: {CSRF_HEADER_VALUE}'"
        )


def get_transcription_service(request: Request):
    """Transcription service bound to the configuration resolved at startup."""
    from ministering.services.transcription_service import TranscriptionService

    return TranscriptionService(request.app.state.transcription_config)


def get_analysis_service():
    """Analysis service over the OpenAI chat provider."""
    from ministering.services.ai_provider import OpenAIProvider
    from ministering.services.analysis_service import AnalysisService

    provider = OpenAIProvider(
        settings.OPENAI_API_KEY,
        default_model=settings.ANALYSIS_MODEL,
        base_url=settings.OPENAI_BASE_URL,
    )
    return AnalysisService(provider, model=settings.ANALYSIS_MODEL)
