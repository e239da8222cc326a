"""Authentication router with Google OpenID Connect login and server-side sessions."""

import logging

import jwt
from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import RedirectResponse
from sqlalchemy.orm import Session

from ministering.core.config import settings
from ministering.core.deps import COOKIE_NAME, get_current_session, get_db
from ministering.core.rate_limit import limiter
from ministering.core.security import (
    create_oauth_state_payload,
    create_session_token,
    decode_session_token,
    generate_oauth_nonce,
    generate_oauth_state,
    parse_oauth_state_payload,
    verify_oauth_state,
)
from ministering.schemas.auth import UserRead, UserSession
from ministering.services import session_service, user_service
from ministering.services.google_oauth import (
    build_authorization_url,
    exchange_code_for_tokens,
    verify_id_token,
)

logger = logging.getLogger(__name__)

router = APIRouter()

OAUTH_STATE_COOKIE = "oauth_state"
OAUTH_STATE_MAX_AGE = 300  # 5 minutes
OAUTH_COOKIE_PATH = "/api"


def _get_success_redirect() -> str:
    return settings.FRONTEND_URL.rstrip("/") + "/"


def _get_error_redirect(error_code: str) -> str:
    return f"{settings.FRONTEND_URL.rstrip('/')}/?error={error_code}"


# =============================================================================
# OAuth Endpoints
# =============================================================================

@router.get("/login")
@limiter.limit(f"{settings.RATE_LIMIT_AUTH}/minute")
def login(request: Request):
    """
    Start the Google login flow.

    State and nonce are kept in a short-lived cookie bound to the user-agent;
    the callback checks both.
    """
    state = generate_oauth_state()
    nonce = generate_oauth_nonce()
    user_agent = request.headers.get("user-agent", "")

    response = RedirectResponse(url=build_authorization_url(state, nonce), status_code=302)
    response.set_cookie(
        key=OAUTH_STATE_COOKIE,
        value=create_oauth_state_payload(state, nonce, user_agent),
        max_age=OAUTH_STATE_MAX_AGE,
        httponly=True,
        samesite="lax",
        secure=settings.cookie_secure,
        path=OAUTH_COOKIE_PATH,
    )
    return response


@router.get("/callback")
@limiter.limit(f"{settings.RATE_LIMIT_AUTH}/minute")
async def callback(
    request: Request,
    code: str | None = None,
    state: str | None = None,
    error: str | None = None,
    db: Session = Depends(get_db),
):
    """
    Handle the provider callback.

    Flow:
    1. Validate state cookie (CSRF + user-agent binding)
    2. Exchange code for tokens and verify the ID token
    3. Upsert the user keyed by the `sub` claim
    4. Create a session row, set the session cookie and redirect
    """
    error_response = RedirectResponse(url=_get_error_redirect("auth_failed"), status_code=302)
    error_response.delete_cookie(OAUTH_STATE_COOKIE, path=OAUTH_COOKIE_PATH)

    if error:
        error_response.headers["location"] = _get_error_redirect(f"google_{error}")
        return error_response

    if not code or not state:
        error_response.headers["location"] = _get_error_redirect("missing_params")
        return error_response

    state_cookie = request.cookies.get(OAUTH_STATE_COOKIE)
    if not state_cookie:
        error_response.headers["location"] = _get_error_redirect("state_expired")
        return error_response

    try:
        stored_payload = parse_oauth_state_payload(state_cookie)
    except ValueError:
        error_response.headers["location"] = _get_error_redirect("invalid_state")
        return error_response

    valid, reason = verify_oauth_state(
        stored_payload, state, request.headers.get("user-agent", "")
    )
    if not valid:
        logger.warning("OAuth state rejected: %s", reason)
        error_response.headers["location"] = _get_error_redirect("state_mismatch")
        return error_response

    try:
        tokens = await exchange_code_for_tokens(code)
    except Exception:
        logger.exception("Token exchange failed")
        error_response.headers["location"] = _get_error_redirect("token_exchange_failed")
        return error_response

    try:
        google_user = verify_id_token(tokens["id_token"], expected_nonce=stored_payload["nonce"])
    except (KeyError, ValueError):
        error_response.headers["location"] = _get_error_redirect("token_invalid")
        return error_response

    claims = google_user.to_claims()
    user_service.upsert_user(db, google_user.sub, claims)
    record = session_service.create_session(db, claims)

    success_response = RedirectResponse(url=_get_success_redirect(), status_code=302)
    success_response.delete_cookie(OAUTH_STATE_COOKIE, path=OAUTH_COOKIE_PATH)
    success_response.set_cookie(
        key=COOKIE_NAME,
        value=create_session_token(record.sid, google_user.sub),
        max_age=settings.SESSION_TTL_HOURS * 3600,
        httponly=True,
        samesite="lax",
        secure=settings.cookie_secure,
        path="/",
    )
    return success_response


@router.get("/logout")
def logout(request: Request, db: Session = Depends(get_db)):
    """End the session (if any) and return to the frontend."""
    token = request.cookies.get(COOKIE_NAME)
    if token:
        try:
            payload = decode_session_token(token)
        except jwt.InvalidTokenError:
            payload = {}
        if payload.get("sid"):
            session_service.delete_session(db, payload["sid"])

    response = RedirectResponse(url=_get_success_redirect(), status_code=302)
    response.delete_cookie(COOKIE_NAME, path="/")
    return response


# =============================================================================
# Session Endpoints
# =============================================================================

@router.get("/auth/user", response_model=UserRead)
def get_auth_user(
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    """Current authenticated user. Used by clients to bootstrap auth state."""
    user = user_service.get_user(db, session.user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user
