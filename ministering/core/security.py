"""Security utilities for session cookies and OAuth state management."""

import hashlib
import json
import secrets
from datetime import datetime, timedelta, timezone

import jwt

from ministering.core.config import settings


# =============================================================================
# Session Token (JWT in cookie)
# =============================================================================

def generate_session_id() -> str:
    """Generate an opaque, URL-safe session id."""
    return secrets.token_urlsafe(32)


def create_session_token(sid: str, user_id: str) -> str:
    """
    Create signed session JWT.

    The token only points at a server-side session row; revoking the row
    revokes the token even before `exp`.
    """
    now = datetime.now(timezone.utc)
    payload = {
        "sid": sid,
        "sub": user_id,
        "iat": now,
        "exp": now + timedelta(hours=settings.SESSION_TTL_HOURS),
    }
    return jwt.encode(payload, settings.SESSION_SECRET, algorithm="HS256")


def decode_session_token(token: str) -> dict:
    """
    Decode and verify session JWT.

    Raises:
        jwt.InvalidTokenError: If the token is malformed, tampered or expired
    """
    return jwt.decode(token, settings.SESSION_SECRET, algorithms=["HS256"])


# =============================================================================
# OAuth State/Nonce with User-Agent Binding
# =============================================================================

def generate_oauth_state() -> str:
    """Generate cryptographically random state (32 bytes, URL-safe base64)."""
    return secrets.token_urlsafe(32)


def generate_oauth_nonce() -> str:
    """Generate cryptographically random nonce (32 bytes, URL-safe base64)."""
    return secrets.token_urlsafe(32)


def hash_user_agent(user_agent: str) -> str:
    """Short hash of the user-agent, bound to the OAuth state cookie."""
    return hashlib.sha256(user_agent.encode()).hexdigest()[:16]


def create_oauth_state_payload(state: str, nonce: str, user_agent: str) -> str:
    """JSON payload for the OAuth state cookie."""
    payload = {
        "state": state,
        "nonce": nonce,
        "ua_hash": hash_user_agent(user_agent),
    }
    return json.dumps(payload)


def parse_oauth_state_payload(cookie_value: str) -> dict:
    """Parse OAuth state cookie payload."""
    return json.loads(cookie_value)


def verify_oauth_state(
    stored_payload: dict,
    received_state: str,
    user_agent: str
) -> tuple[bool, str]:
    """
    Verify OAuth callback state matches stored state.

    Returns:
        (success, error_message)
    """
    if stored_payload.get("state") != received_state:
        return False, "State mismatch - possible CSRF attack"

    expected_ua_hash = hash_user_agent(user_agent)
    if stored_payload.get("ua_hash") != expected_ua_hash:
        return False, "User-agent mismatch - possible session hijack"

    return True, ""
