"""
Test configuration and fixtures.

Provides:
- In-memory SQLite database, tables created per test
- Server-side session + signed cookie for authenticated tests
- HTTPX AsyncClient with proper headers
- Stub transcription/analysis services via dependency overrides
"""
import os
import tempfile
from dataclasses import dataclass
from typing import AsyncGenerator, Generator

# Settings are read at import time; configure the environment first.
os.environ["TESTING"] = "1"
os.environ["ENV"] = "test"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["TRANSCRIPTION_PROVIDER"] = "openai"
os.environ["OPENAI_API_KEY"] = "test-key"
os.environ["SESSION_SECRET"] = "test-secret"
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="ministering-uploads-")

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.orm import Session

from ministering.core.deps import (
    COOKIE_NAME,
    get_analysis_service,
    get_db,
    get_transcription_service,
)
from ministering.core.security import create_session_token
from ministering.db.base import Base
from ministering.db.models import User
from ministering.db.session import SessionLocal, engine
from ministering.main import app
from ministering.schemas.ai import VisitAnalysis, VisitInsights
from ministering.services import session_service
from ministering.services.transcription_service import TranscriptionResult


# =============================================================================
# Database Fixtures
# =============================================================================

@pytest.fixture(scope="function")
def db() -> Generator[Session, None, None]:
    """Fresh schema for every test."""
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


def make_user(db: Session, sub: str, email: str) -> User:
    user = User(id=sub, email=email, first_name="Test", last_name="User")
    db.add(user)
    db.commit()
    return user


@pytest.fixture(scope="function")
def test_user(db: Session) -> User:
    return make_user(db, "google-sub-1", "minister@example.com")


@pytest.fixture(scope="function")
def other_user(db: Session) -> User:
    return make_user(db, "google-sub-2", "other@example.com")


# =============================================================================
# Auth Fixtures
# =============================================================================

@dataclass
class TestAuth:
    """Test authentication context."""
    user: User
    sid: str
    token: str
    cookie_name: str = COOKIE_NAME


def make_auth(db: Session, user: User) -> TestAuth:
    record = session_service.create_session(db, {"sub": user.id, "email": user.email})
    return TestAuth(user=user, sid=record.sid, token=create_session_token(record.sid, user.id))


@pytest.fixture(scope="function")
def test_auth(db: Session, test_user: User) -> TestAuth:
    return make_auth(db, test_user)


@pytest.fixture(scope="function")
def other_auth(db: Session, other_user: User) -> TestAuth:
    return make_auth(db, other_user)


# =============================================================================
# Vendor Stubs
# =============================================================================

class StubTranscriber:
    """Records the files it was given and returns a fixed transcript."""

    def __init__(self, text: str = "", error: Exception | None = None):
        self.text = text
        self.error = error
        self.paths: list[str] = []
        self.existed: list[bool] = []

    async def transcribe(self, file_path: str) -> TranscriptionResult:
        self.paths.append(file_path)
        self.existed.append(os.path.exists(file_path))
        if self.error:
            raise self.error
        return TranscriptionResult(text=self.text)


class StubAnalyzer:
    def __init__(self, analysis: VisitAnalysis | None = None,
                 insights: VisitInsights | None = None, error: Exception | None = None):
        self.analysis = analysis or VisitAnalysis(summary="A good visit.")
        self.insights = insights or VisitInsights(patterns=["p"], suggestions=["s"])
        self.error = error
        self.analyze_calls: list[str] = []
        self.insight_calls: list[list] = []

    async def analyze(self, transcript: str) -> VisitAnalysis:
        self.analyze_calls.append(transcript)
        if self.error:
            raise self.error
        return self.analysis

    async def generate_insights(self, entries) -> VisitInsights:
        self.insight_calls.append(entries)
        if self.error:
            raise self.error
        return self.insights


@pytest.fixture(scope="function")
def transcriber() -> StubTranscriber:
    return StubTranscriber()


@pytest.fixture(scope="function")
def analyzer() -> StubAnalyzer:
    return StubAnalyzer()


# =============================================================================
# Client Fixtures
# =============================================================================

def _install_overrides(db: Session, transcriber: StubTranscriber, analyzer: StubAnalyzer) -> None:
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_transcription_service] = lambda: transcriber
    app.dependency_overrides[get_analysis_service] = lambda: analyzer


@pytest.fixture(scope="function")
async def client(
    db: Session, transcriber: StubTranscriber, analyzer: StubAnalyzer
) -> AsyncGenerator[AsyncClient, None]:
    """Unauthenticated AsyncClient for public endpoints."""
    _install_overrides(db, transcriber, analyzer)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
async def authed_client(
    db: Session,
    test_auth: TestAuth,
    transcriber: StubTranscriber,
    analyzer: StubAnalyzer,
) -> AsyncGenerator[AsyncClient, None]:
    """Authenticated AsyncClient with session cookie and CSRF header."""
    _install_overrides(db, transcriber, analyzer)
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
        cookies={test_auth.cookie_name: test_auth.token},
        headers={"X-Requested-With": "XMLHttpRequest"},  # CSRF header
    ) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
async def other_client(
    db: Session,
    other_auth: TestAuth,
    transcriber: StubTranscriber,
    analyzer: StubAnalyzer,
) -> AsyncGenerator[AsyncClient, None]:
    """A second, unrelated user."""
    _install_overrides(db, transcriber, analyzer)
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
        cookies={other_auth.cookie_name: other_auth.token},
        headers={"X-Requested-With": "XMLHttpRequest"},
    ) as c:
        yield c
    app.dependency_overrides.clear()
