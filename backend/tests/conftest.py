"""
NoteAssist Backend — Test Configuration (conftest.py)
======================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy (all function-scoped):
    ├── mock_db_session:     AsyncMock session for failure-path unit tests
    ├── db_engine:           in-memory SQLite engine with the schema created
    ├── session_factory:     async_sessionmaker bound to db_engine
    ├── db_session:          one session for service-level tests
    ├── identity_verifier:   fake verifier knowing two users (alice, bob)
    ├── fake_llm:            scripted LLMService recording every prompt
    └── test_client:         HTTPX AsyncClient against a fresh app with the
                             three dependencies above swapped in
"""

import os

# Override settings for testing BEFORE any noteassist imports
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["GOOGLE_CLIENT_ID"] = "test-client-id.apps.googleusercontent.com"
os.environ["GEMINI_API_KEY"] = "test-key-not-real"
os.environ["AI_PROVIDER"] = "gemini"
os.environ["LOG_LEVEL"] = "WARNING"

from typing import Dict, List
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from noteassist.database import Base, get_db_session
from noteassist.exceptions import ForbiddenError, UpstreamError
from noteassist.models.note import Note  # noqa: F401  (registers the table)
from noteassist.services.identity_service import Identity, IdentityVerifier
from noteassist.services.llm_base import LLMService
from noteassist.services.providers import get_identity_verifier, get_llm_service


ALICE = Identity(id="alice-sub-111", email="alice@example.com", name="Alice")
BOB = Identity(id="bob-sub-222", email="bob@example.com", name="Bob")

ALICE_TOKEN = "token-alice"
BOB_TOKEN = "token-bob"


def auth_header(token: str) -> Dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


# ══════════════════════════════════════════════════════════════════════════
# Test Doubles
# ══════════════════════════════════════════════════════════════════════════

class FakeIdentityVerifier(IdentityVerifier):
    """Accepts a fixed set of tokens; anything else is rejected like a bad ID token."""

    def __init__(self, identities: Dict[str, Identity]):
        self.identities = identities
        self.calls: List[str] = []

    async def verify(self, token: str) -> Identity:
        self.calls.append(token)
        identity = self.identities.get(token)
        if identity is None:
            raise ForbiddenError(context={"reason": "unknown test token"})
        return identity


class FakeLLMService(LLMService):
    """Echoes a canned answer, or fails with UpstreamError when `fail` is set."""

    name = "fake"

    def __init__(self, answer: str = "generated text"):
        self.answer = answer
        self.fail = False
        self.prompts: List[str] = []

    async def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.fail:
            raise UpstreamError(context={"provider": self.name})
        return self.answer

    async def health_check(self) -> bool:
        return not self.fail


# ══════════════════════════════════════════════════════════════════════════
# Database Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def mock_db_session():
    """
    A mock async session for tests that only need to simulate failures.

    Usage:
        mock_db_session.execute.side_effect = RuntimeError("connection reset")
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


@pytest_asyncio.fixture
async def db_engine():
    """
    Fresh in-memory SQLite database per test.

    StaticPool keeps the single connection alive so every session sees the
    same in-memory database.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


# ══════════════════════════════════════════════════════════════════════════
# Service Doubles
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def identity_verifier():
    return FakeIdentityVerifier({ALICE_TOKEN: ALICE, BOB_TOKEN: BOB})


@pytest.fixture
def fake_llm():
    return FakeLLMService()


# ══════════════════════════════════════════════════════════════════════════
# HTTP Client
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def test_client(session_factory, identity_verifier, fake_llm):
    """
    HTTPX AsyncClient talking to a fresh app instance.

    Usage:
        async def test_list(test_client):
            response = await test_client.get("/api/notes", headers=auth_header(ALICE_TOKEN))
    """
    from noteassist.main import create_app

    app = create_app()

    async def override_db_session():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db_session] = override_db_session
    app.dependency_overrides[get_identity_verifier] = lambda: identity_verifier
    app.dependency_overrides[get_llm_service] = lambda: fake_llm

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
