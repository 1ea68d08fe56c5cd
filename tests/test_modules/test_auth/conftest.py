# tests/test_modules/test_auth/conftest.py

from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.security.hashing import hash_password
from app.modules.auth.service import AuthService
from app.modules.auth.sessions import SessionAuthenticator
from app.modules.user.models import User
from app.modules.user.repository import UserRepository


# ============================================
# CLOCK & IN-MEMORY STORES
# ============================================

class FakeClock:
    """Injected clock that tests can move forward."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


class InMemorySessionRepository:
    def __init__(self):
        self.rows = {}

    async def create(self, user_session):
        self.rows[user_session.token_hash] = user_session
        return user_session

    async def get_by_token_hash(self, token_hash):
        return self.rows.get(token_hash)

    async def delete_by_token_hash(self, token_hash):
        return 1 if self.rows.pop(token_hash, None) else 0

    async def delete_expired(self, now):
        expired = [h for h, s in self.rows.items() if s.expires_at <= now]
        for token_hash in expired:
            del self.rows[token_hash]
        return len(expired)


class InMemoryUserRepository:
    def __init__(self):
        self.users = {}

    def add(self, user):
        self.users[user.id] = user
        return user

    async def get_by_id(self, id):
        return self.users.get(id)


# ============================================
# MOCKS & FIXTURES
# ============================================

@pytest.fixture
def clock():
    return FakeClock(datetime(2026, 3, 1, 9, 0, tzinfo=timezone.utc))


@pytest.fixture
def session_repo():
    return InMemorySessionRepository()


@pytest.fixture
def user_store():
    return InMemoryUserRepository()


@pytest.fixture
def authenticator(session_repo, user_store, clock):
    return SessionAuthenticator(session_repo, user_store, clock=clock)


@pytest.fixture
def mock_db_session():
    """Create a mock database session."""
    session = AsyncMock(spec=AsyncSession)
    session.add = MagicMock()
    session.commit = AsyncMock()
    session.refresh = AsyncMock()
    return session


@pytest.fixture
def mock_user_repo(mock_db_session):
    """Create a mock user repository."""
    repo = UserRepository(mock_db_session)
    repo.get_by_email_or_none = AsyncMock()
    repo.create = AsyncMock()
    return repo


@pytest.fixture
def mock_authenticator():
    authenticator = AsyncMock(spec=SessionAuthenticator)
    return authenticator


@pytest.fixture
def auth_service(mock_user_repo, mock_authenticator):
    """Create an AuthService instance with mocked dependencies."""
    return AuthService(user_repo=mock_user_repo, session_authenticator=mock_authenticator)


@pytest.fixture
def sample_user():
    """Create a sample user for testing."""
    return User(
        id=uuid4(),
        email="student@example.com",
        full_name="Ada Student",
        university="METU",
        password_hash=hash_password("Test@123"),
        warning_count=0,
        is_banned=False,
        created_at=datetime.now(timezone.utc),
        updated_at=datetime.now(timezone.utc),
    )
