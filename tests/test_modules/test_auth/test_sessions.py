# tests/test_modules/test_auth/test_sessions.py

from datetime import timedelta
from unittest.mock import AsyncMock
from uuid import uuid4

import pytest
from sqlalchemy.exc import SQLAlchemyError

from app.core.security.hashing import hash_session_token
from app.core.utils.exceptions import PersistenceFailure
from app.modules.auth.sessions import SessionAuthenticator, generate_session_token
from app.modules.shared.enums import AuthFailure


# ============================================
# TOKENS
# ============================================

class TestSessionTokens:
    def test_tokens_are_unique_and_url_safe(self):
        tokens = {generate_session_token() for _ in range(50)}
        assert len(tokens) == 50
        assert all(t.replace("-", "").replace("_", "").isalnum() for t in tokens)

    def test_token_length_follows_byte_count(self):
        # 32 random bytes encode to 43 base64url characters
        assert len(generate_session_token(32)) == 43


# ============================================
# ISSUE
# ============================================

class TestIssue:
    """Test suite for SessionAuthenticator.issue."""

    @pytest.mark.asyncio
    async def test_only_the_token_hash_is_stored(self, authenticator, session_repo, sample_user):
        issued = await authenticator.issue(sample_user.id)

        stored = session_repo.rows[hash_session_token(issued.token)]
        assert stored.user_id == sample_user.id
        assert issued.token not in session_repo.rows

    @pytest.mark.asyncio
    async def test_default_lifetime_is_seven_days(self, authenticator, clock, sample_user):
        issued = await authenticator.issue(sample_user.id)
        assert issued.expires_at == clock.now + timedelta(days=7)

    @pytest.mark.asyncio
    async def test_remembered_lifetime_is_thirty_days(self, authenticator, clock, sample_user):
        issued = await authenticator.issue(sample_user.id, remember=True)
        assert issued.expires_at == clock.now + timedelta(days=30)

    @pytest.mark.asyncio
    async def test_storage_failure_raises_persistence_failure(self, user_store, clock, sample_user):
        session_repo = AsyncMock()
        session_repo.create.side_effect = SQLAlchemyError("down")
        authenticator = SessionAuthenticator(session_repo, user_store, clock=clock)

        with pytest.raises(PersistenceFailure) as exc_info:
            await authenticator.issue(sample_user.id)

        assert exc_info.value.operation == "issue_session"


# ============================================
# VERIFY & REVOKE
# ============================================

class TestSessionLifecycle:
    """Issue, verify, expire, revoke."""

    @pytest.mark.asyncio
    async def test_fresh_session_verifies(self, authenticator, user_store, sample_user):
        user_store.add(sample_user)
        issued = await authenticator.issue(sample_user.id)

        result = await authenticator.verify(issued.token)

        assert result.ok is True
        assert result.user is sample_user
        assert result.failure is None

    @pytest.mark.asyncio
    async def test_session_expires_after_seven_days(self, authenticator, user_store, clock, sample_user):
        user_store.add(sample_user)
        issued = await authenticator.issue(sample_user.id)

        clock.advance(days=6, hours=23)
        assert (await authenticator.verify(issued.token)).ok is True

        clock.advance(days=1)
        result = await authenticator.verify(issued.token)
        assert result.ok is False
        assert result.failure == AuthFailure.SESSION_EXPIRED

    @pytest.mark.asyncio
    async def test_expiry_is_exclusive_at_the_boundary(self, authenticator, user_store, clock, sample_user):
        user_store.add(sample_user)
        issued = await authenticator.issue(sample_user.id)

        clock.advance(days=7)

        assert (await authenticator.verify(issued.token)).failure == AuthFailure.SESSION_EXPIRED

    @pytest.mark.asyncio
    async def test_remembered_session_outlives_default(self, authenticator, user_store, clock, sample_user):
        user_store.add(sample_user)
        issued = await authenticator.issue(sample_user.id, remember=True)

        clock.advance(days=8)
        assert (await authenticator.verify(issued.token)).ok is True

        clock.advance(days=23)
        assert (await authenticator.verify(issued.token)).failure == AuthFailure.SESSION_EXPIRED

    @pytest.mark.asyncio
    async def test_revoked_session_is_invalid_before_expiry(self, authenticator, user_store, sample_user):
        user_store.add(sample_user)
        issued = await authenticator.issue(sample_user.id)

        await authenticator.revoke(issued.token)

        result = await authenticator.verify(issued.token)
        assert result.failure == AuthFailure.INVALID_SESSION

    @pytest.mark.asyncio
    async def test_revoke_is_idempotent(self, authenticator, sample_user):
        issued = await authenticator.issue(sample_user.id)

        await authenticator.revoke(issued.token)
        await authenticator.revoke(issued.token)
        await authenticator.revoke("never-issued")
        await authenticator.revoke(None)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("token", [None, "", "not-a-real-token"])
    async def test_unknown_tokens_are_invalid(self, authenticator, token):
        result = await authenticator.verify(token)
        assert result.failure == AuthFailure.INVALID_SESSION

    @pytest.mark.asyncio
    async def test_banned_user_is_rejected_on_next_verify(self, authenticator, user_store, sample_user):
        user_store.add(sample_user)
        issued = await authenticator.issue(sample_user.id)
        assert (await authenticator.verify(issued.token)).ok is True

        sample_user.is_banned = True

        result = await authenticator.verify(issued.token)
        assert result.ok is False
        assert result.failure == AuthFailure.ACCOUNT_BANNED

    @pytest.mark.asyncio
    async def test_deleted_user_invalidates_session(self, authenticator, sample_user):
        issued = await authenticator.issue(sample_user.id)

        result = await authenticator.verify(issued.token)

        assert result.failure == AuthFailure.INVALID_SESSION

    @pytest.mark.asyncio
    async def test_verify_does_not_modify_sessions(self, authenticator, session_repo, user_store, clock, sample_user):
        user_store.add(sample_user)
        issued = await authenticator.issue(sample_user.id)
        clock.advance(days=10)

        await authenticator.verify(issued.token)

        assert hash_session_token(issued.token) in session_repo.rows

    @pytest.mark.asyncio
    async def test_lookup_failure_raises_persistence_failure(self, user_store, clock):
        session_repo = AsyncMock()
        session_repo.get_by_token_hash.side_effect = SQLAlchemyError("down")
        authenticator = SessionAuthenticator(session_repo, user_store, clock=clock)

        with pytest.raises(PersistenceFailure):
            await authenticator.verify("some-token")


class TestPurgeExpired:
    @pytest.mark.asyncio
    async def test_purge_removes_only_expired(self, authenticator, session_repo, clock):
        short = await authenticator.issue(uuid4())
        long = await authenticator.issue(uuid4(), remember=True)

        clock.advance(days=10)
        removed = await authenticator.purge_expired()

        assert removed == 1
        assert hash_session_token(short.token) not in session_repo.rows
        assert hash_session_token(long.token) in session_repo.rows
