# app/modules/auth/sessions.py

import secrets
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError

from app.core.config import settings
from app.core.middleware.logging import logger
from app.core.security.hashing import hash_session_token
from app.core.utils.exceptions import PersistenceFailure
from app.core.utils.helpers import ensure_aware
from app.modules.auth.models import UserSession
from app.modules.auth.repository import SessionRepository
from app.modules.auth.schemas import IssuedSession, SessionVerification
from app.modules.shared.enums import AuthFailure
from app.modules.user.repository import UserRepository


def generate_session_token(nbytes: Optional[int] = None) -> str:
    """Unguessable URL-safe token with no decodable structure."""
    return secrets.token_urlsafe(nbytes or settings.SESSION_TOKEN_BYTES)


class SessionAuthenticator:
    """
    Issues, verifies and revokes opaque session tokens.

    A session is Active until it expires (checked lazily on verify) or is
    revoked; both are terminal. Verification always re-reads the user so a
    ban takes effect on the very next request.
    """

    def __init__(
        self,
        session_repo: SessionRepository,
        user_repo: UserRepository,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.session_repo = session_repo
        self.user_repo = user_repo
        self._now = clock or (lambda: datetime.now(timezone.utc))

    def session_lifetime(self, remember: bool) -> timedelta:
        days = settings.SESSION_REMEMBER_TTL_DAYS if remember else settings.SESSION_TTL_DAYS
        return timedelta(days=days)

    async def issue(self, user_id: UUID, remember: bool = False) -> IssuedSession:
        """Create a session for the user and return the raw token once."""
        token = generate_session_token()
        issued_at = self._now()
        expires_at = issued_at + self.session_lifetime(remember)

        user_session = UserSession(
            user_id=user_id,
            token_hash=hash_session_token(token),
            remember=remember,
            issued_at=issued_at,
            expires_at=expires_at,
        )
        try:
            await self.session_repo.create(user_session)
        except SQLAlchemyError as e:
            logger.error(
                f"Could not persist session: {e}",
                extra={"user_id": str(user_id), "event": "persistence_failure"},
            )
            raise PersistenceFailure("issue_session", e) from e

        return IssuedSession(token=token, expires_at=expires_at)

    async def verify(self, token: Optional[str]) -> SessionVerification:
        """
        Resolve a token to its live user.

        Unknown or revoked tokens give INVALID_SESSION, tokens past their
        expiry give SESSION_EXPIRED (never renewed), banned owners give
        ACCOUNT_BANNED.
        """
        if not token:
            return SessionVerification(failure=AuthFailure.INVALID_SESSION)

        try:
            user_session = await self.session_repo.get_by_token_hash(hash_session_token(token))
            if not user_session:
                return SessionVerification(failure=AuthFailure.INVALID_SESSION)

            if ensure_aware(user_session.expires_at) <= self._now():
                return SessionVerification(failure=AuthFailure.SESSION_EXPIRED)

            user = await self.user_repo.get_by_id(user_session.user_id)
        except SQLAlchemyError as e:
            logger.error(f"Session lookup failed: {e}", extra={"event": "persistence_failure"})
            raise PersistenceFailure("verify_session", e) from e

        if not user:
            return SessionVerification(failure=AuthFailure.INVALID_SESSION)
        if user.is_banned:
            return SessionVerification(failure=AuthFailure.ACCOUNT_BANNED)

        return SessionVerification(user=user)

    async def revoke(self, token: Optional[str]) -> None:
        """End a session. Unknown or already revoked tokens are a no-op."""
        if not token:
            return
        try:
            await self.session_repo.delete_by_token_hash(hash_session_token(token))
        except SQLAlchemyError as e:
            logger.error(f"Session revoke failed: {e}", extra={"event": "persistence_failure"})
            raise PersistenceFailure("revoke_session", e) from e

    async def purge_expired(self) -> int:
        """Delete expired sessions. Storage hygiene only; verify never needs it."""
        try:
            return await self.session_repo.delete_expired(self._now())
        except SQLAlchemyError as e:
            logger.error(f"Expired session purge failed: {e}", extra={"event": "persistence_failure"})
            raise PersistenceFailure("purge_expired_sessions", e) from e
