# app/api/dependencies.py
from typing import Optional

from redis.asyncio import Redis
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.middleware.rate_limiter import FixedWindowRateLimiter
from app.core.utils.exceptions import CustomException
from app.infra.database.session import get_session
from app.modules.auth.repository import SessionRepository
from app.modules.auth.service import AuthService
from app.modules.auth.sessions import SessionAuthenticator
from app.modules.moderation.repository import ModerationRepository
from app.modules.moderation.service import ModerationService
from app.modules.moderation.validator import ContentValidator, content_validator
from app.modules.reports.repository import ReportRepository
from app.modules.reports.service import ReportService
from app.modules.shared.enums import AuthFailure
from app.modules.user.models import User
from app.modules.user.repository import UserRepository


bearer_scheme = HTTPBearer(auto_error=False)


async def get_redis(request: Request) -> Redis:
    """Dependency for redis client in app's instance"""
    return request.app.state.redis


def get_session_token(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Optional[str]:
    """Session token from the cookie, falling back to a bearer header."""
    token = request.cookies.get(settings.SESSION_COOKIE_NAME)
    if token:
        return token
    if credentials and credentials.credentials:
        return credentials.credentials
    return None


# ========================
# SERVICES
# ========================
async def get_session_authenticator(db: AsyncSession = Depends(get_session)) -> SessionAuthenticator:
    """Dependency factory for session authenticator."""
    return SessionAuthenticator(SessionRepository(db), UserRepository(db))

async def get_auth_service(
    db: AsyncSession = Depends(get_session),
    authenticator: SessionAuthenticator = Depends(get_session_authenticator),
) -> AuthService:
    """Dependency factory for auth service."""
    return AuthService(UserRepository(db), authenticator)

async def get_moderation_service(db: AsyncSession = Depends(get_session)) -> ModerationService:
    """Dependency factory for moderation service."""
    return ModerationService(ModerationRepository(db))

async def get_report_service(
    db: AsyncSession = Depends(get_session),
    redis: Redis = Depends(get_redis),
) -> ReportService:
    """Dependency factory for report service; shares one DB session with moderation."""
    rate_limiter = FixedWindowRateLimiter(redis, limit=settings.REPORT_RATE_LIMIT_PER_HOUR, window=3600)
    return ReportService(ReportRepository(db), ModerationService(ModerationRepository(db)), rate_limiter)

def get_content_validator() -> ContentValidator:
    """Dependency for the shared content validator."""
    return content_validator


# ========================
# AUTHENTICATION
# ========================
async def get_current_user(
    request: Request,
    token: Optional[str] = Depends(get_session_token),
    authenticator: SessionAuthenticator = Depends(get_session_authenticator),
) -> User:
    """
    Resolve the request's session token to the live user.

    Banned accounts get a distinct 403; every other failure is a 401.
    """
    verification = await authenticator.verify(token)

    if verification.failure == AuthFailure.ACCOUNT_BANNED:
        CustomException.e403_forbidden("Your account has been suspended.")
    if not verification.ok:
        CustomException.e401_unauthorized("Please log in again.")

    # Picked up by the request logging middleware
    request.state.user_id = str(verification.user.id)
    return verification.user
