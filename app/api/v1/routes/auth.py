# app/api/v1/routes/auth.py

from datetime import datetime, timezone
from typing import Any, Optional

from fastapi import APIRouter, Depends, Request, Response, status

from app.api.dependencies import get_auth_service, get_current_user, get_session_token
from app.core.config import settings
from app.core.middleware.rate_limiter import limiter
from app.core.security.hashing import hash_ip
from app.core.utils.helpers import get_client_ip
from app.core.utils.response import standard_response
from app.modules.auth.schemas import IssuedSession, LoginRequest, RegisterRequest
from app.modules.auth.service import AuthService
from app.modules.user.models import User
from app.modules.user.schemas import UserResponse

router = APIRouter()


def set_session_cookie(response: Response, issued: IssuedSession) -> None:
    max_age = int((issued.expires_at - datetime.now(timezone.utc)).total_seconds())
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=issued.token,
        httponly=True,
        secure=settings.APP_ENV == "production",
        samesite="lax",
        max_age=max(max_age, 0),
        path="/",
    )


@router.post("/register", status_code=status.HTTP_201_CREATED)
@limiter.limit("2/minute")
async def register(
    request: Request,
    response: Response,
    register_request: RegisterRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> dict[str, Any]:
    """
    Register a new account and start a session.

    Args:
        register_request (RegisterRequest): Email, password, display name and optional university.

    Returns:
        dict(str, Any): The created user; the session token is set as a cookie.

    Raises:
        HTTPException: 409 Conflict if the email is already registered.
        HTTPException: 422 Unprocessable Entity on weak password or short name.
        HTTPException: 429 Too Many Requests if the rate limit is exceeded.
    """
    user, issued = await auth_service.register_new_user(register_request=register_request)
    set_session_cookie(response, issued)

    return standard_response(
        status="success",
        message="Account created successfully.",
        data={
            "user": UserResponse.model_validate(user).model_dump(mode="json"),
            "expires_at": issued.expires_at.isoformat(),
        },
    )


@router.post("/login", status_code=status.HTTP_200_OK)
@limiter.limit("5/minute")
async def login(
    request: Request,
    response: Response,
    login_request: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> dict[str, Any]:
    """
    Log in with email and password.

    A remembered session lasts 30 days, otherwise 7.

    Raises:
        HTTPException: 401 Unauthorized on wrong credentials.
        HTTPException: 403 Forbidden if the account is suspended.
        HTTPException: 429 Too Many Requests if the rate limit is exceeded.
    """
    hashed_ip = hash_ip(get_client_ip(request)) if request.client else None
    user, issued = await auth_service.login_existing_user(login_request, hashed_ip=hashed_ip)
    set_session_cookie(response, issued)

    return standard_response(
        status="success",
        message="Login successful.",
        data={
            "user": UserResponse.model_validate(user).model_dump(mode="json"),
            "expires_at": issued.expires_at.isoformat(),
        },
    )


@router.post("/logout", status_code=status.HTTP_200_OK)
async def logout(
    response: Response,
    token: Optional[str] = Depends(get_session_token),
    auth_service: AuthService = Depends(get_auth_service),
) -> dict[str, Any]:
    """Revoke the current session and clear the cookie. Always succeeds."""
    await auth_service.logout(token)
    response.delete_cookie(settings.SESSION_COOKIE_NAME, path="/")

    return standard_response(status="success", message="Logged out successfully.")


@router.get("/me", status_code=status.HTTP_200_OK)
async def me(current_user: User = Depends(get_current_user)) -> dict[str, Any]:
    """Return the user bound to the current session."""
    return standard_response(
        status="success",
        message="User details retrieved successfully.",
        data=UserResponse.model_validate(current_user).model_dump(mode="json"),
    )
