# app/modules/auth/service.py

from typing import Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from app.core.middleware.logging import logger
from app.core.security.hashing import hash_password, verify_password
from app.core.utils.exceptions import CustomException, PersistenceFailure
from app.core.utils.helpers import mask_email
from app.modules.auth.schemas import IssuedSession, LoginRequest, RegisterRequest
from app.modules.auth.sessions import SessionAuthenticator
from app.modules.user.models import User
from app.modules.user.repository import UserRepository


class AuthService:
    def __init__(self, user_repo: UserRepository, session_authenticator: SessionAuthenticator):
        self.user_repo = user_repo
        self.session_authenticator = session_authenticator

    async def register_new_user(self, register_request: RegisterRequest) -> tuple[User, IssuedSession]:
        email = str(register_request.email).lower().strip()
        if await self.user_repo.get_by_email_or_none(email):
            CustomException.e409_conflict("User already exists with this email.")

        new_user = User(
            email=email,
            password_hash=hash_password(register_request.password.get_secret_value()),
            full_name=register_request.name,
            university=register_request.university,
        )  # type: ignore

        try:
            user = await self.user_repo.create(new_user)
        except IntegrityError:
            CustomException.e409_conflict("User already exists with this email.")
        except SQLAlchemyError as e:
            logger.error(f"Registration failed: {e}", extra={"event": "persistence_failure"})
            raise PersistenceFailure("register_user", e) from e

        issued = await self.session_authenticator.issue(user.id, remember=False)
        logger.info(
            f"Account created for {mask_email(email)}",
            extra={"user_id": str(user.id), "event": "user_registered"},
        )
        return user, issued

    async def login_existing_user(
        self, login_request: LoginRequest, hashed_ip: Optional[str] = None
    ) -> tuple[User, IssuedSession]:
        user = await self.user_repo.get_by_email_or_none(str(login_request.email))

        if not user or not verify_password(login_request.password.get_secret_value(), user.password_hash):
            logger.warning(
                "Failed login attempt",
                extra={"ip_anonymized": hashed_ip, "event": "login_failed"},
            )
            CustomException.e401_unauthorized("Invalid email or password.")

        if user.is_banned:
            logger.warning(
                "Login attempt on suspended account",
                extra={"user_id": str(user.id), "ip_anonymized": hashed_ip, "event": "login_banned"},
            )
            CustomException.e403_forbidden("Account has been suspended. Please contact support.")

        issued = await self.session_authenticator.issue(user.id, remember=login_request.remember_me)
        return user, issued

    async def logout(self, token: Optional[str]) -> None:
        await self.session_authenticator.revoke(token)
