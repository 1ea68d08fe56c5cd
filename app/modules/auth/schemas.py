# app/modules/auth/schemas.py

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, SecretStr, field_validator

from app.modules.shared.enums import AuthFailure
from app.modules.shared.helpers import validate_display_name, validate_password_strength


class RegisterRequest(BaseModel):
    """Schema for user registration with password and name validation."""

    email: EmailStr
    password: SecretStr
    name: str
    university: Optional[str] = None

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: SecretStr) -> SecretStr:
        validate_password_strength(v.get_secret_value())
        return v

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return validate_display_name(v)

    @field_validator("university")
    @classmethod
    def strip_university(cls, v: Optional[str]) -> Optional[str]:
        return v.strip() or None if v else None


class LoginRequest(BaseModel):
    """Schema for user login requests."""

    email: EmailStr
    password: SecretStr
    remember_me: bool = False


class IssuedSession(BaseModel):
    """Opaque token handed to the client with its expiry."""
    token: str
    expires_at: datetime


class SessionVerification(BaseModel):
    """
    Result of checking a session token: exactly one of `user` or `failure`.
    """
    user: Optional[Any] = None
    failure: Optional[AuthFailure] = None

    model_config = ConfigDict(arbitrary_types_allowed=True)

    @property
    def ok(self) -> bool:
        return self.failure is None and self.user is not None
