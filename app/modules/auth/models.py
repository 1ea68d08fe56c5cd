# app/modules/auth/models.py

from datetime import datetime, timezone
from uuid import uuid4, UUID

from sqlalchemy import Column, DateTime
from sqlmodel import Field, SQLModel


class UserSession(SQLModel, table=True):
    """
    Server-side record of an opaque session token.
    Only the SHA-256 digest of the token is stored.
    Relationships:
    - user_id : one user to many sessions
    """
    __tablename__ = "user_session"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    user_id: UUID = Field(foreign_key="app_user.id", index=True)
    token_hash: str = Field(index=True, unique=True)
    remember: bool = Field(default=False)
    issued_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )
    expires_at: datetime = Field(sa_column=Column(DateTime(timezone=True), nullable=False, index=True))
