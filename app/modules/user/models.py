# app/modules/user/models.py

from datetime import datetime, timezone
from typing import Optional
from uuid import uuid4, UUID

from sqlalchemy import Column, DateTime, func
from sqlmodel import Field, SQLModel


class UserBase(SQLModel):
    """Base user model containing core authentication and identity fields."""
    id: UUID = Field(default_factory=uuid4, primary_key=True)
    email: str = Field(index=True, unique=True)
    full_name: Optional[str] = Field(default=None)
    university: Optional[str] = Field(default=None)
    password_hash: str


class User(UserBase, table=True):
    """
    Marketplace account with its moderation state.

    `warning_count` only ever grows and `is_banned` is never cleared; both are
    written by the moderation service alone.
    """
    __tablename__ = "app_user"

    warning_count: int = Field(default=0)
    is_banned: bool = Field(default=False)
    ban_reason: Optional[str] = None
    banned_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime(timezone=True)))

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_column=Column(DateTime(timezone=True), nullable=False, server_default=func.now()),
    )
    updated_at: Optional[datetime] = Field(
        default=None,
        sa_column=Column(
            DateTime(timezone=True),
            server_default=func.now(),
            onupdate=func.now(),
        )
    )
