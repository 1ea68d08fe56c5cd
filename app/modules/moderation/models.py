# app/modules/moderation/models.py

from datetime import datetime, timezone
from uuid import uuid4, UUID

from sqlalchemy import Column, DateTime, func
from sqlmodel import Field, SQLModel


class UserWarning(SQLModel, table=True):
    """
    One issued warning. The running total lives on `User.warning_count`.
    Relationships:
    - user_id : one user to many warnings
    """
    __tablename__ = "user_warning"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    user_id: UUID = Field(foreign_key="app_user.id", index=True)
    reason: str
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_column=Column(DateTime(timezone=True), nullable=False, server_default=func.now()),
    )


class Item(SQLModel, table=True):
    """
    Marketplace listing, owned by the listings service.
    Moderation only ever flips `is_available` off for banned sellers.
    """
    __tablename__ = "item"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    seller_id: UUID = Field(foreign_key="app_user.id", index=True)
    title: str
    is_available: bool = Field(default=True)
