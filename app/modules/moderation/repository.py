# app/modules/moderation/repository.py

from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy import delete, func, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from app.modules.auth.models import UserSession
from app.modules.moderation.models import Item, UserWarning
from app.modules.user.models import User


class ModerationRepository:
    """
    Writes behind warnings and bans.

    Nothing here commits on its own: the service stages a whole escalation
    and then calls `commit` or `rollback` once.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def increment_warning_count(self, user_id: UUID) -> Optional[int]:
        """
        Atomically add one warning and return the new total.

        Single UPDATE ... RETURNING, so concurrent warnings for the same user
        are serialized by the row lock. Returns None for an unknown user.
        """
        stmt = (
            update(User)
            .where(User.id == user_id)
            .values(warning_count=User.warning_count + 1, updated_at=func.now())
            .returning(User.warning_count)
            .execution_options(synchronize_session=False)
        )
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def add_warning(self, user_id: UUID, reason: str, created_at: datetime) -> UserWarning:
        """Stage the warning record (reason and timestamp)."""
        warning = UserWarning(user_id=user_id, reason=reason, created_at=created_at)
        self.db.add(warning)
        await self.db.flush()
        return warning

    async def mark_banned(self, user_id: UUID, reason: str, banned_at: datetime) -> bool:
        """Flag the account as banned. Returns False for an unknown user."""
        stmt = (
            update(User)
            .where(User.id == user_id)
            .values(is_banned=True, ban_reason=reason, banned_at=banned_at, updated_at=func.now())
            .returning(User.id)
            .execution_options(synchronize_session=False)
        )
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none() is not None

    async def delist_items(self, seller_id: UUID) -> int:
        """Mark every available item of the seller unavailable."""
        stmt = (
            update(Item)
            .where(Item.seller_id == seller_id, Item.is_available == True)  # noqa: E712
            .values(is_available=False)
            .execution_options(synchronize_session=False)
        )
        result = await self.db.execute(stmt)
        return result.rowcount or 0

    async def delete_sessions(self, user_id: UUID) -> int:
        """Drop every session of the user."""
        stmt = delete(UserSession).where(UserSession.user_id == user_id)
        result = await self.db.execute(stmt)
        return result.rowcount or 0

    async def get_moderation_state(self, user_id: UUID) -> Optional[tuple[int, bool]]:
        """Return (warning_count, is_banned) for the user, or None."""
        stmt = select(User.warning_count, User.is_banned).where(User.id == user_id)
        result = await self.db.execute(stmt)
        row = result.one_or_none()
        return (row[0], row[1]) if row else None

    async def commit(self) -> None:
        await self.db.commit()

    async def rollback(self) -> None:
        await self.db.rollback()
