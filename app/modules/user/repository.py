# app/modules/user/repository.py

from typing import Optional
from uuid import UUID

from sqlalchemy.future import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.user.models import User


class UserRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(self, user: User) -> User:
        """Add a new user to the database"""
        self.db.add(user)
        await self.db.commit()
        await self.db.refresh(user)
        return user

    async def get_by_id(self, id: UUID) -> Optional[User]:
        """
        Retrieve a User by ID.

        Always reads the row from the database so moderation flags are current.
        """
        stmt = select(User).where(User.id == id).execution_options(populate_existing=True)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_email_or_none(self, email: str) -> Optional[User]:
        """Retrieve a User by email or return None"""
        stmt = select(User).where(User.email == email.lower().strip())
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()
