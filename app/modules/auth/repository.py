# app/modules/auth/repository.py

from datetime import datetime
from typing import Optional

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from app.modules.auth.models import UserSession


class SessionRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(self, user_session: UserSession) -> UserSession:
        """Persist a new session binding"""
        self.db.add(user_session)
        await self.db.commit()
        await self.db.refresh(user_session)
        return user_session

    async def get_by_token_hash(self, token_hash: str) -> Optional[UserSession]:
        """Retrieve a session by the digest of its token"""
        stmt = select(UserSession).where(UserSession.token_hash == token_hash)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def delete_by_token_hash(self, token_hash: str) -> int:
        """Delete a session by token digest; deleting nothing is not an error"""
        stmt = delete(UserSession).where(UserSession.token_hash == token_hash)
        result = await self.db.execute(stmt)
        await self.db.commit()
        return result.rowcount or 0

    async def delete_expired(self, now: datetime) -> int:
        """Delete every session whose expiry has passed"""
        stmt = delete(UserSession).where(UserSession.expires_at <= now)
        result = await self.db.execute(stmt)
        await self.db.commit()
        return result.rowcount or 0
