# app/infra/database/session.py

from typing import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker

from app.core.config import settings
from app.core.middleware.logging import logger

# Async engine
async_engine = create_async_engine(settings.database_url, echo=False, pool_pre_ping=True)

# Async session factory
AsyncSessionLocal = sessionmaker(
    bind=async_engine,
    class_=AsyncSession,
    expire_on_commit=False,
) # type: ignore

# Set UTC timezone for DB
async def set_utc_timezone():
    async with AsyncSessionLocal() as session:
        await session.execute(text("SET TIMEZONE TO 'UTC';"))
        await session.commit()

async def get_db_status() -> bool:
    """Return True if the database answers a trivial query."""
    try:
        async with AsyncSessionLocal() as session:
            await session.execute(text("SELECT 1"))
        return True
    except (SQLAlchemyError, OSError) as e:
        logger.error(f"Database health check failed: {e}")
        return False

# Dependency for FastAPI
async def get_session() -> AsyncGenerator[AsyncSession, None]:
    async with AsyncSessionLocal() as session:
        yield session
