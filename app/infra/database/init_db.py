# app/infra/database/init_db.py

from sqlmodel import SQLModel

from app.infra.database.session import async_engine

# Register every table on the shared metadata
from app.modules.user.models import User  # noqa: F401
from app.modules.auth.models import UserSession  # noqa: F401
from app.modules.moderation.models import Item, UserWarning  # noqa: F401
from app.modules.reports.models import Report  # noqa: F401


async def create_tables():
    """Create missing tables. Development only; other environments manage schema externally."""
    async with async_engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    print("\n[DB INIT] (i) Tables ensured.", flush=True)
