# app/core/tasks/cron_jobs.py

from app.core.middleware.logging import logger
from app.infra.database.session import AsyncSessionLocal
from app.modules.auth.repository import SessionRepository
from app.modules.auth.sessions import SessionAuthenticator
from app.modules.moderation.repository import ModerationRepository
from app.modules.moderation.service import ModerationService
from app.modules.reports.repository import ReportRepository
from app.modules.reports.service import ReportService
from app.modules.user.repository import UserRepository


async def purge_expired_sessions() -> None:
    """Remove sessions past their expiry. Verification already rejects them."""
    async with AsyncSessionLocal() as db:
        authenticator = SessionAuthenticator(SessionRepository(db), UserRepository(db))
        purged = await authenticator.purge_expired()
    logger.info(f"Purged {purged} expired session(s)", extra={"event": "session_purge"})


async def cleanup_old_reports() -> None:
    """Delete resolved/dismissed reports past the retention window."""
    async with AsyncSessionLocal() as db:
        service = ReportService(ReportRepository(db), ModerationService(ModerationRepository(db)))
        deleted = await service.cleanup_old_reports()
    logger.info(f"Deleted {deleted} closed report(s)", extra={"event": "report_cleanup"})
