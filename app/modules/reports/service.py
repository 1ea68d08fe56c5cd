# app/modules/reports/service.py

from datetime import datetime, timedelta, timezone
from typing import List, Optional
from uuid import UUID

from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from app.core.config import settings
from app.core.middleware.logging import logger
from app.core.middleware.rate_limiter import FixedWindowRateLimiter
from app.core.utils.exceptions import CustomException, PersistenceFailure
from app.modules.moderation.service import ModerationService
from app.modules.reports.models import Report
from app.modules.reports.repository import ReportRepository
from app.modules.reports.schemas import ReportCreate
from app.modules.shared.enums import ReportType
from app.modules.user.models import User

AUTO_WARNING_REASON = "reported_inappropriate_content"


class ReportService:
    def __init__(
        self,
        report_repo: ReportRepository,
        moderation_service: ModerationService,
        rate_limiter: Optional[FixedWindowRateLimiter] = None,
    ):
        self.report_repo = report_repo
        self.moderation_service = moderation_service
        self.rate_limiter = rate_limiter

    async def submit_report(self, reporter: User, report_create: ReportCreate) -> Report:
        """
        File a report and apply the automatic action for its type.

        An `inappropriate_content` report against a user issues that user a
        warning in the same transaction as the report row, so on failure
        neither is stored and the submission can be retried. A submission
        that is not stored does not count against the hourly limit.

        Raises:
            HTTPException: 400 when reporting yourself, 404 if the reported user
                or item does not exist, 429 above the hourly report limit.
            PersistenceFailure: If storage fails.
        """
        # Read before any rollback can expire the session-bound user
        reporter_id = reporter.id

        if report_create.reported_user_id and report_create.reported_user_id == reporter_id:
            CustomException.e400_bad_request("You cannot report yourself.")

        rate_key = await self._check_rate_limit(reporter_id)
        try:
            report = await self._store_report(reporter_id, report_create)
        except (HTTPException, PersistenceFailure):
            await self._release_rate_limit(rate_key)
            raise

        logger.info(
            f"Report filed ({report_create.report_type.value})",
            extra={"user_id": str(reporter_id), "event": "report_submitted"},
        )
        return report

    async def _store_report(self, reporter_id: UUID, report_create: ReportCreate) -> Report:
        report = Report(
            reporter_id=reporter_id,
            reported_user_id=report_create.reported_user_id,
            reported_item_id=report_create.reported_item_id,
            report_type=report_create.report_type,
            description=report_create.description,
            evidence_urls=report_create.evidence_urls,
        )  # type: ignore

        try:
            await self.report_repo.add(report)
        except IntegrityError:
            await self.report_repo.rollback()
            CustomException.e404_not_found("The reported user or item does not exist.")
        except SQLAlchemyError as e:
            await self.report_repo.rollback()
            logger.error(f"Could not stage report: {e}", extra={"user_id": str(reporter_id), "event": "persistence_failure"})
            raise PersistenceFailure("submit_report", e) from e

        if report_create.report_type == ReportType.INAPPROPRIATE_CONTENT and report_create.reported_user_id:
            # Commits the staged report together with the warning. No retry:
            # a rollback inside would discard the report row.
            await self.moderation_service.issue_warning(
                report_create.reported_user_id, AUTO_WARNING_REASON, retry_on_transient=False
            )
        else:
            try:
                await self.report_repo.commit()
            except SQLAlchemyError as e:
                await self.report_repo.rollback()
                logger.error(f"Could not save report: {e}", extra={"user_id": str(reporter_id), "event": "persistence_failure"})
                raise PersistenceFailure("submit_report", e) from e

        return report

    async def get_user_reports(self, reporter: User) -> List[Report]:
        return await self.report_repo.get_by_reporter(reporter.id)

    async def cleanup_old_reports(self, now: Optional[datetime] = None) -> int:
        """Delete resolved and dismissed reports past the retention window."""
        now = now or datetime.now(timezone.utc)
        cutoff = now - timedelta(days=settings.REPORT_RETENTION_DAYS)
        return await self.report_repo.delete_closed_before(cutoff)

    async def _check_rate_limit(self, reporter_id: UUID) -> Optional[str]:
        if not self.rate_limiter:
            return None
        key = f"report_rate:{reporter_id}"
        allowed, _ = await self.rate_limiter.hit(key)
        if not allowed:
            minutes = max(1, (await self.rate_limiter.reset_in(key)) // 60)
            CustomException.e429_too_many_requests(
                f"Too many reports. Please try again in {minutes} minute(s)."
            )
        return key

    async def _release_rate_limit(self, key: Optional[str]) -> None:
        if self.rate_limiter and key:
            await self.rate_limiter.release(key)
