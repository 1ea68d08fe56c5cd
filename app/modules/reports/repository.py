# app/modules/reports/repository.py

from datetime import datetime
from typing import List
from uuid import UUID

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from app.modules.reports.models import Report
from app.modules.shared.enums import ReportStatus


class ReportRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def add(self, report: Report) -> Report:
        """Stage a report in the current transaction without committing."""
        self.db.add(report)
        await self.db.flush()
        return report

    async def commit(self) -> None:
        await self.db.commit()

    async def rollback(self) -> None:
        await self.db.rollback()

    async def get_by_reporter(self, reporter_id: UUID) -> List[Report]:
        """Reports filed by a user, newest first."""
        stmt = (
            select(Report)
            .where(Report.reporter_id == reporter_id)
            .order_by(Report.created_at.desc())
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def delete_closed_before(self, cutoff: datetime) -> int:
        """Delete resolved or dismissed reports created before the cutoff."""
        stmt = delete(Report).where(
            Report.status.in_([ReportStatus.RESOLVED, ReportStatus.DISMISSED]),
            Report.created_at < cutoff,
        )
        result = await self.db.execute(stmt)
        await self.db.commit()
        return result.rowcount or 0
