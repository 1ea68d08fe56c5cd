# app/modules/reports/models.py

from datetime import datetime, timezone
from typing import Optional
from uuid import uuid4, UUID

from sqlalchemy import JSON, Column, DateTime, func
from sqlmodel import Field, SQLModel

from app.modules.shared.enums import ReportStatus, ReportType


class Report(SQLModel, table=True):
    """
    Abuse report filed by a user against an item and/or another user.
    Relationships:
    - reporter_id : one user to many filed reports
    - reported_user_id : one user to many reports against them
    """
    __tablename__ = "report"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    reporter_id: UUID = Field(foreign_key="app_user.id", index=True)
    reported_user_id: Optional[UUID] = Field(default=None, foreign_key="app_user.id", index=True)
    reported_item_id: Optional[UUID] = Field(default=None, foreign_key="item.id")

    report_type: ReportType = Field(sa_column=Column(ReportType.sa_enum(), nullable=False))
    status: ReportStatus = Field(
        default=ReportStatus.PENDING,
        sa_column=Column(
            ReportStatus.sa_enum(),
            nullable=False,
            server_default=ReportStatus.PENDING.name,
        ),
    )
    description: str
    evidence_urls: list[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    admin_notes: Optional[str] = None

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_column=Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True),
    )
    resolved_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime(timezone=True)))
