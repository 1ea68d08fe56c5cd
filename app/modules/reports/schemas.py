# app/modules/reports/schemas.py

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from app.modules.shared.enums import ReportStatus, ReportType


class ReportCreate(BaseModel):
    """Schema for filing an abuse report."""

    report_type: ReportType
    reported_item_id: Optional[UUID] = None
    reported_user_id: Optional[UUID] = None
    description: str
    evidence_urls: list[str] = Field(default_factory=list, max_length=10)

    @field_validator("description")
    @classmethod
    def validate_description(cls, v: str) -> str:
        v = (v or "").strip()
        if not v:
            raise ValueError("Please provide a description of the issue")
        if len(v) < 10:
            raise ValueError("Description must be at least 10 characters")
        if len(v) > 1000:
            raise ValueError("Description must be less than 1000 characters")
        return v

    @model_validator(mode="after")
    def require_target(self) -> "ReportCreate":
        if not self.reported_item_id and not self.reported_user_id:
            raise ValueError("You must report either an item or a user")
        return self


class ReportResponse(BaseModel):
    id: UUID
    report_type: ReportType
    status: ReportStatus
    reported_item_id: Optional[UUID] = None
    reported_user_id: Optional[UUID] = None
    description: str
    created_at: Optional[datetime] = None
    resolved_at: Optional[datetime] = None
    admin_notes: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)
