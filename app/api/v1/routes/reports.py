# app/api/v1/routes/reports.py

from typing import Any

from fastapi import APIRouter, Depends, status

from app.api.dependencies import get_current_user, get_report_service
from app.core.utils.response import standard_response
from app.modules.reports.schemas import ReportCreate, ReportResponse
from app.modules.reports.service import ReportService
from app.modules.user.models import User

router = APIRouter()


@router.post("", status_code=status.HTTP_201_CREATED)
async def submit_report(
    report_create: ReportCreate,
    current_user: User = Depends(get_current_user),
    report_service: ReportService = Depends(get_report_service),
) -> dict[str, Any]:
    """
    File an abuse report against an item or a user.

    Raises:
        HTTPException: 400 Bad Request when reporting yourself.
        HTTPException: 404 Not Found if the reported user does not exist.
        HTTPException: 422 Unprocessable Entity on an invalid type, description or missing target.
        HTTPException: 429 Too Many Requests above the hourly report limit.
    """
    report = await report_service.submit_report(current_user, report_create)

    return standard_response(
        status="success",
        message="Report submitted successfully. We will review it shortly.",
        data={"report_id": str(report.id)},
    )


@router.get("/mine", status_code=status.HTTP_200_OK)
async def get_my_reports(
    current_user: User = Depends(get_current_user),
    report_service: ReportService = Depends(get_report_service),
) -> dict[str, Any]:
    """List the reports filed by the current user, newest first."""
    reports = await report_service.get_user_reports(current_user)

    return standard_response(
        status="success",
        message="Reports retrieved successfully.",
        data=[ReportResponse.model_validate(r).model_dump(mode="json") for r in reports],
    )
