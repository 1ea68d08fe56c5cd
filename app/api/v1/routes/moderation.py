# app/api/v1/routes/moderation.py

from typing import Any

from fastapi import APIRouter, Depends, Request, status

from app.api.dependencies import get_content_validator, get_current_user
from app.core.middleware.rate_limiter import limiter
from app.core.utils.response import standard_response
from app.modules.moderation.schemas import ListingContentRequest, MessageContentRequest
from app.modules.moderation.validator import ContentValidator
from app.modules.user.models import User

router = APIRouter()


@router.post("/listings/validate", status_code=status.HTTP_200_OK)
@limiter.limit("30/minute")
async def validate_listing(
    request: Request,
    listing: ListingContentRequest,
    current_user: User = Depends(get_current_user),
    validator: ContentValidator = Depends(get_content_validator),
) -> dict[str, Any]:
    """
    Pre-check a listing's title and description.

    Returns every failing rule so the form can show all messages at once.
    """
    result = validator.validate_listing(listing.title, listing.description)

    return standard_response(
        status="success" if result.valid else "error",
        message="Listing content is valid." if result.valid else "Listing content is invalid.",
        data=result.model_dump(),
    )


@router.post("/messages/validate", status_code=status.HTTP_200_OK)
@limiter.limit("60/minute")
async def validate_message(
    request: Request,
    message: MessageContentRequest,
    current_user: User = Depends(get_current_user),
    validator: ContentValidator = Depends(get_content_validator),
) -> dict[str, Any]:
    """Pre-check a chat message; reports only the first failing rule."""
    result = validator.validate_message(message.content)

    return standard_response(
        status="success" if result.valid else "error",
        message=result.error or "Message content is valid.",
        data=result.model_dump(),
    )
