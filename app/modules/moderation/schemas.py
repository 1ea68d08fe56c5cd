# app/modules/moderation/schemas.py

from typing import Optional

from pydantic import BaseModel, Field


class ValidationResult(BaseModel):
    """Outcome of listing validation; errors are ordered by rule."""
    valid: bool
    errors: list[str] = Field(default_factory=list)


class MessageValidation(BaseModel):
    """Outcome of message validation; at most one error."""
    valid: bool
    error: Optional[str] = None


class ListingContentRequest(BaseModel):
    title: str = ""
    description: str = ""


class MessageContentRequest(BaseModel):
    content: str = ""
