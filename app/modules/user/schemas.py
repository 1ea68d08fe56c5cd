# app/modules/user/schemas.py

from typing import Optional
from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict


class UserResponse(BaseModel):
    """Public view of an account; moderation internals stay server-side."""
    id: UUID
    email: str
    full_name: Optional[str] = None
    university: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
