"""User profile schemas."""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class UserResponse(BaseModel):
    id: str
    email: Optional[str] = None
    name: Optional[str] = None
    photo_url: Optional[str] = None
    email_verified: bool = False
    role: str
    plan_id: Optional[uuid.UUID] = None
    plan_expiry_date: Optional[datetime] = None
    created_at: datetime

    class Config:
        from_attributes = True


class ProfileUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    photo_url: Optional[str] = Field(None, max_length=2048)


class RoleUpdate(BaseModel):
    role: str = Field(..., min_length=1, max_length=32)
