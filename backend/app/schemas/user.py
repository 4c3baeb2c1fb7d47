"""User directory Pydantic schemas."""
from datetime import datetime
from typing import Optional
from pydantic import EmailStr

from app.models.user import UserRole
from app.schemas.common import CamelModel


class UserResponse(CamelModel):
    """A user directory entry."""
    uid: str
    email: str
    name: str
    phone: str
    role: UserRole
    company: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class ProfileUpdateRequest(CamelModel):
    """Request body for updating the caller's profile (partial update)."""
    name: Optional[str] = None
    phone: Optional[str] = None


class CreateEmployerRequest(CamelModel):
    """Admin request creating an employer account directly."""
    email: EmailStr
    password: str
    name: Optional[str] = None
    phone: Optional[str] = None
    company: Optional[str] = None
