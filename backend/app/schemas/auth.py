"""Authentication-related Pydantic schemas."""
from typing import Optional
from pydantic import EmailStr

from app.schemas.common import CamelModel


class RegisterRequest(CamelModel):
    """Self-signup as a student or employer."""
    email: EmailStr
    password: str
    name: Optional[str] = None
    phone: Optional[str] = None
    role: str = "student"
    company: Optional[str] = None  # Required for employers


class LoginRequest(CamelModel):
    """Email and password login."""
    email: EmailStr
    password: str


class AuthResponse(CamelModel):
    """Response after successful authentication."""
    access_token: str
    token_type: str = "bearer"
    user_id: str
    email: str
    name: Optional[str] = None
    role: Optional[str] = None
    redirect_to: str
