"""Pydantic schemas for authentication."""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, EmailStr, Field


class SignupRequest(BaseModel):
    """Member sign-up request schema."""

    model_config = {"str_strip_whitespace": True}

    first_name: str = Field(..., min_length=2, max_length=50)
    last_name: str = Field(..., min_length=2, max_length=50)
    email: EmailStr
    external_id: str = Field(..., min_length=3, max_length=20, description="Student number")
    program: str = Field(..., min_length=2, max_length=100)
    year: int = Field(..., ge=1, le=4)
    password: str = Field(..., min_length=6, description="Password (minimum 6 characters)")


class LoginRequest(BaseModel):
    """Login request schema."""

    email: EmailStr
    password: str = Field(..., min_length=1, description="Password")


class UserResponse(BaseModel):
    """User response schema (for /me and sign-up)."""

    id: int
    email: str
    first_name: str
    last_name: str
    full_name: str
    external_id: Optional[str] = None
    program: Optional[str] = None
    year: Optional[int] = None
    role: str
    is_admin: bool
    is_active: bool
    created_at: Optional[datetime] = None

    model_config = {
        "from_attributes": True
    }


class LoginResponse(BaseModel):
    """Login and sign-up response schema."""

    message: str
    user: UserResponse
    expires_at: datetime


class LogoutResponse(BaseModel):
    """Logout response schema."""

    message: str


class PasswordChangeRequest(BaseModel):
    """Password change request schema."""

    current_password: str = Field(..., min_length=1, description="Current password")
    new_password: str = Field(..., min_length=6, description="New password (minimum 6 characters)")


class PasswordChangeResponse(BaseModel):
    """Password change response schema."""

    message: str
    success: bool = True
