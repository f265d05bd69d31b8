"""
Pydantic schemas for account registration, sign-in and listing.
"""

from pydantic import BaseModel, ConfigDict, EmailStr, Field, UUID4
from typing import Optional
from datetime import datetime

from app.models.user import UserRole


class UserRegisterRequest(BaseModel):
    """Request schema for user registration."""
    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(
        ...,
        min_length=8,
        max_length=72,  # bcrypt limit
        description="Password must be 8-72 characters"
    )
    pic: Optional[str] = None


class UserLoginRequest(BaseModel):
    """Request schema for sign-in."""
    email: EmailStr
    password: str = Field(..., min_length=1)


class TokenResponse(BaseModel):
    """Signed bearer token returned on sign-in."""
    token: str
    message: str


class UserResponse(BaseModel):
    """User profile response (no credential field)."""
    model_config = ConfigDict(from_attributes=True)

    id: UUID4
    name: Optional[str] = None
    email: str
    role: UserRole
    pic: Optional[str] = None
    created_at: datetime


class RegisterResponse(BaseModel):
    """Response for a successful registration."""
    message: str
    user: UserResponse
