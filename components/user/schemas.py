"""Pydantic schemas for user data validation."""

from datetime import datetime
from typing import Optional
from pydantic import EmailStr, Field, field_validator

from components.core.schemas import CamelModel


class UserBase(CamelModel):
    """Base user schema."""
    name: str = Field(..., min_length=2, max_length=50)
    email: EmailStr

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        return v.strip()

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.lower()


class UserCreate(UserBase):
    """Schema for user registration."""
    password: str = Field(..., min_length=6)
    currency: str = Field("USD", min_length=3, max_length=3)


class UserLogin(CamelModel):
    """Schema for login with email and password."""
    email: EmailStr
    password: str = Field(..., min_length=1)


class UserUpdate(CamelModel):
    """Schema for profile updates."""
    name: Optional[str] = Field(None, min_length=2, max_length=50)
    currency: Optional[str] = Field(None, min_length=3, max_length=3)
    monthly_budget: Optional[float] = Field(None, ge=0)


class User(UserBase):
    """Schema for user response."""
    id: int
    currency: str
    monthly_budget: Optional[float] = None
    created_at: Optional[datetime] = None
    last_login: Optional[datetime] = None


class UserWithToken(User):
    """Schema for user response after register/login."""
    access_token: str
    token_type: str = "bearer"


class PasswordChange(CamelModel):
    """Schema for changing the current user's password."""
    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=6)
