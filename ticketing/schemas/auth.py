"""
Pydantic schemas for authentication and user profile endpoints.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

from ticketing.models.user import UserType


class RegisterRequest(BaseModel):
    """Schema for user registration."""
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=128)
    user_type: UserType = UserType.ATTENDEE
    first_name: str = Field(..., min_length=1, max_length=50)
    last_name: str = Field(..., min_length=1, max_length=50)
    phone: Optional[str] = Field(None, max_length=20)

    @field_validator('email')
    @classmethod
    def normalize_email(cls, v):
        return v.lower()

    @field_validator('first_name', 'last_name')
    @classmethod
    def strip_names(cls, v):
        v = v.strip()
        if not v:
            raise ValueError('Name cannot be blank')
        return v


class LoginRequest(BaseModel):
    """Schema for user login."""
    email: EmailStr
    password: str = Field(..., min_length=1)

    @field_validator('email')
    @classmethod
    def normalize_email(cls, v):
        return v.lower()


class ProfileUpdate(BaseModel):
    """Schema for profile updates. First and last name are required."""
    first_name: str = Field(..., min_length=1, max_length=50)
    last_name: str = Field(..., min_length=1, max_length=50)
    phone: Optional[str] = Field(None, max_length=20)

    @field_validator('first_name', 'last_name')
    @classmethod
    def strip_names(cls, v):
        v = v.strip()
        if not v:
            raise ValueError('Name cannot be blank')
        return v


class PasswordChange(BaseModel):
    """Schema for password change."""
    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=8, max_length=128)


class UserResponse(BaseModel):
    """Public user representation, never includes the password hash."""
    id: int
    email: str
    user_type: UserType
    first_name: str
    last_name: str
    phone: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class TokenData(BaseModel):
    """Schema for token payload data."""
    user_id: int
    user_type: UserType
