"""
Pydantic schemas for users and authentication.
"""

from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import List, Optional

from app.schemas.base import CamelModel, RequestModel, reject_null


class UserRegisterRequest(RequestModel):
    """Request schema for self-registration (never grants admin)."""
    username: str = Field(..., min_length=1, max_length=25)
    password: str = Field(..., min_length=5, max_length=72)  # bcrypt limit
    first_name: str = Field(..., min_length=1, max_length=30)
    last_name: str = Field(..., min_length=1, max_length=30)
    email: EmailStr


class UserCreateRequest(UserRegisterRequest):
    """Request schema for admins creating users."""
    is_admin: bool = False


class UserUpdateRequest(RequestModel):
    """Partial profile update; username and admin flag cannot change here."""
    password: Optional[str] = Field(None, min_length=5, max_length=72)
    first_name: Optional[str] = Field(None, min_length=1, max_length=30)
    last_name: Optional[str] = Field(None, min_length=1, max_length=30)
    email: Optional[EmailStr] = None

    @field_validator("password", "first_name", "last_name", "email")
    @classmethod
    def validate_not_null(cls, v):
        return reject_null(v)


class TokenRequest(RequestModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class TokenResponse(CamelModel):
    """JWT token response."""
    token: str


class UserResponse(CamelModel):
    """User profile response (no password)."""
    username: str
    first_name: str
    last_name: str
    email: str
    is_admin: bool


class UserEnvelope(CamelModel):
    user: UserResponse


class UserCreatedEnvelope(CamelModel):
    user: UserResponse
    token: str


class UserListEnvelope(CamelModel):
    users: List[UserResponse]


class UserDeletedResponse(CamelModel):
    deleted: str


class TokenData(BaseModel):
    """Claims carried by a verified access token."""
    username: str
    is_admin: bool = False
