"""
Authentication request/response schemas.

Request fields are optional so that missing values reach the pipelines
and are reported with their specific messages.
"""

from typing import Optional
from pydantic import BaseModel


class RegisterRequest(BaseModel):
    """User registration request."""

    username: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class LoginRequest(BaseModel):
    """User login request."""

    email: Optional[str] = None
    password: Optional[str] = None


class UserResponse(BaseModel):
    """Public identity."""

    id: str
    username: Optional[str] = None
    email: str
    createdAt: Optional[str] = None


class UserSummary(BaseModel):
    """Identity in listings."""

    id: str
    username: Optional[str] = None
    createdAt: Optional[str] = None


class RegisterResponse(BaseModel):
    """Registration response."""

    success: bool = True
    message: str
    user: UserResponse


class LoginResponse(BaseModel):
    """Login response."""

    success: bool = True
    token: str


class DeletedUser(BaseModel):
    """Deleted identity summary."""

    username: str
    email: str


class DeleteUserResponse(BaseModel):
    """Delete response."""

    success: bool = True
    message: str
    deletedUser: DeletedUser

