"""Request/response schemas for auth endpoints."""

from datetime import datetime

from pydantic import EmailStr, Field

from sweetshop.core.security import (
    PASSWORD_MAX_LEN,
    PASSWORD_MIN_LEN,
    USERNAME_MAX_LEN,
    USERNAME_MIN_LEN,
)
from sweetshop.schemas.common import CamelModel


class RegisterRequest(CamelModel):
    """New account details."""

    username: str = Field(
        ...,
        min_length=USERNAME_MIN_LEN,
        max_length=USERNAME_MAX_LEN,
        description="Username",
    )
    email: EmailStr = Field(..., description="Email address")
    password: str = Field(
        ...,
        min_length=PASSWORD_MIN_LEN,
        max_length=PASSWORD_MAX_LEN,
        description="Password",
    )


class LoginRequest(CamelModel):
    """Credentials for login."""

    username: str = Field(..., description="Username")
    password: str = Field(..., description="Password")


class UserResponse(CamelModel):
    """User as returned by the API (never includes the password or its hash)."""

    id: str
    username: str
    email: str
    is_admin: bool
    created_at: datetime


class AuthResponse(CamelModel):
    """Returned by register and login: the user plus a bearer token."""

    user: UserResponse
    token: str = Field(..., description="JWT access token; send as Authorization: Bearer <token>")


class MeResponse(CamelModel):
    user: UserResponse
