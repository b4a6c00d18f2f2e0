"""Pydantic request/response schemas."""

from sweetshop.schemas.auth import (
    AuthResponse,
    LoginRequest,
    MeResponse,
    RegisterRequest,
    UserResponse,
)
from sweetshop.schemas.common import MessageResponse
from sweetshop.schemas.health import HealthResponse
from sweetshop.schemas.sweets import (
    QuantityRequest,
    SweetCreate,
    SweetResponse,
    SweetUpdate,
)

__all__ = [
    "AuthResponse",
    "HealthResponse",
    "LoginRequest",
    "MeResponse",
    "MessageResponse",
    "QuantityRequest",
    "RegisterRequest",
    "SweetCreate",
    "SweetResponse",
    "SweetUpdate",
    "UserResponse",
]
