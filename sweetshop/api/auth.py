"""Register/login/me routes and the auth dependencies (get_current_user, require_admin)."""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from sweetshop.core.config import Settings, get_settings
from sweetshop.core.database import get_db
from sweetshop.models import User
from sweetshop.schemas.auth import (
    AuthResponse,
    LoginRequest,
    MeResponse,
    RegisterRequest,
    UserResponse,
)
from sweetshop.schemas.common import MessageResponse
from sweetshop.services import auth as auth_service

router = APIRouter()
security = HTTPBearer(auto_error=False)


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> User:
    """Dependency: require valid Bearer JWT and return the current user. Raises AuthError (401)."""
    token = credentials.credentials if credentials is not None else None
    return auth_service.verify_token(db, settings, token)


def require_admin(
    current_user: Annotated[User, Depends(get_current_user)],
) -> User:
    """Dependency: require an authenticated admin. Raises ForbiddenError (403) for non-admins."""
    return auth_service.require_admin(current_user)


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": MessageResponse}},
)
def register(
    body: RegisterRequest,
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> AuthResponse:
    """Create a (non-admin) account and return it with a 7-day bearer token."""
    user, token = auth_service.register(
        db,
        settings,
        username=body.username,
        email=str(body.email),
        password=body.password,
    )
    return AuthResponse(user=UserResponse.model_validate(user), token=token)


@router.post(
    "/login",
    response_model=AuthResponse,
    responses={401: {"model": MessageResponse}},
)
def login(
    body: LoginRequest,
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> AuthResponse:
    """
    Authenticate with username and password; returns the user and a JWT.
    Include the token in the Authorization header as: Bearer <token>
    """
    user, token = auth_service.login(
        db, settings, username=body.username, password=body.password
    )
    return AuthResponse(user=UserResponse.model_validate(user), token=token)


@router.get("/me", response_model=MeResponse, responses={401: {"model": MessageResponse}})
def me(current_user: Annotated[User, Depends(get_current_user)]) -> MeResponse:
    return MeResponse(user=UserResponse.model_validate(current_user))
