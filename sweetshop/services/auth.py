"""Registration, login, token verification and the admin gate."""

import logging
from functools import lru_cache
from typing import TYPE_CHECKING

import jwt
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from sweetshop.core.errors import AuthError, ConflictError, ForbiddenError
from sweetshop.core.security import (
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)
from sweetshop.models import User
from sweetshop.repositories import UserRepository

if TYPE_CHECKING:
    from sweetshop.core.config import Settings

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid credentials"


@lru_cache
def _dummy_hash(rounds: int) -> str:
    # Checked against when the username is unknown so both login failures cost one bcrypt verify.
    return hash_password("sweetshop-dummy-password", rounds=rounds)


def register(
    session: Session,
    settings: "Settings",
    username: str,
    email: str,
    password: str,
) -> tuple[User, str]:
    """
    Create a non-admin user and issue a token for it.

    Raises ConflictError if the username or email is already registered.
    """
    users = UserRepository(session)
    if users.get_by_username(username) is not None:
        raise ConflictError("Username already exists")
    if users.get_by_email(email) is not None:
        raise ConflictError("Email already exists")

    password_hash = hash_password(password, rounds=settings.BCRYPT_ROUNDS)
    try:
        user = users.create(
            username=username,
            email=email,
            password_hash=password_hash,
            is_admin=False,
        )
        session.commit()
    except IntegrityError as e:
        # Lost a race with a concurrent registration for the same username/email.
        session.rollback()
        raise ConflictError("Username or email already exists") from e
    session.refresh(user)

    logger.info("User registered", extra={"user_id": user.id})
    return user, create_access_token(user.id, settings)


def login(
    session: Session,
    settings: "Settings",
    username: str,
    password: str,
) -> tuple[User, str]:
    """
    Verify credentials and issue a token.

    Unknown username and wrong password both raise AuthError("Invalid credentials").
    """
    user = UserRepository(session).get_by_username(username)
    if user is None:
        verify_password(password, _dummy_hash(settings.BCRYPT_ROUNDS))
        logger.info("Login failed")
        raise AuthError(INVALID_CREDENTIALS)
    if not verify_password(password, user.password_hash):
        logger.info("Login failed")
        raise AuthError(INVALID_CREDENTIALS)
    return user, create_access_token(user.id, settings)


def verify_token(session: Session, settings: "Settings", token: str | None) -> User:
    """Resolve a bearer token to the current persisted user, or raise AuthError."""
    if not token:
        raise AuthError("Authentication required")
    try:
        payload = decode_access_token(token, settings)
    except jwt.ExpiredSignatureError as e:
        raise AuthError("Token has expired") from e
    except jwt.PyJWTError as e:
        raise AuthError("Invalid or expired token") from e

    sub = payload.get("sub")
    if not sub or not isinstance(sub, str):
        raise AuthError("Invalid token payload")
    user = UserRepository(session).get(sub)
    if user is None:
        raise AuthError("Invalid token")
    return user


def require_admin(user: User) -> User:
    """Raise ForbiddenError unless user is an admin."""
    if not user.is_admin:
        raise ForbiddenError("Admin access required")
    return user
