"""ORM model for application users (auth and admin gate)."""

import uuid

from sqlalchemy import Boolean, Column, DateTime, String, false, func

from sweetshop.models.base import Base


def _new_user_id() -> str:
    return str(uuid.uuid4())


class User(Base):
    """
    User account for JWT authentication.

    Stores only the bcrypt hash of the password. is_admin gates catalog and
    inventory management.
    """

    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=_new_user_id)
    username = Column(String(50), nullable=False, unique=True, index=True)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    is_admin = Column(Boolean, nullable=False, default=False, server_default=false())
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
