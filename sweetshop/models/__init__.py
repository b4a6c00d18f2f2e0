"""SQLAlchemy ORM models."""

from sweetshop.models.base import Base
from sweetshop.models.sweet import MAX_INT, Sweet
from sweetshop.models.user import User

__all__ = ["Base", "MAX_INT", "Sweet", "User"]
