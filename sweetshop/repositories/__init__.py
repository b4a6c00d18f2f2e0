"""Per-entity data access over a SQLAlchemy session."""

from sweetshop.repositories.sweets import SweetRepository
from sweetshop.repositories.users import UserRepository

__all__ = ["SweetRepository", "UserRepository"]
