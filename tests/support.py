"""Shared test fixtures: throwaway SQLite databases, test settings and an API client."""

import os

# The app builds its module-level engine at import time; keep it off any real database.
os.environ.setdefault("DATABASE_URL", "sqlite://")

import unittest
from collections.abc import Generator
from typing import Any

from fastapi.testclient import TestClient
from sqlalchemy.orm import Session, sessionmaker

from sweetshop.core.config import Settings, get_settings
from sweetshop.core.database import build_engine, get_db
from sweetshop.core.security import hash_password
from sweetshop.main import app
from sweetshop.models import Base, Sweet, User

TEST_BCRYPT_ROUNDS = 4
DEFAULT_PASSWORD = "secret123"


def make_settings(**overrides: Any) -> Settings:
    """Settings for tests: in-memory DB, fixed secret, cheap bcrypt."""
    values: dict[str, Any] = {
        "DATABASE_URL": "sqlite://",
        "JWT_SECRET": "test-secret",
        "BCRYPT_ROUNDS": TEST_BCRYPT_ROUNDS,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


class DatabaseTestCase(unittest.TestCase):
    """Each test gets a fresh in-memory database with all tables created."""

    database_url = "sqlite://"

    def setUp(self) -> None:
        self.engine = build_engine(self.database_url)
        Base.metadata.create_all(self.engine)
        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)
        self.session: Session = self.SessionLocal()
        self.settings = make_settings()

    def tearDown(self) -> None:
        self.session.close()
        Base.metadata.drop_all(self.engine)
        self.engine.dispose()

    def add_user(
        self,
        username: str = "alice",
        email: str | None = None,
        password: str = DEFAULT_PASSWORD,
        is_admin: bool = False,
    ) -> User:
        user = User(
            username=username,
            email=email or f"{username}@sweetshop.io",
            password_hash=hash_password(password, rounds=TEST_BCRYPT_ROUNDS),
            is_admin=is_admin,
        )
        self.session.add(user)
        self.session.commit()
        return user

    def add_sweet(
        self,
        name: str = "Gummy Bear",
        category: str = "Gummy",
        price: int = 150,
        quantity: int = 10,
        description: str | None = None,
    ) -> Sweet:
        sweet = Sweet(
            name=name,
            category=category,
            price=price,
            quantity=quantity,
            description=description,
        )
        self.session.add(sweet)
        self.session.commit()
        return sweet

    def stock_of(self, sweet_id: int) -> int | None:
        """Quantity on hand read through a new session (bypasses any cached state)."""
        with self.SessionLocal() as s:
            sweet = s.get(Sweet, sweet_id)
            return None if sweet is None else sweet.quantity


class ApiTestCase(DatabaseTestCase):
    """DatabaseTestCase plus a TestClient whose requests use the test database and settings."""

    def setUp(self) -> None:
        super().setUp()

        def override_get_db() -> Generator[Session, None, None]:
            db = self.SessionLocal()
            try:
                yield db
            finally:
                db.close()

        app.dependency_overrides[get_db] = override_get_db
        app.dependency_overrides[get_settings] = lambda: self.settings
        self.client = TestClient(app)

    def tearDown(self) -> None:
        app.dependency_overrides.clear()
        super().tearDown()

    @staticmethod
    def bearer(token: str) -> dict[str, str]:
        return {"Authorization": f"Bearer {token}"}

    def register(self, username: str = "alice", password: str = DEFAULT_PASSWORD) -> str:
        """Register through the API and return the token."""
        resp = self.client.post(
            "/api/auth/register",
            json={"username": username, "email": f"{username}@sweetshop.io", "password": password},
        )
        self.assertEqual(resp.status_code, 201, resp.text)
        return resp.json()["token"]

    def login(self, username: str, password: str = DEFAULT_PASSWORD) -> str:
        resp = self.client.post(
            "/api/auth/login", json={"username": username, "password": password}
        )
        self.assertEqual(resp.status_code, 200, resp.text)
        return resp.json()["token"]

    def admin_token(self, username: str = "admin") -> str:
        """Create an admin directly in the DB (the API cannot) and log in as it."""
        self.add_user(username=username, is_admin=True)
        return self.login(username)
