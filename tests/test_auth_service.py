"""Unit tests for sweetshop.services.auth: register, login, verify_token, require_admin."""

import unittest
from datetime import UTC, datetime, timedelta
from unittest.mock import patch

import jwt

from support import DEFAULT_PASSWORD, DatabaseTestCase, make_settings
from sweetshop.core.errors import AuthError, ConflictError, ForbiddenError
from sweetshop.core.security import verify_password
from sweetshop.models import User
from sweetshop.repositories import UserRepository
from sweetshop.services.auth import (
    INVALID_CREDENTIALS,
    login,
    register,
    require_admin,
    verify_token,
)


class TestRegister(DatabaseTestCase):
    """register persists a non-admin user with a hashed password and issues a token."""

    def test_creates_non_admin_with_hashed_password(self) -> None:
        user, token = register(self.session, self.settings, "alice", "alice@sweetshop.io", "secret123")
        self.assertFalse(user.is_admin)
        self.assertIsNotNone(user.id)
        self.assertIsNotNone(user.created_at)
        self.assertNotEqual(user.password_hash, "secret123")
        self.assertTrue(verify_password("secret123", user.password_hash))
        self.assertTrue(token)

    def test_token_resolves_to_new_user(self) -> None:
        user, token = register(self.session, self.settings, "alice", "alice@sweetshop.io", "secret123")
        resolved = verify_token(self.session, self.settings, token)
        self.assertEqual(resolved.id, user.id)

    def test_duplicate_username_conflicts(self) -> None:
        register(self.session, self.settings, "alice", "alice@sweetshop.io", "secret123")
        with self.assertRaises(ConflictError) as ctx:
            register(self.session, self.settings, "alice", "other@sweetshop.io", "secret123")
        self.assertEqual(ctx.exception.message, "Username already exists")

    def test_duplicate_email_conflicts(self) -> None:
        register(self.session, self.settings, "alice", "alice@sweetshop.io", "secret123")
        with self.assertRaises(ConflictError) as ctx:
            register(self.session, self.settings, "bob", "alice@sweetshop.io", "secret123")
        self.assertEqual(ctx.exception.message, "Email already exists")

    def test_concurrent_duplicate_insert_conflicts(self) -> None:
        register(self.session, self.settings, "alice", "alice@sweetshop.io", "secret123")
        # Both pre-checks miss, as when two registrations race; the unique index decides.
        with patch.object(UserRepository, "get_by_username", return_value=None), patch.object(
            UserRepository, "get_by_email", return_value=None
        ):
            with self.assertRaises(ConflictError):
                register(self.session, self.settings, "alice", "alice@sweetshop.io", "secret123")
        self.assertEqual(self.session.query(User).count(), 1)

    def test_conflict_persists_nothing(self) -> None:
        register(self.session, self.settings, "alice", "alice@sweetshop.io", "secret123")
        with self.assertRaises(ConflictError):
            register(self.session, self.settings, "bob", "alice@sweetshop.io", "secret123")
        self.assertEqual(self.session.query(User).count(), 1)


class TestLogin(DatabaseTestCase):
    """login issues a token on valid credentials; both failure modes look the same."""

    def setUp(self) -> None:
        super().setUp()
        self.user = self.add_user("alice")

    def test_valid_credentials(self) -> None:
        user, token = login(self.session, self.settings, "alice", DEFAULT_PASSWORD)
        self.assertEqual(user.id, self.user.id)
        self.assertEqual(verify_token(self.session, self.settings, token).id, self.user.id)

    def test_wrong_password_and_unknown_user_are_indistinguishable(self) -> None:
        with self.assertRaises(AuthError) as wrong_password:
            login(self.session, self.settings, "alice", "not-the-password")
        with self.assertRaises(AuthError) as unknown_user:
            login(self.session, self.settings, "mallory", DEFAULT_PASSWORD)
        self.assertEqual(wrong_password.exception.message, INVALID_CREDENTIALS)
        self.assertEqual(unknown_user.exception.message, INVALID_CREDENTIALS)


class TestVerifyToken(DatabaseTestCase):
    """verify_token rejects missing, tampered, expired and orphaned tokens."""

    def setUp(self) -> None:
        super().setUp()
        self.user, self.token = register(
            self.session, self.settings, "alice", "alice@sweetshop.io", "secret123"
        )

    def test_missing_token(self) -> None:
        for token in (None, ""):
            with self.assertRaises(AuthError):
                verify_token(self.session, self.settings, token)

    def test_malformed_token(self) -> None:
        with self.assertRaises(AuthError):
            verify_token(self.session, self.settings, "not.a.jwt")

    def test_tampered_signature(self) -> None:
        header, payload, signature = self.token.split(".")
        flipped = ("A" if signature[0] != "A" else "B") + signature[1:]
        with self.assertRaises(AuthError):
            verify_token(self.session, self.settings, f"{header}.{payload}.{flipped}")

    def test_wrong_signing_key(self) -> None:
        with self.assertRaises(AuthError):
            verify_token(self.session, make_settings(JWT_SECRET="rotated"), self.token)

    def test_expired_token(self) -> None:
        past = datetime.now(UTC) - timedelta(days=8)
        expired = jwt.encode(
            {"sub": self.user.id, "iat": past, "exp": past + timedelta(days=7)},
            "test-secret",
            algorithm="HS256",
        )
        with self.assertRaises(AuthError) as ctx:
            verify_token(self.session, self.settings, expired)
        self.assertEqual(ctx.exception.message, "Token has expired")

    def test_deleted_user_invalidates_token(self) -> None:
        self.session.delete(self.user)
        self.session.commit()
        with self.assertRaises(AuthError):
            verify_token(self.session, self.settings, self.token)


class TestRequireAdmin(DatabaseTestCase):
    def test_non_admin_forbidden(self) -> None:
        with self.assertRaises(ForbiddenError):
            require_admin(self.add_user("alice"))

    def test_admin_passes_through(self) -> None:
        admin = self.add_user("boss", is_admin=True)
        self.assertIs(require_admin(admin), admin)


if __name__ == "__main__":
    unittest.main()
