"""
Create a user directly in the database. The API never grants admin, so this is how
the first admin is made. Run from project root:
  python -m sweetshop.scripts.create_user USERNAME EMAIL PASSWORD [--admin]
Example:
  python -m sweetshop.scripts.create_user admin admin@sweetshop.io your-secure-password --admin
"""
import argparse
import sys

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import IntegrityError

from sweetshop.core.config import get_settings
from sweetshop.core.database import SessionLocal
from sweetshop.core.security import (
    PASSWORD_MAX_LEN,
    PASSWORD_MIN_LEN,
    USERNAME_MAX_LEN,
    USERNAME_MIN_LEN,
    hash_password,
)
from sweetshop.repositories import UserRepository
from sweetshop.schemas.auth import RegisterRequest


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a Sweet Shop user.")
    parser.add_argument(
        "username", help=f"Username ({USERNAME_MIN_LEN}-{USERNAME_MAX_LEN} chars)"
    )
    parser.add_argument("email", help="Email address")
    parser.add_argument(
        "password", help=f"Password ({PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} chars)"
    )
    parser.add_argument("--admin", action="store_true", help="Grant admin rights")
    args = parser.parse_args(argv)

    try:
        account = RegisterRequest.model_validate(
            {
                "username": args.username.strip(),
                "email": args.email.strip(),
                "password": args.password,
            }
        )
    except PydanticValidationError as e:
        for err in e.errors():
            field = ".".join(str(p) for p in err["loc"])
            print(f"Invalid {field}: {err['msg']}", file=sys.stderr)
        return 1

    settings = get_settings()
    db = SessionLocal()
    try:
        users = UserRepository(db)
        if users.get_by_username(account.username) is not None:
            print(f"User '{account.username}' already exists.", file=sys.stderr)
            return 1
        if users.get_by_email(str(account.email)) is not None:
            print(f"Email '{account.email}' is already registered.", file=sys.stderr)
            return 1
        password_hash = hash_password(account.password, rounds=settings.BCRYPT_ROUNDS)
        try:
            users.create(
                username=account.username,
                email=str(account.email),
                password_hash=password_hash,
                is_admin=args.admin,
            )
            db.commit()
        except IntegrityError:
            # Another writer created the same username or email since the checks above.
            db.rollback()
            print(
                f"User '{account.username}' or email '{account.email}' already exists.",
                file=sys.stderr,
            )
            return 1
        role = "admin" if args.admin else "user"
        print(f"Created user '{account.username}' with role '{role}'.")
        return 0
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
