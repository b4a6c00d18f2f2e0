"""User lookups and inserts."""

from sqlalchemy.orm import Session

from sweetshop.models import User


class UserRepository:
    """Reads and writes rows of the users table. Callers own the transaction."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, user_id: str) -> User | None:
        return self.session.get(User, user_id)

    def get_by_username(self, username: str) -> User | None:
        return self.session.query(User).filter(User.username == username).first()

    def get_by_email(self, email: str) -> User | None:
        return self.session.query(User).filter(User.email == email).first()

    def create(
        self,
        username: str,
        email: str,
        password_hash: str,
        is_admin: bool = False,
    ) -> User:
        user = User(
            username=username,
            email=email,
            password_hash=password_hash,
            is_admin=is_admin,
        )
        self.session.add(user)
        self.session.flush()
        return user
