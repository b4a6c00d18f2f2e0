"""Sweet catalog queries and guarded quantity updates."""

from typing import Any

from sqlalchemy import update
from sqlalchemy.orm import Query, Session

from sweetshop.models import MAX_INT, Sweet


class SweetRepository:
    """
    Reads and writes rows of the sweets table. Callers own the transaction.

    Quantity changes are single UPDATE statements evaluated by the database, so
    concurrent purchases of the same sweet cannot both pass the stock check.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def _newest_first(self) -> Query:
        return self.session.query(Sweet).order_by(Sweet.created_at.desc(), Sweet.id.desc())

    def list_all(self) -> list[Sweet]:
        return self._newest_first().all()

    def get(self, sweet_id: int) -> Sweet | None:
        return self.session.get(Sweet, sweet_id)

    def search(
        self,
        query: str | None = None,
        category: str | None = None,
        min_price: int | None = None,
        max_price: int | None = None,
    ) -> list[Sweet]:
        """Return sweets matching every supplied filter, newest first."""
        q = self._newest_first()
        if query:
            q = q.filter(
                Sweet.name.icontains(query, autoescape=True)
                | Sweet.description.icontains(query, autoescape=True)
            )
        if category:
            q = q.filter(Sweet.category == category)
        if min_price is not None:
            q = q.filter(Sweet.price >= min_price)
        if max_price is not None:
            q = q.filter(Sweet.price <= max_price)
        return q.all()

    def create(self, fields: dict[str, Any]) -> Sweet:
        sweet = Sweet(**fields)
        self.session.add(sweet)
        self.session.flush()
        return sweet

    def update(self, sweet: Sweet, fields: dict[str, Any]) -> Sweet:
        for name, value in fields.items():
            setattr(sweet, name, value)
        self.session.flush()
        return sweet

    def delete(self, sweet_id: int) -> bool:
        deleted = (
            self.session.query(Sweet)
            .filter(Sweet.id == sweet_id)
            .delete(synchronize_session=False)
        )
        return deleted > 0

    def decrement_if_available(self, sweet_id: int, quantity: int) -> Sweet | None:
        """
        Take quantity from stock only if at least that much is on hand.

        Returns the updated row (via RETURNING), or None if nothing changed.
        """
        return self.session.execute(
            update(Sweet)
            .where(Sweet.id == sweet_id, Sweet.quantity >= quantity)
            .values(quantity=Sweet.quantity - quantity)
            .returning(Sweet)
            .execution_options(synchronize_session="fetch")
        ).scalar_one_or_none()

    def increment(self, sweet_id: int, quantity: int) -> Sweet | None:
        """
        Add quantity to stock unless the total would exceed MAX_INT.

        Returns the updated row, or None if the sweet is missing or the total is too large.
        """
        return self.session.execute(
            update(Sweet)
            .where(Sweet.id == sweet_id, Sweet.quantity <= MAX_INT - quantity)
            .values(quantity=Sweet.quantity + quantity)
            .returning(Sweet)
            .execution_options(synchronize_session="fetch")
        ).scalar_one_or_none()
