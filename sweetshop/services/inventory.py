"""Catalog CRUD and guarded stock changes (purchase, restock)."""

import logging

from sqlalchemy.orm import Session

from sweetshop.core.errors import InsufficientStockError, NotFoundError, ValidationError
from sweetshop.models import MAX_INT, Sweet, User
from sweetshop.repositories import SweetRepository
from sweetshop.schemas.sweets import SweetCreate, SweetUpdate
from sweetshop.services.auth import require_admin

logger = logging.getLogger(__name__)

SWEET_NOT_FOUND = "Sweet not found"


def _require_positive_quantity(quantity: int) -> None:
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
        raise ValidationError("Quantity must be a positive integer")
    if quantity > MAX_INT:
        raise ValidationError(f"Quantity must not exceed {MAX_INT}")


def _require_price_bound(bound: int | None) -> None:
    if bound is not None and not 0 <= bound <= MAX_INT:
        raise ValidationError(f"Price filters must be between 0 and {MAX_INT}")


def _get_or_404(sweets: SweetRepository, sweet_id: int) -> Sweet:
    sweet = sweets.get(sweet_id)
    if sweet is None:
        raise NotFoundError(SWEET_NOT_FOUND)
    return sweet


def list_sweets(session: Session) -> list[Sweet]:
    """All sweets, newest first."""
    return SweetRepository(session).list_all()


def search_sweets(
    session: Session,
    query: str | None = None,
    category: str | None = None,
    min_price: int | None = None,
    max_price: int | None = None,
) -> list[Sweet]:
    """
    Sweets matching every supplied filter, newest first.

    query is a case-insensitive substring of name or description; category is an
    exact match; min_price/max_price are inclusive bounds in cents. Empty strings
    are treated as absent, so no filters returns the whole catalog.
    """
    _require_price_bound(min_price)
    _require_price_bound(max_price)
    return SweetRepository(session).search(
        query=query or None,
        category=category or None,
        min_price=min_price,
        max_price=max_price,
    )


def create_sweet(session: Session, actor: User, data: SweetCreate) -> Sweet:
    require_admin(actor)
    sweet = SweetRepository(session).create(data.to_fields())
    session.commit()
    session.refresh(sweet)
    logger.info(
        "Sweet created",
        extra={"sweet_id": sweet.id, "user_id": actor.id, "quantity": sweet.quantity},
    )
    return sweet


def update_sweet(session: Session, actor: User, sweet_id: int, patch: SweetUpdate) -> Sweet:
    """Apply a merge-patch: only fields present in patch are overwritten."""
    require_admin(actor)
    sweets = SweetRepository(session)
    sweet = _get_or_404(sweets, sweet_id)
    fields = patch.to_fields()
    if fields:
        sweets.update(sweet, fields)
        session.commit()
        session.refresh(sweet)
        logger.info(
            "Sweet updated",
            extra={"sweet_id": sweet_id, "user_id": actor.id, "fields": sorted(fields)},
        )
    return sweet


def delete_sweet(session: Session, actor: User, sweet_id: int) -> None:
    require_admin(actor)
    if not SweetRepository(session).delete(sweet_id):
        session.rollback()
        raise NotFoundError(SWEET_NOT_FOUND)
    session.commit()
    logger.info("Sweet deleted", extra={"sweet_id": sweet_id, "user_id": actor.id})


def _committed(session: Session, sweet: Sweet) -> Sweet:
    # Detached before commit so the RETURNING values stay readable without another SELECT.
    session.expunge(sweet)
    session.commit()
    return sweet


def purchase_sweet(session: Session, actor: User, sweet_id: int, quantity: int) -> Sweet:
    """
    Take quantity units of a sweet out of stock.

    The stock check and decrement are one conditional UPDATE, so stock never goes
    negative under concurrent purchases. All-or-nothing: if stock is short by any
    amount, InsufficientStockError is raised and nothing changes.
    """
    _require_positive_quantity(quantity)
    sweets = SweetRepository(session)
    sweet = sweets.decrement_if_available(sweet_id, quantity)
    if sweet is None:
        session.rollback()
        sweet = _get_or_404(sweets, sweet_id)
        logger.info(
            "Purchase rejected: insufficient stock",
            extra={
                "sweet_id": sweet_id,
                "user_id": actor.id,
                "quantity": quantity,
                "on_hand": sweet.quantity,
            },
        )
        raise InsufficientStockError("Insufficient stock")
    sweet = _committed(session, sweet)

    logger.info(
        "Sweet purchased",
        extra={
            "sweet_id": sweet_id,
            "user_id": actor.id,
            "quantity": quantity,
            "on_hand": sweet.quantity,
        },
    )
    return sweet


def restock_sweet(session: Session, actor: User, sweet_id: int, quantity: int) -> Sweet:
    """
    Add quantity units to stock.

    Raises ValidationError if the new total would not fit the quantity column.
    """
    require_admin(actor)
    _require_positive_quantity(quantity)
    sweets = SweetRepository(session)
    sweet = sweets.increment(sweet_id, quantity)
    if sweet is None:
        session.rollback()
        on_hand = _get_or_404(sweets, sweet_id).quantity
        logger.info(
            "Restock rejected: stock limit",
            extra={
                "sweet_id": sweet_id,
                "user_id": actor.id,
                "quantity": quantity,
                "on_hand": on_hand,
            },
        )
        raise ValidationError(f"Stock cannot exceed {MAX_INT}")
    sweet = _committed(session, sweet)

    logger.info(
        "Sweet restocked",
        extra={
            "sweet_id": sweet_id,
            "user_id": actor.id,
            "quantity": quantity,
            "on_hand": sweet.quantity,
        },
    )
    return sweet
