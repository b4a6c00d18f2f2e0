"""Sweets catalog and inventory routes."""

from typing import Annotated

from fastapi import APIRouter, Depends, Path, Query, Response, status
from sqlalchemy.orm import Session

from sweetshop.api.auth import get_current_user, require_admin
from sweetshop.core.database import get_db
from sweetshop.models import MAX_INT, User
from sweetshop.schemas.common import MessageResponse
from sweetshop.schemas.sweets import (
    QuantityRequest,
    SweetCreate,
    SweetResponse,
    SweetUpdate,
)
from sweetshop.services import inventory

router = APIRouter()

ADMIN_ERRORS = {
    401: {"model": MessageResponse},
    403: {"model": MessageResponse},
}
NOT_FOUND = {404: {"model": MessageResponse}}

SweetId = Annotated[int, Path(ge=1, le=MAX_INT)]


@router.get("", response_model=list[SweetResponse])
def list_sweets(
    db: Annotated[Session, Depends(get_db)],
    _user: Annotated[User, Depends(get_current_user)],
) -> list[SweetResponse]:
    """Return the whole catalog, newest first."""
    return [SweetResponse.model_validate(s) for s in inventory.list_sweets(db)]


@router.get("/search", response_model=list[SweetResponse])
def search_sweets(
    db: Annotated[Session, Depends(get_db)],
    _user: Annotated[User, Depends(get_current_user)],
    query: Annotated[str | None, Query(description="Substring of name or description")] = None,
    category: Annotated[str | None, Query(description="Exact category")] = None,
    min_price: Annotated[
        int | None, Query(alias="minPrice", ge=0, le=MAX_INT, description="Cents, inclusive")
    ] = None,
    max_price: Annotated[
        int | None, Query(alias="maxPrice", ge=0, le=MAX_INT, description="Cents, inclusive")
    ] = None,
) -> list[SweetResponse]:
    """
    Search the catalog. All supplied filters must match; with none it behaves
    like GET /sweets.
    """
    sweets = inventory.search_sweets(
        db,
        query=query,
        category=category,
        min_price=min_price,
        max_price=max_price,
    )
    return [SweetResponse.model_validate(s) for s in sweets]


@router.post(
    "",
    response_model=SweetResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": MessageResponse}, **ADMIN_ERRORS},
)
def create_sweet(
    body: SweetCreate,
    db: Annotated[Session, Depends(get_db)],
    admin: Annotated[User, Depends(require_admin)],
) -> SweetResponse:
    """Add a sweet to the catalog (admin only). Quantity defaults to 0."""
    return SweetResponse.model_validate(inventory.create_sweet(db, admin, body))


@router.put(
    "/{sweet_id}",
    response_model=SweetResponse,
    responses={400: {"model": MessageResponse}, **ADMIN_ERRORS, **NOT_FOUND},
)
def update_sweet(
    sweet_id: SweetId,
    body: SweetUpdate,
    db: Annotated[Session, Depends(get_db)],
    admin: Annotated[User, Depends(require_admin)],
) -> SweetResponse:
    """Update a sweet (admin only). Only fields present in the body are changed."""
    return SweetResponse.model_validate(inventory.update_sweet(db, admin, sweet_id, body))


@router.delete(
    "/{sweet_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses={**ADMIN_ERRORS, **NOT_FOUND},
)
def delete_sweet(
    sweet_id: SweetId,
    db: Annotated[Session, Depends(get_db)],
    admin: Annotated[User, Depends(require_admin)],
) -> Response:
    inventory.delete_sweet(db, admin, sweet_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/{sweet_id}/purchase",
    response_model=SweetResponse,
    responses={400: {"model": MessageResponse}, 401: {"model": MessageResponse}, **NOT_FOUND},
)
def purchase_sweet(
    sweet_id: SweetId,
    body: QuantityRequest,
    db: Annotated[Session, Depends(get_db)],
    user: Annotated[User, Depends(get_current_user)],
) -> SweetResponse:
    """
    Buy quantity units. Fails with 400 and leaves stock unchanged if fewer than
    quantity are on hand. Do not retry a successful purchase.
    """
    return SweetResponse.model_validate(
        inventory.purchase_sweet(db, user, sweet_id, body.quantity)
    )


@router.post(
    "/{sweet_id}/restock",
    response_model=SweetResponse,
    responses={400: {"model": MessageResponse}, **ADMIN_ERRORS, **NOT_FOUND},
)
def restock_sweet(
    sweet_id: SweetId,
    body: QuantityRequest,
    db: Annotated[Session, Depends(get_db)],
    admin: Annotated[User, Depends(require_admin)],
) -> SweetResponse:
    """Add quantity units to stock (admin only)."""
    return SweetResponse.model_validate(
        inventory.restock_sweet(db, admin, sweet_id, body.quantity)
    )
