"""Request/response schemas for the sweets catalog and inventory endpoints."""

from datetime import datetime
from typing import Annotated, Any

from pydantic import AfterValidator, AnyUrl, Field, TypeAdapter, field_validator
from pydantic import ValidationError as PydanticValidationError

from sweetshop.models import MAX_INT
from sweetshop.schemas.common import CamelModel

NAME_MAX_LEN = 100
CATEGORY_MAX_LEN = 50

_any_url = TypeAdapter(AnyUrl)


def _check_url(value: str) -> str:
    # Stored exactly as sent; AnyUrl itself would normalise it (e.g. add a trailing slash).
    try:
        _any_url.validate_python(value)
    except PydanticValidationError as e:
        raise ValueError("must be a valid URL") from e
    return value


ImageUrl = Annotated[str, AfterValidator(_check_url)]


class SweetCreate(CamelModel):
    """Fields for a new sweet. Price is in cents."""

    name: str = Field(..., min_length=1, max_length=NAME_MAX_LEN)
    category: str = Field(..., min_length=1, max_length=CATEGORY_MAX_LEN)
    price: int = Field(..., gt=0, le=MAX_INT, strict=True, description="Price in cents")
    quantity: int = Field(default=0, ge=0, le=MAX_INT, strict=True)
    description: str | None = None
    image_url: ImageUrl | None = None

    def to_fields(self) -> dict[str, Any]:
        """Column values for insert."""
        return self.model_dump(mode="json")


class SweetUpdate(CamelModel):
    """
    Merge-patch for an existing sweet: only fields present in the body are written.

    null clears description or imageUrl; it is rejected for the required fields.
    """

    name: str | None = Field(default=None, min_length=1, max_length=NAME_MAX_LEN)
    category: str | None = Field(default=None, min_length=1, max_length=CATEGORY_MAX_LEN)
    price: int | None = Field(default=None, gt=0, le=MAX_INT, strict=True)
    quantity: int | None = Field(default=None, ge=0, le=MAX_INT, strict=True)
    description: str | None = None
    image_url: ImageUrl | None = None

    @field_validator("name", "category", "price", "quantity")
    @classmethod
    def reject_null(cls, v: Any) -> Any:
        if v is None:
            raise ValueError("must not be null")
        return v

    def to_fields(self) -> dict[str, Any]:
        """Column values for the fields the client actually sent."""
        return self.model_dump(mode="json", exclude_unset=True)


class QuantityRequest(CamelModel):
    """Body for purchase and restock."""

    quantity: int = Field(..., gt=0, le=MAX_INT, strict=True)


class SweetResponse(CamelModel):
    id: int
    name: str
    category: str
    price: int
    quantity: int
    description: str | None = None
    image_url: str | None = None
    created_at: datetime
