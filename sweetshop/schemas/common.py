"""Shared pydantic configuration for the JSON wire format."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Serializes as camelCase (imageUrl, isAdmin, createdAt); accepts either case on input."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class MessageResponse(BaseModel):
    """Error body returned for every failed request."""

    message: str
