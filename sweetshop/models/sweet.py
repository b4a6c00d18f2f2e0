"""ORM model for catalog items (sweets) and their quantity on hand."""

from sqlalchemy import CheckConstraint, Column, DateTime, Integer, String, Text, func

from sweetshop.models.base import Base

# Largest value the 32-bit INTEGER columns (id, price, quantity) can hold.
MAX_INT = 2**31 - 1


class Sweet(Base):
    """
    Catalog item with price in minor currency units (cents) and quantity on hand.

    The CHECK constraints back up the service-level guards: quantity never goes
    negative and price is always positive.
    """

    __tablename__ = "sweets"
    __table_args__ = (
        CheckConstraint("quantity >= 0", name="ck_sweets_quantity_non_negative"),
        CheckConstraint("price > 0", name="ck_sweets_price_positive"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False)
    category = Column(String(50), nullable=False, index=True)
    price = Column(Integer, nullable=False)
    quantity = Column(Integer, nullable=False, default=0, server_default="0")
    description = Column(Text, nullable=True)
    image_url = Column(Text, nullable=True)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        index=True,
    )
