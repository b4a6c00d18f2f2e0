"""Add sweets table (catalog items with price in cents and quantity on hand).

Revision ID: 20251019010000
Revises: 20251019000000
Create Date: 2025-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "20251019010000"
down_revision: Union[str, None] = "20251019000000"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "sweets",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("category", sa.String(length=50), nullable=False),
        sa.Column("price", sa.Integer(), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("image_url", sa.Text(), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.CheckConstraint("quantity >= 0", name="ck_sweets_quantity_non_negative"),
        sa.CheckConstraint("price > 0", name="ck_sweets_price_positive"),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_sweets")),
    )
    op.create_index(op.f("ix_sweets_category"), "sweets", ["category"], unique=False)
    op.create_index(op.f("ix_sweets_created_at"), "sweets", ["created_at"], unique=False)


def downgrade() -> None:
    op.drop_index(op.f("ix_sweets_created_at"), table_name="sweets")
    op.drop_index(op.f("ix_sweets_category"), table_name="sweets")
    op.drop_table("sweets")
