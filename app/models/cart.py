# app/models/cart.py
from datetime import datetime, timezone

from sqlalchemy import UniqueConstraint
from sqlmodel import SQLModel, Field


class CartItem(SQLModel, table=True):
    """
    A course in a user's cart.

    One user cannot have 2 rows for the same course, bought or not:
    the unique constraint is the only guard against concurrent adds.
    `bought` partitions the rows into the active cart (False) and the
    purchase history (True).
    """

    __tablename__ = "cart_items"
    __table_args__ = (
        UniqueConstraint("user_id", "course_id", name="uq_cart_items_user_course"),
    )

    id: int | None = Field(
        default=None,
        primary_key=True,
    )

    user_id: int = Field(
        foreign_key="users.id",
        ondelete="CASCADE",
        index=True,
    )

    course_id: int = Field(
        index=True,
    )

    bought: bool = Field(
        default=False,
        description="True once the item went through checkout",
    )

    added_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )
