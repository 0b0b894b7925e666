# app/schemas/cart.py
from datetime import datetime

from sqlmodel import Field

from app.schemas.common import MAX_ID, CamelModel, Envelope


class CartItemCreate(CamelModel):
    """
    Payload for adding a course to the cart.
    """

    course_id: int = Field(gt=0, le=MAX_ID)


class CartItemRead(CamelModel):
    """
    Read model for a single cart row.
    """

    id: int
    user_id: int
    course_id: int
    bought: bool
    added_at: datetime


class CartItemResponse(Envelope):
    item: CartItemRead


class CartListResponse(Envelope):
    cart: list[CartItemRead]


class CartCountResponse(Envelope):
    count: int


class CartStatusResponse(Envelope):
    is_in_cart: bool
