# app/schemas/payment.py
from typing import Any

from pydantic import field_validator
from sqlmodel import Field

from app.schemas.common import CamelModel, Envelope


class PaymentCreate(CamelModel):
    """
    Payload for creating a payment intent.

    `amount` is in the currency's smallest unit (cents for usd).
    """

    amount: int = Field(gt=0)
    currency: str = Field(min_length=3, max_length=3)

    @field_validator("currency")
    @classmethod
    def normalize_currency(cls, v: str) -> str:
        v = v.strip().lower()
        if not v.isalpha():
            raise ValueError("currency must be a 3-letter ISO code")
        return v


class PaymentIntentResponse(Envelope):
    # Raw provider object, passed through untouched.
    intent: dict[str, Any]
