# app/routers/payment.py
from fastapi import APIRouter, Depends, Path

from app.core.deps import get_payment_service
from app.schemas.payment import PaymentCreate, PaymentIntentResponse
from app.services.payment_service import PaymentService

router = APIRouter(prefix="/payment", tags=["Payment"])


@router.post("", response_model=PaymentIntentResponse)
def create_payment(
    payload: PaymentCreate,
    service: PaymentService = Depends(get_payment_service),
):
    """
    Create a Stripe PaymentIntent and return it untouched.
    """
    intent = service.create_payment_intent(payload.amount, payload.currency)
    return PaymentIntentResponse(message="Payment created successfully", intent=intent)


@router.get("/{intent_id}", response_model=PaymentIntentResponse)
def retrieve_payment(
    intent_id: str = Path(min_length=1, max_length=255),
    service: PaymentService = Depends(get_payment_service),
):
    """Fetch a PaymentIntent by id."""
    intent = service.retrieve_payment_intent(intent_id)
    return PaymentIntentResponse(message="Payment retrieved successfully", intent=intent)
