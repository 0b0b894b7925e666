# app/services/payment_service.py
"""
Thin pass-through to Stripe PaymentIntents.

No payment state is stored locally and webhooks are not handled; the
intent returned by Stripe is handed back to the client as-is.
"""
import logging
from typing import Any

import stripe

from app.core.errors import UpstreamFailure

logger = logging.getLogger(__name__)


class PaymentService:
    def __init__(self, api_key: str | None, api_version: str | None = None):
        self.api_key = api_key
        self.api_version = api_version

    def _request_options(self) -> dict[str, Any]:
        # Passed per call so the SDK's module-level api_key stays untouched.
        opts: dict[str, Any] = {"api_key": self.api_key}
        if self.api_version:
            opts["stripe_version"] = self.api_version
        return opts

    def _ensure_configured(self, failure_message: str) -> None:
        if not self.api_key:
            raise UpstreamFailure(failure_message, error="Payment provider is not configured")

    def create_payment_intent(self, amount: int, currency: str) -> dict[str, Any]:
        """Create a PaymentIntent for `amount` (smallest currency unit)."""
        failure = "Failed to create payment"
        self._ensure_configured(failure)
        try:
            intent = stripe.PaymentIntent.create(
                amount=amount,
                currency=currency,
                **self._request_options(),
            )
        except stripe.StripeError as e:
            logger.warning("Stripe create_payment_intent failed: %s", e)
            raise UpstreamFailure(failure, error=e.user_message or str(e)) from e

        logger.info("Payment intent created: %s (%s %s)", intent.id, amount, currency)
        return intent.to_dict()

    def retrieve_payment_intent(self, intent_id: str) -> dict[str, Any]:
        failure = "Failed to retrieve payment"
        self._ensure_configured(failure)
        try:
            intent = stripe.PaymentIntent.retrieve(intent_id, **self._request_options())
        except stripe.StripeError as e:
            logger.warning("Stripe retrieve_payment_intent(%s) failed: %s", intent_id, e)
            raise UpstreamFailure(failure, error=e.user_message or str(e)) from e
        return intent.to_dict()
