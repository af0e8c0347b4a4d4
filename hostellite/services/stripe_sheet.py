import logging
from typing import Callable, Optional

import stripe

from hostellite.core.config import settings
from hostellite.schemas.payments import PaymentOutcome, PaymentResult, PaymentSession

logger = logging.getLogger(__name__)


class StripePaymentSheet:
    """Payment sheet backed by Stripe's client-side (publishable key) PaymentIntent calls.

    `approve` plays the part of the user's Pay/Cancel decision; returning False cancels.
    """

    def __init__(self, publishable_key: str | None = None, payment_method: str | None = None,
                 approve: Optional[Callable[[PaymentSession], bool]] = None,
                 merchant_display_name: str | None = None):
        self.publishable_key = publishable_key or settings.STRIPE_PUBLISHABLE_KEY
        self.payment_method = payment_method or settings.STRIPE_PAYMENT_METHOD
        self.approve = approve
        self.merchant_display_name = merchant_display_name or settings.APP_NAME

    def init(self, session: PaymentSession) -> Optional[str]:
        if not self.publishable_key:
            return "Stripe is not configured (missing publishable key)"
        if not self.payment_method:
            return "Stripe is not configured (missing payment method)"
        try:
            intent = stripe.PaymentIntent.retrieve(
                session.session_id, api_key=self.publishable_key, client_secret=session.client_secret,
            )
        except stripe.StripeError as e:
            return e.user_message or str(e)
        if intent.amount != session.amount_minor:
            return f"Payment amount mismatch ({intent.amount} != {session.amount_minor})"
        return None

    def present(self, session: PaymentSession) -> PaymentResult:
        if self.approve is not None and not self.approve(session):
            return PaymentResult(outcome=PaymentOutcome.CANCELLED, message="Payment cancelled")
        try:
            intent = stripe.PaymentIntent.confirm(
                session.session_id,
                api_key=self.publishable_key,
                client_secret=session.client_secret,
                payment_method=self.payment_method,
            )
        except stripe.CardError as e:
            return PaymentResult(outcome=PaymentOutcome.ERROR, message=e.user_message or "Card declined")
        except stripe.StripeError as e:
            return PaymentResult(outcome=PaymentOutcome.ERROR, message=e.user_message or str(e))

        status = intent.status
        if status == "succeeded":
            return PaymentResult(outcome=PaymentOutcome.SUCCESS)
        if status == "canceled":
            return PaymentResult(outcome=PaymentOutcome.CANCELLED, message="Payment cancelled")
        logger.warning("PaymentIntent %s ended in status %s", session.session_id, status)
        return PaymentResult(outcome=PaymentOutcome.ERROR, message=f"Payment not completed ({status})")
