import logging
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional, Protocol

from hostellite.core.config import settings
from hostellite.core.errors import (
    AuthError, HostelliteError, NetworkError, PaymentError, PaymentInitError, WorkflowStateError,
)
from hostellite.schemas.payments import (
    PaymentIntentCreate, PaymentIntentOut, PaymentResult, PaymentSession,
)
from hostellite.services.api_client import ApiClient, parse_model

logger = logging.getLogger(__name__)


def to_minor_units(amount: Decimal) -> int:
    """Major -> minor units (PKR -> paisa). The only place this conversion happens."""
    return int(Decimal(str(amount)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP) * 100)


class PaymentSheet(Protocol):
    """The processor's checkout UI."""

    def init(self, session: PaymentSession) -> Optional[str]:
        """Prepare the sheet; returns an error message or None."""

    def present(self, session: PaymentSession) -> PaymentResult:
        """Block until the user pays, cancels, or the processor fails."""


class PaymentGatewayClient:
    def __init__(self, api: ApiClient, sheet: PaymentSheet, currency: str | None = None):
        self.api = api
        self.sheet = sheet
        self.currency = currency or settings.PAYMENT_CURRENCY
        # sessions initialised and not yet presented; presenting or discarding removes them
        self._ready: set[str] = set()

    def create_payment_session(self, amount: Decimal, hostel_id: str, room_id: str, seats: int,
                               currency: str | None = None, booking_id: str | None = None) -> PaymentSession:
        amount = Decimal(str(amount))
        if amount <= 0:
            raise PaymentInitError(f"Invalid payment amount: {amount}")
        currency = (currency or self.currency).lower()
        body = PaymentIntentCreate(
            amount=to_minor_units(amount),
            hostelId=str(hostel_id),
            roomId=str(room_id),
            seatsBooked=str(seats),
            currency=currency,
        )
        try:
            data = self.api.post("/payment/create-payment-intent", body.model_dump())
            out = parse_model(PaymentIntentOut, data or {})
        except (AuthError, NetworkError):
            raise
        except HostelliteError as e:
            raise PaymentInitError(e.message or "Failed to create payment intent", e.status_code) from e
        if not out.clientSecret:
            raise PaymentInitError("No client secret received from server")

        session = PaymentSession(
            session_id=out.paymentIntentId or out.clientSecret.split("_secret_")[0],
            client_secret=out.clientSecret,
            amount=amount,
            amount_minor=body.amount,
            currency=currency,
            booking_id=booking_id,
        )
        try:
            err = self.sheet.init(session)
        except HostelliteError:
            raise
        except Exception as e:
            logger.exception("Payment sheet init failed for %s", session.session_id)
            raise PaymentInitError(str(e) or "Payment sheet could not be prepared") from e
        if err:
            raise PaymentInitError(err)
        self._ready.add(session.session_id)
        logger.info("Payment session %s ready (%s %s)", session.session_id, session.amount_minor, currency)
        return session

    def is_ready(self, session: PaymentSession) -> bool:
        return session.session_id in self._ready

    def discard(self, session: PaymentSession) -> None:
        self._ready.discard(session.session_id)

    def present_payment_ui(self, session: PaymentSession) -> PaymentResult:
        if not self.is_ready(session):
            raise WorkflowStateError(f"Payment session {session.session_id} is not ready or was already used")
        try:
            result = self.sheet.present(session)
        except HostelliteError:
            raise
        except Exception as e:
            raise PaymentError(str(e) or "Payment could not be completed") from e
        finally:
            # a presented session is never re-presented, whatever the outcome
            self.discard(session)
        logger.info("Payment session %s -> %s", session.session_id, result.outcome.value)
        return result
