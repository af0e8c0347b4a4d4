"""Booking-and-payment workflow.

    Idle -> CreatingBooking -> AwaitingPaymentInit -> ReadyForPayment
         -> PaymentInProgress -> Confirming -> Completed

Pay-at-hostel bookings jump from CreatingBooking straight to Confirming. Any step may
end in Failed; the user may abort into CancelledByUser while payment is pending. Terminal
states are final for an instance: retrying means `reset()` (or a new orchestrator) and
starting again from Idle, nothing is resumed mid-sequence.

Every network call is awaited to completion before the next transition, so one instance
never has two requests in flight.
"""
import logging
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

from hostellite.core.errors import (
    AuthError, ConfirmationError, HostelliteError, PaymentError, WorkflowStateError,
)
from hostellite.schemas.booking import PaymentMethod
from hostellite.schemas.payments import PaymentOutcome
from hostellite.schemas.reservation import ReservationRequest
from hostellite.schemas.workflow import (
    AwaitingPaymentInit, CancelledByUser, Completed, Confirming, CreatingBooking, Failed, Idle,
    PaymentInProgress, ReadyForPayment, WorkflowState, is_terminal,
)
from hostellite.services.booking_client import BookingApiClient
from hostellite.services.escalation_service import EscalationLedger
from hostellite.services.payment_client import PaymentGatewayClient
from hostellite.services.session_store import SessionStore

logger = logging.getLogger(__name__)


class BookingOrchestrator:
    def __init__(self, session: SessionStore, bookings: BookingApiClient, payments: PaymentGatewayClient,
                 escalations: Optional[EscalationLedger] = None):
        self.session = session
        self.bookings = bookings
        self.payments = payments
        self.escalations = escalations
        self._state: WorkflowState = Idle()
        self._confirm_calls = 0

    @property
    def state(self) -> WorkflowState:
        return self._state

    def _move(self, new: WorkflowState) -> WorkflowState:
        logger.info("Booking workflow %s -> %s", self._state.name, new.name)
        self._state = new
        return new

    def _fail(self, stage: str, err: HostelliteError, booking=None, payment_captured: bool = False,
              cause: Optional[HostelliteError] = None) -> Failed:
        requires_login = isinstance(cause or err, AuthError)
        if requires_login:
            # expired credential: drop it so the UI routes to login
            self.session.clear()
        if payment_captured:
            logger.error("Booking workflow failed at %s after payment: %s", stage, err.message)
        else:
            logger.warning("Booking workflow failed at %s: %s", stage, err.message)
        return self._move(Failed(
            stage=stage,
            reason=err.message,
            error_kind=err.kind,
            booking=booking,
            requires_login=requires_login,
            payment_captured=payment_captured,
        ))

    def reserve(self, request: ReservationRequest, method: PaymentMethod = PaymentMethod.ONLINE) -> WorkflowState:
        """User committed to a room: create the pending booking and, for online payment, a payment session."""
        if not isinstance(self._state, Idle):
            raise WorkflowStateError(f"Cannot reserve while {self._state.name}")
        method = PaymentMethod(method)
        self._move(CreatingBooking(request=request, method=method))
        try:
            booking = self.bookings.create_booking(request.to_booking_create())
        except HostelliteError as e:
            return self._fail("creating_booking", e)

        if method == PaymentMethod.CASH:
            return self._confirm(request, booking, payment_intent_id=None)

        self._move(AwaitingPaymentInit(request=request, booking=booking))
        try:
            session = self.payments.create_payment_session(
                request.amount, request.hostel_id, request.room_id, request.seats, booking_id=booking.id,
            )
        except HostelliteError as e:
            # the pending booking is left on the server, not cancelled
            return self._fail("awaiting_payment_init", e, booking=booking)
        return self._move(ReadyForPayment(request=request, booking=booking, session=session))

    def pay(self) -> WorkflowState:
        """Present the payment sheet, then confirm the booking once the payment succeeded."""
        state = self._state
        if not isinstance(state, ReadyForPayment) or not self.payments.is_ready(state.session):
            raise WorkflowStateError(f"Payment is not ready yet ({state.name})")
        self._move(PaymentInProgress(request=state.request, booking=state.booking, session=state.session))
        try:
            result = self.payments.present_payment_ui(state.session)
        except HostelliteError as e:
            return self._fail("payment_in_progress", e, booking=state.booking)

        if result.outcome == PaymentOutcome.CANCELLED:
            logger.warning("User cancelled payment for booking %s; booking left pending", state.booking.id)
            return self._move(CancelledByUser(booking=state.booking))
        if result.outcome == PaymentOutcome.ERROR:
            return self._fail("payment_in_progress", PaymentError(result.message or "Payment could not be completed"),
                              booking=state.booking)
        return self._confirm(state.request, state.booking, payment_intent_id=state.session.session_id)

    def _confirm(self, request: ReservationRequest, booking, payment_intent_id: Optional[str]) -> WorkflowState:
        if self._confirm_calls:
            raise WorkflowStateError("Booking confirmation was already attempted")
        self._move(Confirming(request=request, booking=booking, payment_intent_id=payment_intent_id))
        self._confirm_calls += 1
        paid = payment_intent_id is not None
        try:
            confirmed = self.bookings.confirm_booking(booking.id, payment_intent_id, request)
        except HostelliteError as e:
            if not paid:
                return self._fail("confirming", e, booking=booking)
            err = e if isinstance(e, ConfirmationError) else ConfirmationError(
                e.message, e.status_code, booking_id=booking.id, payment_intent_id=payment_intent_id)
            if self.escalations is not None:
                try:
                    self.escalations.record(booking.id, payment_intent_id, request, err.message)
                except SQLAlchemyError:
                    logger.exception("Could not queue escalation for booking %s (intent %s)", booking.id, payment_intent_id)
            return self._fail("confirming", err, booking=booking, payment_captured=True, cause=e)
        return self._move(Completed(booking=confirmed))

    def abort(self) -> WorkflowState:
        """User backed out before paying. The pending booking is deliberately not cancelled."""
        state = self._state
        if not isinstance(state, ReadyForPayment):
            raise WorkflowStateError(f"Nothing to abort while {state.name}")
        logger.warning("User aborted payment for booking %s; booking left pending", state.booking.id)
        self.payments.discard(state.session)
        return self._move(CancelledByUser(booking=state.booking))

    def reset(self) -> WorkflowState:
        """Start over from Idle. Only allowed once the current attempt has ended."""
        if not (isinstance(self._state, Idle) or is_terminal(self._state)):
            raise WorkflowStateError(f"Cannot reset while {self._state.name}")
        self._confirm_calls = 0
        return self._move(Idle())
