"""Booking workflow states, one variant per state.

Each variant only carries the data that is legal in that state, so e.g. a
PaymentInProgress without a PaymentSession cannot be constructed.
"""
from dataclasses import dataclass
from typing import Optional, Union

from hostellite.schemas.booking import Booking, PaymentMethod
from hostellite.schemas.payments import PaymentSession
from hostellite.schemas.reservation import ReservationRequest


@dataclass(frozen=True)
class Idle:
    name = "idle"


@dataclass(frozen=True)
class CreatingBooking:
    request: ReservationRequest
    method: PaymentMethod
    name = "creating_booking"


@dataclass(frozen=True)
class AwaitingPaymentInit:
    request: ReservationRequest
    booking: Booking
    name = "awaiting_payment_init"


@dataclass(frozen=True)
class ReadyForPayment:
    request: ReservationRequest
    booking: Booking
    session: PaymentSession
    name = "ready_for_payment"


@dataclass(frozen=True)
class PaymentInProgress:
    request: ReservationRequest
    booking: Booking
    session: PaymentSession
    name = "payment_in_progress"


@dataclass(frozen=True)
class Confirming:
    request: ReservationRequest
    booking: Booking
    payment_intent_id: Optional[str] = None  # None on the pay-at-hostel path
    name = "confirming"


@dataclass(frozen=True)
class Completed:
    booking: Booking
    name = "completed"


@dataclass(frozen=True)
class CancelledByUser:
    booking: Booking  # left pending server-side
    name = "cancelled_by_user"


@dataclass(frozen=True)
class Failed:
    stage: str
    reason: str
    error_kind: str
    booking: Optional[Booking] = None
    requires_login: bool = False
    payment_captured: bool = False
    name = "failed"


WorkflowState = Union[
    Idle, CreatingBooking, AwaitingPaymentInit, ReadyForPayment,
    PaymentInProgress, Confirming, Completed, CancelledByUser, Failed,
]

TERMINAL_STATES = (Completed, CancelledByUser, Failed)


def is_terminal(state: WorkflowState) -> bool:
    return isinstance(state, TERMINAL_STATES)
