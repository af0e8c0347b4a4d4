from typing import Optional


class HostelliteError(RuntimeError):
    """Base for every failure the booking workflow can report to the user."""

    kind = "error"

    def __init__(self, message: str = "", status_code: Optional[int] = None) -> None:
        super().__init__(message or self.__class__.__name__)
        self.message = message or self.__class__.__name__
        self.status_code = status_code


class ValidationError(HostelliteError):
    """Bad or missing input; the user can correct it."""
    kind = "validation"


class AuthError(HostelliteError):
    """Missing or expired credential; the user has to log in again."""
    kind = "auth"


class NetworkError(HostelliteError):
    """Transport failure or timeout; safe to retry."""
    kind = "network"


class NotFoundError(HostelliteError):
    kind = "not_found"


class ApiError(HostelliteError):
    """Any other non-2xx answer from the backend."""
    kind = "api"


class PaymentInitError(HostelliteError):
    """The payment processor or backend refused to set up a payment session."""
    kind = "payment_init"


class PaymentError(HostelliteError):
    """The processor reported a failure while the user was paying."""
    kind = "payment"


class ConfirmationError(HostelliteError):
    """Payment captured but the server did not finalize the booking.

    Must be escalated, never retried blindly: the payment reference may already be consumed.
    """
    kind = "confirmation"

    def __init__(
            self,
            message: Optional[str] = None,
            status_code: Optional[int] = None,
            booking_id: Optional[str] = None,
            payment_intent_id: Optional[str] = None,
    ) -> None:
        if message is None:
            message = f"Payment received but booking {booking_id} could not be confirmed" if booking_id else "Payment received but booking could not be confirmed"
        super().__init__(message, status_code)
        self.booking_id = booking_id
        self.payment_intent_id = payment_intent_id


class WorkflowStateError(HostelliteError):
    """An operation was invoked in a workflow state that does not allow it."""
    kind = "workflow_state"
