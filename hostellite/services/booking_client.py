import logging
from typing import List, Optional

from hostellite.core.errors import ConfirmationError, HostelliteError, NetworkError, AuthError
from hostellite.schemas.booking import Booking, BookingCreate, BookingStatus, Room
from hostellite.schemas.payments import PaymentSuccessRequest
from hostellite.schemas.reservation import ReservationRequest
from hostellite.services.api_client import ApiClient, parse_model

logger = logging.getLogger(__name__)

HIDDEN_FROM_USER = (BookingStatus.CANCELLED, BookingStatus.REJECTED)


def _bookings(data) -> List[Booking]:
    return [parse_model(Booking, item) for item in (data or [])]


class BookingApiClient:
    def __init__(self, api: ApiClient):
        self.api = api

    def create_booking(self, body: BookingCreate) -> Booking:
        """POST /bookings/book. The booking always starts pending."""
        data = self.api.post("/bookings/book", body.model_dump())
        booking = parse_model(Booking, data)
        logger.info("Created booking %s (room=%s seats=%s)", booking.id, body.roomId, body.seatsBooked)
        return booking

    def confirm_booking(self, booking_id: str, payment_intent_id: Optional[str],
                        reservation: ReservationRequest) -> Booking:
        """Finalize a pending booking. Not idempotent: call at most once per successful payment.

        With a payment intent the server verifies the payment; without one (pay at hostel)
        the booking is confirmed unpaid.
        """
        try:
            if payment_intent_id:
                body = PaymentSuccessRequest(
                    paymentIntentId=payment_intent_id,
                    hostelId=reservation.hostel_id,
                    roomId=reservation.room_id,
                    checkInDate=reservation.check_in.isoformat(),
                    checkOutDate=reservation.check_out.isoformat(),
                    seatsBooked=reservation.seats,
                    amount=float(reservation.amount),
                    bookingId=booking_id,
                )
                data = self.api.post("/payment/payment-success", body.model_dump())
            else:
                data = self.api.post(f"/bookings/confirm/{booking_id}")
        except (AuthError, NetworkError):
            raise
        except HostelliteError as e:
            raise ConfirmationError(e.message, e.status_code, booking_id=booking_id,
                                    payment_intent_id=payment_intent_id) from e
        # some deployments answer {"booking": {...}}
        if isinstance(data, dict) and isinstance(data.get("booking"), dict):
            data = data["booking"]
        return parse_model(Booking, data)

    def cancel_booking(self, booking_id: str) -> None:
        """Soft-cancel. NotFoundError if it is unknown or already cancelled."""
        self.api.delete(f"/bookings/cancel/{booking_id}")
        logger.info("Cancelled booking %s", booking_id)

    def list_user_bookings(self) -> List[Booking]:
        # snapshot; server order is not guaranteed
        return [b for b in _bookings(self.api.get("/bookings/user-bookings")) if b.status not in HIDDEN_FROM_USER]

    def list_hostel_owner_bookings(self) -> List[Booking]:
        return _bookings(self.api.get("/bookings/hostel-owner-bookings"))

    def eligible_bookings(self, hostel_id: str) -> List[Booking]:
        """Bookings the user may review: paid and confirmed or completed."""
        return [b for b in _bookings(self.api.get(f"/bookings/eligible-bookings/{hostel_id}")) if b.is_finalized]

    def list_rooms(self, hostel_id: str) -> List[Room]:
        return [parse_model(Room, r) for r in (self.api.get(f"/rooms/hostel/{hostel_id}") or [])]
