from datetime import date
from decimal import Decimal

import pytest

from hostellite.core.errors import ConfirmationError, NetworkError, NotFoundError, ValidationError
from hostellite.schemas.booking import BookingStatus, PaymentStatus

from conftest import booking_json


def test_create_booking_posts_pending_request(bookings, http, reservation):
    http.add("POST", "/bookings/book", status_code=201, data=booking_json("b42"))
    booking = bookings.create_booking(reservation.to_booking_create())

    assert booking.id == "b42"
    assert booking.paymentStatus == PaymentStatus.PENDING
    assert booking.status == BookingStatus.PENDING
    assert booking.checkInDate == date(2024, 1, 15)
    assert booking.amount == Decimal("10000")
    assert http.calls[0]["json"]["paymentStatus"] == "pending"


def test_create_booking_validation_error(bookings, http, reservation):
    http.add("POST", "/bookings/book", status_code=400, data={"message": "roomId is required"})
    with pytest.raises(ValidationError):
        bookings.create_booking(reservation.to_booking_create())


def test_unpopulated_references_are_accepted(bookings, http, reservation):
    http.add("POST", "/bookings/book", status_code=201, data=booking_json("b1", hostel="h1", room="r1"))
    booking = bookings.create_booking(reservation.to_booking_create())
    assert booking.hostel.id == "h1"
    assert booking.room.id == "r1"


def test_confirm_online_booking_sends_payment_reference(bookings, http, reservation):
    http.add("POST", "/payment/payment-success",
             data=booking_json("b1", status="confirmed", payment_status="completed"))
    booking = bookings.confirm_booking("b1", "pi_123", reservation)

    assert booking.is_finalized
    body = http.calls[0]["json"]
    assert body["paymentIntentId"] == "pi_123"
    assert body["bookingId"] == "b1"
    assert body["seatsBooked"] == 1
    assert body["amount"] == 10000.0
    assert body["checkOutDate"] == "2024-03-15"


def test_confirm_accepts_wrapped_booking(bookings, http, reservation):
    http.add("POST", "/payment/payment-success",
             data={"booking": booking_json("b1", status="confirmed", payment_status="completed")})
    assert bookings.confirm_booking("b1", "pi_1", reservation).status == BookingStatus.CONFIRMED


def test_confirm_cash_booking(bookings, http, reservation):
    http.add("POST", "/bookings/confirm/b1", data=booking_json("b1", status="confirmed"))
    booking = bookings.confirm_booking("b1", None, reservation)
    assert booking.status == BookingStatus.CONFIRMED
    assert booking.paymentStatus == PaymentStatus.PENDING


def test_consumed_payment_reference_is_a_confirmation_error(bookings, http, reservation):
    http.add("POST", "/payment/payment-success", status_code=400, data={"error": "Payment already used"})
    with pytest.raises(ConfirmationError) as exc:
        bookings.confirm_booking("b1", "pi_1", reservation)
    assert exc.value.booking_id == "b1"
    assert exc.value.payment_intent_id == "pi_1"
    assert exc.value.message == "Payment already used"


def test_confirm_network_error_is_not_rewrapped(bookings, http, reservation):
    import requests
    http.add("POST", "/payment/payment-success", exc=requests.ConnectionError("reset"))
    with pytest.raises(NetworkError):
        bookings.confirm_booking("b1", "pi_1", reservation)


def test_cancel_booking_uses_delete(bookings, http):
    http.add("DELETE", "/bookings/cancel/b1", status_code=204)
    bookings.cancel_booking("b1")
    assert http.paths("DELETE") == ["/bookings/cancel/b1"]


def test_cancel_already_cancelled(bookings, http):
    http.add("DELETE", "/bookings/cancel/b1", status_code=404, data={"message": "Booking not found"})
    with pytest.raises(NotFoundError):
        bookings.cancel_booking("b1")


def test_user_bookings_hide_cancelled_and_rejected(bookings, http):
    http.add("GET", "/bookings/user-bookings", data=[
        booking_json("b1"),
        booking_json("b2", status="cancelled"),
        booking_json("b3", status="rejected"),
        booking_json("b4", status="confirmed", hostel=None, room=None),
    ])
    result = bookings.list_user_bookings()
    assert [b.id for b in result] == ["b1", "b4"]
    assert result[1].hostel is None


def test_eligible_bookings_filters_unpaid(bookings, http):
    http.add("GET", "/bookings/eligible-bookings/h1", data=[
        booking_json("b1", status="completed", payment_status="completed"),
        booking_json("b2", status="confirmed", payment_status="pending"),
    ])
    assert [b.id for b in bookings.eligible_bookings("h1")] == ["b1"]


def test_owner_bookings_keep_every_status(bookings, http):
    http.add("GET", "/bookings/hostel-owner-bookings", data=[
        booking_json("b1", status="cancelled"), booking_json("b2"),
    ])
    assert len(bookings.list_hostel_owner_bookings()) == 2


def test_list_rooms(bookings, http):
    http.add("GET", "/rooms/hostel/h1", data=[
        {"_id": "r1", "roomNumber": 101, "totalBeds": 4, "availableBeds": 0, "pricePerBed": 5000},
        {"_id": "r2", "roomNumber": "102", "totalBeds": 2, "availableBeds": 2, "pricePerBed": 6500.5},
    ])
    rooms = bookings.list_rooms("h1")
    assert rooms[0].roomNumber == "101"
    assert rooms[1].pricePerBed == Decimal("6500.5")
