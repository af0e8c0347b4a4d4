#!/usr/bin/env python3
"""
Log in, reserve a room and pay for it from the terminal.
Uses API_BASE_URL / STRIPE_PUBLISHABLE_KEY from the environment (.env).

    python book_room.py --email me@example.com --password secret --hostel <id> \
        --check-in 2024-01-15 --check-out 2024-03-15 --seats 1 [--cash | --payment-method pm_...]
"""
import argparse
import getpass
import sys
from datetime import date

from hostellite.core.errors import HostelliteError
from hostellite.core.log import setup_logging
from hostellite.main import build_context
from hostellite.schemas.booking import PaymentMethod
from hostellite.schemas.reservation import ReservationRequest
from hostellite.schemas.workflow import Completed, Failed, ReadyForPayment
from hostellite.services.auth_client import login
from hostellite.services.stripe_sheet import StripePaymentSheet


def _confirm_pay(session) -> bool:
    answer = input(f"Pay {session.currency.upper()} {session.amount}? [y/N] ")
    return answer.strip().lower() in ("y", "yes")


def main(argv=None) -> int:
    p = argparse.ArgumentParser(description="Reserve a hostel room")
    p.add_argument("--email", required=True)
    p.add_argument("--password")
    p.add_argument("--hostel", required=True)
    p.add_argument("--room", help="room id (default: first room with free beds)")
    p.add_argument("--check-in", type=date.fromisoformat, default=date.today())
    p.add_argument("--check-out", type=date.fromisoformat, default=None)
    p.add_argument("--seats", type=int, default=1)
    p.add_argument("--cash", action="store_true", help="pay at the hostel")
    p.add_argument("--payment-method", help="Stripe PaymentMethod id (default: STRIPE_PAYMENT_METHOD)")
    args = p.parse_args(argv)

    setup_logging()
    ctx = build_context(sheet=StripePaymentSheet(payment_method=args.payment_method, approve=_confirm_pay))
    try:
        login(ctx.api, args.email, args.password or getpass.getpass())
        rooms = ctx.bookings.list_rooms(args.hostel)
        room = next((r for r in rooms if (args.room and r.id == args.room) or (not args.room and r.availableBeds > 0)), None)
        if room is None:
            print("No matching room with free beds")
            return 1
        request = ReservationRequest.for_room(args.hostel, room, args.check_in, args.check_out or args.check_in, args.seats)
    except HostelliteError as e:
        print(f"Error: {e.message}")
        return 1

    print(f"Room {room.roomNumber}: {request.months} month(s) x {room.pricePerBed} x {request.seats} = {request.amount}")
    flow = ctx.new_booking_workflow()
    state = flow.reserve(request, PaymentMethod.CASH if args.cash else PaymentMethod.ONLINE)
    if isinstance(state, ReadyForPayment):
        state = flow.pay()

    if isinstance(state, Completed):
        print(f"Booking {state.booking.id} confirmed ({state.booking.status.value})")
        return 0
    if isinstance(state, Failed):
        print(f"Booking failed at {state.stage}: {state.reason}")
        if state.payment_captured:
            print("Your payment was received; the booking will be reconciled automatically.")
        if state.requires_login:
            print("Please login again.")
        return 2
    print(f"Booking left {state.name}")
    return 3


if __name__ == "__main__":
    sys.exit(main())
