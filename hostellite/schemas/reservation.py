from datetime import date
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from hostellite.schemas.booking import BookingCreate, Room
from hostellite.services.pricing import check_seats, clamp_check_out, months_between, total_price


class ReservationRequest(BaseModel):
    """What the user committed to: room, dates, seats, and the price derived from them.

    Check-out is always raised to the minimum stay, however the request is built.
    `for_room` also checks the seats against the room's free beds.
    """
    model_config = ConfigDict(frozen=True)

    hostel_id: str
    room_id: str
    check_in: date
    check_out: date
    seats: int = Field(ge=1)
    price_per_bed: Decimal

    @field_validator("check_out")
    @classmethod
    def clamp_to_minimum_stay(cls, v: date, info: ValidationInfo) -> date:
        check_in = info.data.get("check_in")
        # check_in failed its own validation; that error is reported instead
        if check_in is None:
            return v
        return clamp_check_out(check_in, v)

    @classmethod
    def for_room(cls, hostel_id: str, room: Room, check_in: date, check_out: date,
                 seats: int = 1) -> "ReservationRequest":
        check_seats(seats, room.availableBeds)
        return cls(
            hostel_id=hostel_id,
            room_id=room.id,
            check_in=check_in,
            check_out=check_out,
            seats=seats,
            price_per_bed=room.pricePerBed,
        )

    @property
    def months(self) -> int:
        return months_between(self.check_in, self.check_out)

    @property
    def amount(self) -> Decimal:
        return total_price(self.months, self.price_per_bed, self.seats)

    def to_booking_create(self) -> BookingCreate:
        return BookingCreate(
            hostelId=self.hostel_id,
            roomId=self.room_id,
            checkInDate=self.check_in.isoformat(),
            checkOutDate=self.check_out.isoformat(),
            seatsBooked=self.seats,
            amount=float(self.amount),
        )
