from datetime import date
from decimal import Decimal
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class PaymentStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"


class BookingStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"
    # owners can reject; the user list drops these together with cancelled ones
    REJECTED = "rejected"


class PaymentMethod(str, Enum):
    ONLINE = "online"
    CASH = "cash"


def _iso_day(v):
    # Backend sends full ISO timestamps ("2024-01-15T00:00:00.000Z"); only the day matters here
    if isinstance(v, str) and len(v) > 10:
        return v[:10]
    return v


class HostelRef(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str = Field(alias="_id")
    name: str = ""
    location: str = ""
    images: List[str] = Field(default_factory=list)


class Room(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str = Field(alias="_id")
    roomNumber: str = ""
    totalBeds: int = 0
    availableBeds: int = 0
    pricePerBed: Decimal = Decimal("0")

    @field_validator("roomNumber", mode="before")
    @classmethod
    def room_number_as_str(cls, v):
        return "" if v is None else str(v)


class Booking(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str = Field(alias="_id")
    hostel: Optional[HostelRef] = None
    room: Optional[Room] = None
    checkInDate: date
    checkOutDate: date
    seatsBooked: int = Field(default=1, ge=1)
    amount: Decimal = Decimal("0")
    paymentStatus: PaymentStatus = PaymentStatus.PENDING
    status: BookingStatus = BookingStatus.PENDING

    @field_validator("hostel", "room", mode="before")
    @classmethod
    def unpopulated_ref(cls, v):
        # Unpopulated references arrive as bare ids
        if isinstance(v, str):
            return {"_id": v}
        return v

    @field_validator("checkInDate", "checkOutDate", mode="before")
    @classmethod
    def day_only(cls, v):
        return _iso_day(v)

    @property
    def is_paid(self) -> bool:
        return self.paymentStatus == PaymentStatus.COMPLETED

    @property
    def is_finalized(self) -> bool:
        return self.is_paid and self.status in (BookingStatus.CONFIRMED, BookingStatus.COMPLETED)


class BookingCreate(BaseModel):
    """Body of POST /bookings/book. Always created pending; the server finalizes it."""
    hostelId: str
    roomId: str
    checkInDate: str  # ISO-8601
    checkOutDate: str  # ISO-8601
    seatsBooked: int = Field(ge=1)
    paymentStatus: str = PaymentStatus.PENDING.value
    amount: float
