from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class PaymentIntentCreate(BaseModel):
    amount: int  # minor units (paisa/cents)
    hostelId: str
    roomId: str
    seatsBooked: str
    currency: str = "pkr"


class PaymentIntentOut(BaseModel):
    model_config = ConfigDict(extra="ignore")

    clientSecret: str = ""
    paymentIntentId: str = ""


class PaymentSuccessRequest(BaseModel):
    """Body of POST /payment/payment-success; the server finalizes the booking from it."""
    paymentIntentId: str
    hostelId: str
    roomId: str
    checkInDate: str
    checkOutDate: str
    seatsBooked: int
    amount: float
    bookingId: Optional[str] = None


class PaymentSession(BaseModel):
    """Ephemeral handle for one checkout attempt. Never persisted, never reused."""
    model_config = ConfigDict(frozen=True)

    session_id: str
    client_secret: str = Field(repr=False)
    amount: Decimal  # major units
    amount_minor: int
    currency: str
    booking_id: Optional[str] = None


class PaymentOutcome(str, Enum):
    SUCCESS = "success"
    CANCELLED = "cancelled"
    ERROR = "error"


class PaymentResult(BaseModel):
    outcome: PaymentOutcome
    message: str = ""
