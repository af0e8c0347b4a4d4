import calendar
from datetime import date
from decimal import Decimal

from hostellite.core.config import settings
from hostellite.core.errors import ValidationError


def add_months(d: date, months: int) -> date:
    """Same day `months` calendar months later; the day is clamped to the month's end."""
    total = d.year * 12 + (d.month - 1) + months
    year, month = divmod(total, 12)
    month += 1
    day = min(d.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def months_between(check_in: date, check_out: date) -> int:
    # whole calendar months, not days: 01-15 -> 03-14 is still 2
    return (check_out.year - check_in.year) * 12 + (check_out.month - check_in.month)


def min_check_out(check_in: date, min_months: int | None = None) -> date:
    if min_months is None:
        min_months = settings.MIN_STAY_MONTHS
    return add_months(check_in, min_months)


def clamp_check_out(check_in: date, check_out: date, min_months: int | None = None) -> date:
    """Raise a too-short stay to the minimum instead of rejecting it."""
    floor = min_check_out(check_in, min_months)
    return floor if check_out < floor else check_out


def total_price(months: int, price_per_bed, seats: int) -> Decimal:
    return Decimal(months) * Decimal(str(price_per_bed)) * seats


def check_seats(seats: int, available_beds: int) -> int:
    if seats < 1:
        raise ValidationError("At least one bed must be booked")
    if seats > available_beds:
        raise ValidationError(f"Only {available_beds} bed(s) available in this room")
    return seats


def can_add_seat(seats: int, available_beds: int) -> bool:
    """Whether the seat increment control is enabled."""
    return seats < available_beds


def can_remove_seat(seats: int) -> bool:
    return seats > 1
