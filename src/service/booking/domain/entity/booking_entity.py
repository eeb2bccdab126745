from datetime import datetime
import secrets
import string
from typing import Optional

import attrs

from src.platform.exception.exceptions import InvalidInputError


BOOKING_CODE_LENGTH = 8
_BOOKING_CODE_ALPHABET = string.digits + string.ascii_uppercase


def generate_booking_code() -> str:
    """8 uppercase base-36 characters, shown to the passenger at boarding."""
    return ''.join(secrets.choice(_BOOKING_CODE_ALPHABET) for _ in range(BOOKING_CODE_LENGTH))


@attrs.define
class BookingEntity:
    """Permanent record that one seat was paid for. Written once by the finalizer, never updated."""

    booking_code: str
    user_id: int
    seat_id: int
    trip_id: int
    payment_reference: str
    amount_minor: int
    position: int
    id: Optional[int] = None
    created_at: Optional[datetime] = None

    @classmethod
    def create(
        cls,
        *,
        booking_code: str,
        user_id: int,
        seat_id: int,
        trip_id: int,
        payment_reference: str,
        amount_minor: int,
        position: int,
    ) -> 'BookingEntity':
        if amount_minor < 0:
            raise InvalidInputError('Booking amount cannot be negative')
        if len(booking_code) != BOOKING_CODE_LENGTH:
            raise InvalidInputError('Malformed booking code')
        return cls(
            booking_code=booking_code,
            user_id=user_id,
            seat_id=seat_id,
            trip_id=trip_id,
            payment_reference=payment_reference,
            amount_minor=amount_minor,
            position=position,
        )
