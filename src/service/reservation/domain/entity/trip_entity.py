from datetime import date, datetime, timezone
import random
import secrets
import string
from typing import List, Optional

import attrs

from src.platform.exception.exceptions import InvalidInputError
from src.platform.logging.loguru_io import Logger
from src.service.reservation.domain.enum.trip_status import TripStatus


MAX_SEAT_COUNT = 200
_CODE_ALPHABET = string.ascii_uppercase + string.digits


def _validate_non_empty_string(instance: object, attribute: attrs.Attribute, value: str) -> None:
    if not value or not value.strip():
        raise InvalidInputError(f'Trip {attribute.name} cannot be empty')


def _validate_seat_count(instance: object, attribute: attrs.Attribute, value: int) -> None:
    if not 1 <= value <= MAX_SEAT_COUNT:
        raise InvalidInputError(f'seat_count must be between 1 and {MAX_SEAT_COUNT}')


def _validate_price(instance: object, attribute: attrs.Attribute, value: int) -> None:
    if value < 0:
        raise InvalidInputError('price cannot be negative')


def generate_trip_code(now: Optional[datetime] = None) -> str:
    """TRIP-<YYYYMMDDHHMMSS>-<4 random base-36 chars>, a human-facing reference, not a key."""
    now = now or datetime.now(timezone.utc)
    suffix = ''.join(secrets.choice(_CODE_ALPHABET) for _ in range(4))
    return f'TRIP-{now.strftime("%Y%m%d%H%M%S")}-{suffix}'


def shuffled_positions(seat_count: int, rng: Optional[random.Random] = None) -> List[int]:
    """Positions 1..seat_count in random order (Fisher-Yates via random.shuffle)."""
    positions = list(range(1, seat_count + 1))
    (rng or random).shuffle(positions)
    return positions


@attrs.define
class TripEntity:
    trip_name: str = attrs.field(validator=_validate_non_empty_string)
    bus: str = attrs.field(validator=_validate_non_empty_string)
    pickup_city: str = attrs.field(validator=_validate_non_empty_string)
    pickup_location: str = attrs.field(validator=_validate_non_empty_string)
    dropoff_city: str = attrs.field(validator=_validate_non_empty_string)
    dropoff_location: str = attrs.field(validator=_validate_non_empty_string)
    takeoff_date: date
    takeoff_time: str = attrs.field(validator=_validate_non_empty_string)
    seat_count: int = attrs.field(validator=_validate_seat_count)
    price_minor: int = attrs.field(default=0, validator=_validate_price)
    arrival_time: Optional[str] = None
    trip_code: Optional[str] = None
    status: TripStatus = TripStatus.SCHEDULED
    id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    @Logger.io
    def create(
        cls,
        *,
        trip_name: str,
        bus: str,
        pickup_city: str,
        pickup_location: str,
        dropoff_city: str,
        dropoff_location: str,
        takeoff_date: date,
        takeoff_time: str,
        seat_count: int,
        price_minor: int = 0,
        arrival_time: Optional[str] = None,
    ) -> 'TripEntity':
        return cls(
            trip_name=trip_name.strip(),
            bus=bus.strip(),
            pickup_city=pickup_city.strip(),
            pickup_location=pickup_location.strip(),
            dropoff_city=dropoff_city.strip(),
            dropoff_location=dropoff_location.strip(),
            takeoff_date=takeoff_date,
            takeoff_time=takeoff_time.strip(),
            seat_count=seat_count,
            price_minor=price_minor,
            arrival_time=arrival_time,
            trip_code=generate_trip_code(),
        )
