from datetime import date
from typing import Optional

import attrs


@attrs.define
class CreateTripRequest:
    trip_name: str
    bus: str
    pickup_city: str
    pickup_location: str
    dropoff_city: str
    dropoff_location: str
    takeoff_date: date
    takeoff_time: str
    seat_count: int
    price_minor: int = 0
    arrival_time: Optional[str] = None
