from datetime import date
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from src.service.reservation.domain.entity.trip_entity import MAX_SEAT_COUNT, TripEntity


class TripCreateRequest(BaseModel):
    trip_name: str = Field(min_length=1)
    bus: str = Field(min_length=1)
    pickup_city: str = Field(min_length=1)
    pickup_location: str = Field(min_length=1)
    dropoff_city: str = Field(min_length=1)
    dropoff_location: str = Field(min_length=1)
    takeoff_date: date
    takeoff_time: str = Field(min_length=1)
    arrival_time: Optional[str] = None
    seat_count: int = Field(ge=1, le=MAX_SEAT_COUNT)
    price_minor: int = Field(default=0, ge=0)

    @model_validator(mode='before')
    @classmethod
    def accept_legacy_fields(cls, data: Any) -> Any:
        """Older admin clients send destination / takeoff_location / takeoff{date,time}."""
        if not isinstance(data, dict):
            return data
        data = dict(data)
        if 'destination' in data:
            data.setdefault('dropoff_city', data['destination'])
            data.setdefault('dropoff_location', data['destination'])
        if 'takeoff_location' in data:
            data.setdefault('pickup_city', data['takeoff_location'])
            data.setdefault('pickup_location', data['takeoff_location'])
        takeoff = data.get('takeoff')
        if isinstance(takeoff, dict):
            data.setdefault('takeoff_date', takeoff.get('date'))
            data.setdefault('takeoff_time', takeoff.get('time'))
        return data

    model_config = ConfigDict(
        json_schema_extra={
            'example': {
                'trip_name': 'Morning Express',
                'bus': 'Toyota Coaster ABC-123',
                'pickup_city': 'Lagos',
                'pickup_location': 'Jibowu Park',
                'dropoff_city': 'Ibadan',
                'dropoff_location': 'Challenge Terminal',
                'takeoff_date': '2026-12-01',
                'takeoff_time': '08:30',
                'arrival_time': '11:00',
                'seat_count': 40,
                'price_minor': 900000,
            }
        }
    )


class SeatCountRequest(BaseModel):
    seat_count: int = Field(ge=1, le=MAX_SEAT_COUNT)


class TripResponse(BaseModel):
    id: int
    trip_code: Optional[str]
    trip_name: str
    bus: str
    pickup_city: str
    pickup_location: str
    dropoff_city: str
    dropoff_location: str
    takeoff_date: date
    takeoff_time: str
    arrival_time: Optional[str]
    seat_count: int
    price_minor: int
    status: str

    @classmethod
    def from_entity(cls, trip: TripEntity) -> 'TripResponse':
        return cls(
            id=trip.id or 0,
            trip_code=trip.trip_code,
            trip_name=trip.trip_name,
            bus=trip.bus,
            pickup_city=trip.pickup_city,
            pickup_location=trip.pickup_location,
            dropoff_city=trip.dropoff_city,
            dropoff_location=trip.dropoff_location,
            takeoff_date=trip.takeoff_date,
            takeoff_time=trip.takeoff_time,
            arrival_time=trip.arrival_time,
            seat_count=trip.seat_count,
            price_minor=trip.price_minor,
            status=trip.status.value,
        )
