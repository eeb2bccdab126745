from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from src.service.reservation.domain.entity.seat_entity import SeatEntity
from src.service.reservation.domain.value_object.seat_ref import SeatIdRef, SeatRef, TripPositionRef
from src.service.shared_kernel.app.dto.seat_failure import SeatFailure


class SeatRefRequest(BaseModel):
    """Either {seat_id} or {trip_id, position}."""

    seat_id: Optional[int] = Field(default=None, gt=0)
    trip_id: Optional[int] = Field(default=None, gt=0)
    position: Optional[int] = Field(default=None, gt=0)

    @model_validator(mode='after')
    def check_one_form(self) -> 'SeatRefRequest':
        by_id = self.seat_id is not None
        by_position = self.trip_id is not None and self.position is not None
        if by_id == by_position:
            raise ValueError('Provide either seat_id, or trip_id together with position')
        return self

    def to_seat_ref(self) -> SeatRef:
        if self.seat_id is not None:
            return SeatIdRef(seat_id=self.seat_id)
        return TripPositionRef(trip_id=self.trip_id, position=self.position)  # type: ignore[arg-type]

    model_config = ConfigDict(json_schema_extra={'example': {'trip_id': 1, 'position': 12}})


class HoldSeatsRequest(BaseModel):
    seats: List[SeatRefRequest]

    model_config = ConfigDict(
        json_schema_extra={'example': {'seats': [{'seat_id': 5}, {'trip_id': 1, 'position': 12}]}}
    )


class SeatStatusRequest(BaseModel):
    seat_ids: List[int]


class SeatResponse(BaseModel):
    id: int
    trip_id: int
    position: Optional[int]
    state: str
    is_booking: bool
    is_booked: bool
    is_paid: bool
    booked_by: Optional[int] = None
    hold_expires_at: Optional[datetime] = None

    @classmethod
    def from_entity(cls, seat: SeatEntity) -> 'SeatResponse':
        return cls(
            id=seat.id,
            trip_id=seat.trip_id,
            position=seat.position,
            state=seat.state.value,
            is_booking=seat.is_booking,
            is_booked=seat.is_booked,
            is_paid=seat.is_paid,
            booked_by=seat.booked_by,
            hold_expires_at=seat.hold_expires_at,
        )


class SeatFailureResponse(BaseModel):
    seat_id: Optional[int]
    code: str
    message: str

    @classmethod
    def from_failure(cls, failure: SeatFailure) -> 'SeatFailureResponse':
        return cls(seat_id=failure.seat_id, code=failure.code.value, message=failure.message)


class SeatHoldResultResponse(BaseModel):
    ok: bool
    seat: Optional[SeatResponse] = None
    error: Optional[SeatFailureResponse] = None


class HoldSeatsResponse(BaseModel):
    held: int
    results: List[SeatHoldResultResponse]


class SeatStatusResponse(BaseModel):
    seat_id: int
    found: bool
    position: Optional[int] = None
    is_booked: Optional[bool] = None
    is_booking: Optional[bool] = None
    is_paid: Optional[bool] = None
