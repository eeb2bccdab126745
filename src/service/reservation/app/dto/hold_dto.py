"""
Hold DTOs

Per-seat outcomes for batch holds: a hold request never fails as a whole
because one seat was taken, each seat reports its own result.
"""

from typing import List, Optional

import attrs

from src.service.reservation.domain.entity.seat_entity import SeatEntity
from src.service.reservation.domain.value_object.seat_ref import SeatRef
from src.service.shared_kernel.app.dto.seat_failure import SeatFailure


@attrs.define
class SeatHoldOutcome:
    seat_ref: SeatRef
    seat: Optional[SeatEntity] = None
    error: Optional[SeatFailure] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@attrs.define
class HoldSeatsResult:
    outcomes: List[SeatHoldOutcome]

    @property
    def held(self) -> List[SeatEntity]:
        return [o.seat for o in self.outcomes if o.ok and o.seat is not None]

    @property
    def failures(self) -> List[SeatFailure]:
        return [o.error for o in self.outcomes if o.error is not None]


@attrs.define
class SeatStatusItem:
    seat_id: int
    found: bool
    position: Optional[int] = None
    is_booked: Optional[bool] = None
    is_booking: Optional[bool] = None
    is_paid: Optional[bool] = None
