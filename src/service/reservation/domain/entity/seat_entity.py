from datetime import datetime
from typing import Optional

import attrs

from src.service.reservation.domain.enum.seat_state import SeatState


@attrs.define
class SeatEntity:
    """One numbered seat on a trip.

    The three flags are the persisted truth; `state` is derived from them with
    PAID > BOOKED > HOLDING > FREE precedence.
    """

    id: int
    trip_id: int
    position: Optional[int]
    is_booking: bool = False
    is_booked: bool = False
    is_paid: bool = False
    booked_by: Optional[int] = None
    paid_by: Optional[int] = None
    booking_code: Optional[str] = None
    hold_started_at: Optional[datetime] = None
    hold_expires_at: Optional[datetime] = None
    reminders_sent: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def state(self) -> SeatState:
        if self.is_paid:
            return SeatState.PAID
        if self.is_booked:
            return SeatState.BOOKED
        if self.is_booking:
            return SeatState.HOLDING
        return SeatState.FREE

    @property
    def is_free(self) -> bool:
        return self.state is SeatState.FREE

    def is_held_by(self, user_id: int) -> bool:
        return self.state is SeatState.HOLDING and self.booked_by == user_id
