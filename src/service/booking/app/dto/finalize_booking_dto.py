"""
Finalize Booking DTOs

A finalization either books every seat (success) or stops at the first seat
that fails its checks. In the second case the seats before it keep their
bookings and the result names the failing seat and why.
"""

from typing import List, Optional, Sequence

import attrs

from src.service.booking.domain.entity.booking_entity import BookingEntity
from src.service.booking.domain.enum.payment_status import PaymentStatus
from src.service.shared_kernel.app.dto.seat_failure import SeatFailure
from src.service.shared_kernel.domain.enum.seat_error_code import SeatErrorCode


@attrs.define
class FinalizeBookingRequest:
    payment_reference: str
    email: str
    trip_id: int
    seat_ids: List[int]
    total_amount_minor: int


@attrs.define
class FinalizeBookingResult:
    payment_reference: str
    success: bool
    payment_status: PaymentStatus
    bookings: List[BookingEntity] = attrs.field(factory=list)
    failures: List[SeatFailure] = attrs.field(factory=list)

    @property
    def failed_seat(self) -> Optional[SeatFailure]:
        return self.failures[0] if self.failures else None

    @classmethod
    def success_result(
        cls, *, payment_reference: str, bookings: List[BookingEntity]
    ) -> 'FinalizeBookingResult':
        return cls(
            payment_reference=payment_reference,
            success=True,
            payment_status=PaymentStatus.SUCCESS,
            bookings=bookings,
        )

    @classmethod
    def partial_result(
        cls, *, payment_reference: str, bookings: List[BookingEntity], failure: SeatFailure
    ) -> 'FinalizeBookingResult':
        return cls(
            payment_reference=payment_reference,
            success=False,
            payment_status=PaymentStatus.FAILED,
            bookings=bookings,
            failures=[failure],
        )

    @classmethod
    def duplicate_result(
        cls, *, payment_reference: str, seat_ids: Sequence[int]
    ) -> 'FinalizeBookingResult':
        """Replay of an already settled payment: nothing is written, every seat reports booked."""
        return cls(
            payment_reference=payment_reference,
            success=False,
            payment_status=PaymentStatus.SUCCESS,
            failures=[
                SeatFailure(
                    seat_id,
                    SeatErrorCode.SEAT_ALREADY_BOOKED,
                    'Payment already finalized for this seat',
                )
                for seat_id in seat_ids
            ],
        )
