from typing import Optional

import attrs

from src.service.shared_kernel.domain.enum.seat_error_code import SeatErrorCode


@attrs.define(frozen=True)
class SeatFailure:
    """Why one seat of a batch was declined. seat_id is None when the reference never resolved."""

    seat_id: Optional[int]
    code: SeatErrorCode
    message: str
