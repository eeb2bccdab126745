from typing import Optional

import attrs

from src.service.reservation.domain.entity.seat_entity import SeatEntity


@attrs.define(frozen=True)
class CompareAndSetOutcome:
    """Result of one conditional write.

    applied=True: `seat` is the record as written.
    applied=False: `seat` is the current record that failed the guard, or None if it does not exist.
    """

    applied: bool
    seat: Optional[SeatEntity]
