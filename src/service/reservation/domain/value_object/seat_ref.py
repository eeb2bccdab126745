from typing import Union

import attrs


@attrs.define(frozen=True)
class SeatIdRef:
    seat_id: int


@attrs.define(frozen=True)
class TripPositionRef:
    trip_id: int
    position: int


# A seat is addressed either by its id or by (trip, position); both resolve through the ledger
SeatRef = Union[SeatIdRef, TripPositionRef]
