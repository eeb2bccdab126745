from typing import List, Self, Sequence

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.exception.exceptions import InvalidInputError
from src.platform.logging.loguru_io import Logger
from src.service.reservation.app.dto.hold_dto import SeatStatusItem
from src.service.reservation.app.interface.i_seat_ledger import ISeatLedger


class CheckSeatsStatusUseCase:
    """Snapshot of seat flags, one item per requested id in request order; unknown ids are reported, not raised."""

    def __init__(self, *, seat_ledger: ISeatLedger) -> None:
        self.seat_ledger = seat_ledger

    @classmethod
    @inject
    def depends(cls, seat_ledger: ISeatLedger = Depends(Provide[Container.seat_ledger])) -> Self:
        return cls(seat_ledger=seat_ledger)

    @Logger.io
    async def execute(self, *, seat_ids: Sequence[int]) -> List[SeatStatusItem]:
        if not seat_ids:
            raise InvalidInputError('seat_ids must be a non-empty list')

        seats = {seat.id: seat for seat in await self.seat_ledger.find_many(list(set(seat_ids)))}
        items: List[SeatStatusItem] = []
        for seat_id in seat_ids:
            seat = seats.get(seat_id)
            if seat is None:
                items.append(SeatStatusItem(seat_id=seat_id, found=False))
                continue
            items.append(
                SeatStatusItem(
                    seat_id=seat_id,
                    found=True,
                    position=seat.position,
                    is_booked=seat.is_booked,
                    is_booking=seat.is_booking,
                    is_paid=seat.is_paid,
                )
            )
        return items
