from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.exception.exceptions import ConflictError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.reservation.app.interface.i_seat_ledger import ISeatLedger
from src.service.reservation.domain.entity.seat_entity import SeatEntity
from src.service.reservation.domain.value_object import seat_transition
from src.service.reservation.domain.value_object.seat_ref import SeatRef


class MarkPaidDirectlyUseCase:
    """Counter/direct payment path: a free seat, or the payer's own hold or booking, becomes PAID.

    No booking record is written here; bookings come only from the payment finalizer.
    """

    def __init__(self, *, seat_ledger: ISeatLedger) -> None:
        self.seat_ledger = seat_ledger

    @classmethod
    @inject
    def depends(cls, seat_ledger: ISeatLedger = Depends(Provide[Container.seat_ledger])) -> Self:
        return cls(seat_ledger=seat_ledger)

    @Logger.io
    async def execute(self, *, user_id: int, seat_ref: SeatRef) -> SeatEntity:
        seat = await self.seat_ledger.resolve(seat_ref)
        if seat is None:
            raise NotFoundError('Seat not found')

        outcome = await self.seat_ledger.apply(
            seat_id=seat.id, transition=seat_transition.mark_paid_directly(user_id=user_id)
        )
        if outcome.seat is None:
            raise NotFoundError('Seat not found')
        if not outcome.applied:
            raise ConflictError('Seat is already claimed by another user or paid')

        Logger.base.info(f'[PAY] Seat {seat.id} marked paid for user {user_id}')
        return outcome.seat
