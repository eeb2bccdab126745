from datetime import timedelta
from typing import List, Optional, Self, Sequence

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.core_setting import settings
from src.platform.config.di import Container
from src.platform.exception.exceptions import InvalidInputError
from src.platform.logging.loguru_io import Logger
from src.platform.types.utc_datetime import utc_now
from src.service.reservation.app.dto.hold_dto import HoldSeatsResult, SeatHoldOutcome
from src.service.reservation.app.interface.i_hold_expiry_scheduler import IHoldExpiryScheduler
from src.service.reservation.app.interface.i_seat_ledger import ISeatLedger
from src.service.reservation.domain.entity.seat_entity import SeatEntity
from src.service.reservation.domain.value_object import seat_transition
from src.service.reservation.domain.value_object.seat_ref import SeatRef
from src.service.shared_kernel.app.dto.seat_failure import SeatFailure
from src.service.shared_kernel.domain.enum.seat_error_code import SeatErrorCode


class HoldSeatsUseCase:
    """
    Put a batch of seats on hold for one user.

    The whole batch is rejected before any write if it names the same seat
    twice (directly or via two references resolving to one seat). Otherwise
    each seat is claimed independently with a FREE -> HOLDING conditional
    write; a lost race is reported per seat as SEAT_ALREADY_HELD, and every
    won seat gets its own expiry watchdog.
    """

    def __init__(
        self,
        *,
        seat_ledger: ISeatLedger,
        hold_expiry_scheduler: IHoldExpiryScheduler,
        hold_window: Optional[timedelta] = None,
    ) -> None:
        self.seat_ledger = seat_ledger
        self.hold_expiry_scheduler = hold_expiry_scheduler
        self.hold_window = hold_window or timedelta(minutes=settings.HOLD_EXPIRY_MINUTES)

    @classmethod
    @inject
    def depends(
        cls,
        seat_ledger: ISeatLedger = Depends(Provide[Container.seat_ledger]),
        hold_expiry_scheduler: IHoldExpiryScheduler = Depends(
            Provide[Container.hold_expiry_scheduler]
        ),
    ) -> Self:
        return cls(seat_ledger=seat_ledger, hold_expiry_scheduler=hold_expiry_scheduler)

    @Logger.io
    async def execute(self, *, user_id: int, seat_refs: Sequence[SeatRef]) -> HoldSeatsResult:
        if not seat_refs:
            raise InvalidInputError('At least one seat is required')
        if len(set(seat_refs)) != len(seat_refs):
            raise InvalidInputError('Duplicate seats in request')

        resolved: List[Optional[SeatEntity]] = [
            await self.seat_ledger.resolve(seat_ref) for seat_ref in seat_refs
        ]
        seat_ids = [seat.id for seat in resolved if seat is not None]
        if len(set(seat_ids)) != len(seat_ids):
            raise InvalidInputError('Duplicate seats in request')

        outcomes: List[SeatHoldOutcome] = []
        for seat_ref, seat in zip(seat_refs, resolved):
            if seat is None:
                outcomes.append(
                    SeatHoldOutcome(
                        seat_ref=seat_ref,
                        error=SeatFailure(None, SeatErrorCode.SEAT_NOT_FOUND, 'Seat not found'),
                    )
                )
                continue
            outcomes.append(await self._hold_one(user_id=user_id, seat_ref=seat_ref, seat=seat))

        held = sum(1 for o in outcomes if o.ok)
        Logger.base.info(f'[HOLD] User {user_id} held {held}/{len(outcomes)} seats')
        return HoldSeatsResult(outcomes=outcomes)

    async def _hold_one(self, *, user_id: int, seat_ref: SeatRef, seat: SeatEntity) -> SeatHoldOutcome:
        now = utc_now()
        outcome = await self.seat_ledger.apply(
            seat_id=seat.id,
            transition=seat_transition.hold(user_id=user_id, now=now, window=self.hold_window),
        )
        if outcome.seat is None:
            return SeatHoldOutcome(
                seat_ref=seat_ref,
                error=SeatFailure(seat.id, SeatErrorCode.SEAT_NOT_FOUND, 'Seat not found'),
            )
        if not outcome.applied:
            return SeatHoldOutcome(
                seat_ref=seat_ref,
                seat=outcome.seat,
                error=SeatFailure(
                    seat.id, SeatErrorCode.SEAT_ALREADY_HELD, 'Seat is already held or booked'
                ),
            )

        self.hold_expiry_scheduler.schedule_hold(
            seat_id=seat.id, hold_started_at=outcome.seat.hold_started_at or now
        )
        return SeatHoldOutcome(seat_ref=seat_ref, seat=outcome.seat)
