from typing import List, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.reservation.app.interface.i_seat_ledger import ISeatLedger
from src.service.reservation.app.interface.i_trip_query_repo import ITripQueryRepo
from src.service.reservation.domain.entity.seat_entity import SeatEntity


class ListAvailableSeatsUseCase:
    def __init__(self, *, seat_ledger: ISeatLedger, trip_query_repo: ITripQueryRepo) -> None:
        self.seat_ledger = seat_ledger
        self.trip_query_repo = trip_query_repo

    @classmethod
    @inject
    def depends(
        cls,
        seat_ledger: ISeatLedger = Depends(Provide[Container.seat_ledger]),
        trip_query_repo: ITripQueryRepo = Depends(Provide[Container.trip_query_repo]),
    ) -> Self:
        return cls(seat_ledger=seat_ledger, trip_query_repo=trip_query_repo)

    @Logger.io
    async def execute(self, *, trip_id: int) -> List[SeatEntity]:
        if await self.trip_query_repo.get_by_id(trip_id) is None:
            raise NotFoundError('Trip not found')
        return await self.seat_ledger.list_available(trip_id)
