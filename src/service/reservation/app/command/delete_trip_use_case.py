from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.reservation.app.interface.i_trip_command_repo import ITripCommandRepo


class DeleteTripUseCase:
    def __init__(self, *, trip_command_repo: ITripCommandRepo) -> None:
        self.trip_command_repo = trip_command_repo

    @classmethod
    @inject
    def depends(
        cls,
        trip_command_repo: ITripCommandRepo = Depends(Provide[Container.trip_command_repo]),
    ) -> Self:
        return cls(trip_command_repo=trip_command_repo)

    @Logger.io
    async def execute(self, *, trip_id: int) -> None:
        if not await self.trip_command_repo.delete(trip_id):
            raise NotFoundError('Trip not found')
        Logger.base.info(f'[TRIP] Deleted trip {trip_id} and its seats')
