from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.exception.exceptions import ConflictError, InvalidInputError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.reservation.app.interface.i_trip_command_repo import ITripCommandRepo
from src.service.reservation.app.interface.i_trip_query_repo import ITripQueryRepo
from src.service.reservation.domain.entity.trip_entity import MAX_SEAT_COUNT, TripEntity


class AdjustSeatCountUseCase:
    """
    Change a trip's seat inventory size.

    Growing appends positions old+1..new. Shrinking removes the highest
    positions, and only when every one of them is still FREE; otherwise the
    trip is left untouched and the request is a conflict.
    """

    def __init__(
        self, *, trip_command_repo: ITripCommandRepo, trip_query_repo: ITripQueryRepo
    ) -> None:
        self.trip_command_repo = trip_command_repo
        self.trip_query_repo = trip_query_repo

    @classmethod
    @inject
    def depends(
        cls,
        trip_command_repo: ITripCommandRepo = Depends(Provide[Container.trip_command_repo]),
        trip_query_repo: ITripQueryRepo = Depends(Provide[Container.trip_query_repo]),
    ) -> Self:
        return cls(trip_command_repo=trip_command_repo, trip_query_repo=trip_query_repo)

    @Logger.io
    async def execute(self, *, trip_id: int, seat_count: int) -> TripEntity:
        if not 1 <= seat_count <= MAX_SEAT_COUNT:
            raise InvalidInputError(f'seat_count must be between 1 and {MAX_SEAT_COUNT}')

        trip = await self.trip_query_repo.get_by_id(trip_id)
        if trip is None:
            raise NotFoundError('Trip not found')

        if seat_count > trip.seat_count:
            trip = await self.trip_command_repo.grow_seats(trip_id=trip_id, seat_count=seat_count)
        elif seat_count < trip.seat_count:
            if not await self.trip_command_repo.shrink_seats(trip_id=trip_id, seat_count=seat_count):
                raise ConflictError('Seats above the new count are held, booked or paid')
            trip.seat_count = seat_count

        Logger.base.info(f'[TRIP] Trip {trip_id} seat count is now {trip.seat_count}')
        return trip
