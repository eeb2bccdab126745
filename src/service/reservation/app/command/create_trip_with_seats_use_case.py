import random
from typing import Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.logging.loguru_io import Logger
from src.service.reservation.app.dto.trip_dto import CreateTripRequest
from src.service.reservation.app.interface.i_trip_command_repo import ITripCommandRepo
from src.service.reservation.domain.entity.trip_entity import TripEntity, shuffled_positions


class CreateTripWithSeatsUseCase:
    """Create a trip and its full seat inventory; seats are inserted in shuffled position order."""

    def __init__(
        self, *, trip_command_repo: ITripCommandRepo, rng: Optional[random.Random] = None
    ) -> None:
        self.trip_command_repo = trip_command_repo
        self.rng = rng

    @classmethod
    @inject
    def depends(
        cls,
        trip_command_repo: ITripCommandRepo = Depends(Provide[Container.trip_command_repo]),
    ) -> Self:
        return cls(trip_command_repo=trip_command_repo)

    @Logger.io
    async def execute(self, request: CreateTripRequest) -> TripEntity:
        trip = TripEntity.create(
            trip_name=request.trip_name,
            bus=request.bus,
            pickup_city=request.pickup_city,
            pickup_location=request.pickup_location,
            dropoff_city=request.dropoff_city,
            dropoff_location=request.dropoff_location,
            takeoff_date=request.takeoff_date,
            takeoff_time=request.takeoff_time,
            seat_count=request.seat_count,
            price_minor=request.price_minor,
            arrival_time=request.arrival_time,
        )
        positions = shuffled_positions(trip.seat_count, self.rng)
        return await self.trip_command_repo.create_with_seats(trip=trip, positions=positions)
