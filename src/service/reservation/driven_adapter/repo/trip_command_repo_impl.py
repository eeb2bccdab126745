from typing import AsyncContextManager, Callable, Sequence

from sqlalchemy import delete, func, insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.reservation.app.interface.i_trip_command_repo import ITripCommandRepo
from src.service.reservation.domain.entity.trip_entity import TripEntity
from src.service.reservation.driven_adapter.model.seat_model import SeatModel
from src.service.reservation.driven_adapter.model.trip_model import TripModel
from src.service.reservation.driven_adapter.repo.trip_mapper import trip_model_to_entity


class TripCommandRepoImpl(ITripCommandRepo):
    """Trip aggregate writes. Seat rows are created and removed here; their state is the ledger's."""

    def __init__(self, session_factory: Callable[..., AsyncContextManager[AsyncSession]]) -> None:
        self.session_factory = session_factory

    @Logger.io
    async def create_with_seats(self, *, trip: TripEntity, positions: Sequence[int]) -> TripEntity:
        async with self.session_factory() as session:
            trip_model = TripModel(
                trip_code=trip.trip_code,
                trip_name=trip.trip_name,
                bus=trip.bus,
                pickup_city=trip.pickup_city,
                pickup_location=trip.pickup_location,
                dropoff_city=trip.dropoff_city,
                dropoff_location=trip.dropoff_location,
                takeoff_date=trip.takeoff_date,
                takeoff_time=trip.takeoff_time,
                arrival_time=trip.arrival_time,
                price_minor=trip.price_minor,
                seat_count=trip.seat_count,
                status=trip.status.value,
            )
            session.add(trip_model)
            await session.flush()

            await session.execute(
                insert(SeatModel),
                [{'trip_id': trip_model.id, 'position': position} for position in positions],
            )
            await session.commit()
            await session.refresh(trip_model)

            Logger.base.info(
                f'[TRIP] Created trip {trip_model.id} ({trip_model.trip_code}) with {len(positions)} seats'
            )
            return trip_model_to_entity(trip_model)

    @Logger.io
    async def delete(self, trip_id: int) -> bool:
        async with self.session_factory() as session:
            await session.execute(delete(SeatModel).where(SeatModel.trip_id == trip_id))
            result = await session.execute(delete(TripModel).where(TripModel.id == trip_id))
            if result.rowcount == 0:  # type: ignore[attr-defined]
                await session.rollback()
                return False
            await session.commit()
            return True

    @Logger.io
    async def grow_seats(self, *, trip_id: int, seat_count: int) -> TripEntity:
        async with self.session_factory() as session:
            trip_model = await session.get(TripModel, trip_id)
            if trip_model is None:
                raise NotFoundError('Trip not found')

            current = await session.scalar(
                select(func.coalesce(func.max(SeatModel.position), 0)).where(
                    SeatModel.trip_id == trip_id
                )
            )
            new_positions = range((current or 0) + 1, seat_count + 1)
            if new_positions:
                await session.execute(
                    insert(SeatModel),
                    [{'trip_id': trip_id, 'position': position} for position in new_positions],
                )
            trip_model.seat_count = seat_count
            await session.commit()
            await session.refresh(trip_model)
            return trip_model_to_entity(trip_model)

    @Logger.io
    async def shrink_seats(self, *, trip_id: int, seat_count: int) -> bool:
        async with self.session_factory() as session:
            trip_model = await session.get(TripModel, trip_id)
            if trip_model is None:
                raise NotFoundError('Trip not found')

            above = SeatModel.position > seat_count
            total = await session.scalar(
                select(func.count()).select_from(SeatModel).where(SeatModel.trip_id == trip_id, above)
            )
            # Only FREE seats may go; a claimed seat above the cut aborts the whole shrink
            result = await session.execute(
                delete(SeatModel).where(
                    SeatModel.trip_id == trip_id,
                    above,
                    SeatModel.is_booking.is_(False),
                    SeatModel.is_booked.is_(False),
                    SeatModel.is_paid.is_(False),
                )
            )
            if result.rowcount != total:  # type: ignore[attr-defined]
                await session.rollback()
                return False

            trip_model.seat_count = seat_count
            await session.commit()
            return True
