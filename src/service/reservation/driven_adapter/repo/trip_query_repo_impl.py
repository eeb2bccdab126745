from typing import AsyncContextManager, Callable, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.logging.loguru_io import Logger
from src.service.reservation.app.interface.i_trip_query_repo import ITripQueryRepo
from src.service.reservation.domain.entity.trip_entity import TripEntity
from src.service.reservation.driven_adapter.model.trip_model import TripModel
from src.service.reservation.driven_adapter.repo.trip_mapper import trip_model_to_entity


class TripQueryRepoImpl(ITripQueryRepo):
    def __init__(self, session_factory: Callable[..., AsyncContextManager[AsyncSession]]) -> None:
        self.session_factory = session_factory

    @Logger.io
    async def get_by_id(self, trip_id: int) -> Optional[TripEntity]:
        async with self.session_factory() as session:
            trip_model = await session.get(TripModel, trip_id)
            return trip_model_to_entity(trip_model) if trip_model else None
