from abc import ABC, abstractmethod
from typing import Optional

from src.service.reservation.domain.entity.trip_entity import TripEntity


class ITripQueryRepo(ABC):
    @abstractmethod
    async def get_by_id(self, trip_id: int) -> Optional[TripEntity]:
        pass
