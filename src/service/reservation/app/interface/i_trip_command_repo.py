from abc import ABC, abstractmethod
from typing import Sequence

from src.service.reservation.domain.entity.trip_entity import TripEntity


class ITripCommandRepo(ABC):
    @abstractmethod
    async def create_with_seats(self, *, trip: TripEntity, positions: Sequence[int]) -> TripEntity:
        """Insert the trip and one FREE seat per position in a single transaction."""
        pass

    @abstractmethod
    async def delete(self, trip_id: int) -> bool:
        """Delete the trip and its seats. False if the trip does not exist."""
        pass

    @abstractmethod
    async def grow_seats(self, *, trip_id: int, seat_count: int) -> TripEntity:
        """Append positions old_count+1..seat_count."""
        pass

    @abstractmethod
    async def shrink_seats(self, *, trip_id: int, seat_count: int) -> bool:
        """Drop positions above seat_count, only if every one of them is FREE. False otherwise."""
        pass
