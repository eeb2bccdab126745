from abc import ABC, abstractmethod
from typing import Optional

from src.service.booking.domain.entity.booking_entity import BookingEntity


class IBookingCommandRepo(ABC):
    @abstractmethod
    async def get_by_seat(self, seat_id: int) -> Optional[BookingEntity]:
        pass

    @abstractmethod
    async def code_exists(self, booking_code: str) -> bool:
        pass

    @abstractmethod
    async def create(self, booking: BookingEntity) -> BookingEntity:
        """Raises ConflictError when the seat (or the code) already has a booking."""
        pass
