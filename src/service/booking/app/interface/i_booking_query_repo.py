from abc import ABC, abstractmethod
from typing import List

from src.service.booking.domain.entity.booking_entity import BookingEntity


class IBookingQueryRepo(ABC):
    @abstractmethod
    async def list_by_user(self, user_id: int) -> List[BookingEntity]:
        pass
