from abc import ABC, abstractmethod
from typing import Any, List, Mapping, Optional, Sequence

from src.service.reservation.app.dto.seat_ledger_dto import CompareAndSetOutcome
from src.service.reservation.domain.entity.seat_entity import SeatEntity
from src.service.reservation.domain.value_object.seat_ref import SeatRef
from src.service.reservation.domain.value_object.seat_transition import SeatTransition


class ISeatLedger(ABC):
    """Durable seat records and the only way to mutate them."""

    @abstractmethod
    async def find_by_id(self, seat_id: int) -> Optional[SeatEntity]:
        pass

    @abstractmethod
    async def find_by_trip_and_position(self, *, trip_id: int, position: int) -> Optional[SeatEntity]:
        pass

    @abstractmethod
    async def resolve(self, seat_ref: SeatRef) -> Optional[SeatEntity]:
        pass

    @abstractmethod
    async def list_available(self, trip_id: int) -> List[SeatEntity]:
        """Seats not yet booked, ordered by position."""
        pass

    @abstractmethod
    async def list_holding(self) -> List[SeatEntity]:
        """Every seat with an active hold, across all trips."""
        pass

    @abstractmethod
    async def find_many(self, seat_ids: Sequence[int]) -> List[SeatEntity]:
        pass

    @abstractmethod
    async def compare_and_set(
        self,
        *,
        seat_id: int,
        expected: Mapping[str, Any] | Sequence[Mapping[str, Any]],
        changes: Mapping[str, Any],
    ) -> CompareAndSetOutcome:
        """Write `changes` only if the seat still matches `expected` (any one alternative)."""
        pass

    @abstractmethod
    async def apply(self, *, seat_id: int, transition: SeatTransition) -> CompareAndSetOutcome:
        pass
