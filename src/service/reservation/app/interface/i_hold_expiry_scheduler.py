from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from src.service.reservation.domain.enum.hold_check_action import HoldCheckAction


class IHoldExpiryScheduler(ABC):
    @abstractmethod
    def schedule_hold(self, *, seat_id: int, hold_started_at: datetime) -> None:
        """Arm the reminder and release checks for one freshly created hold."""
        pass

    @abstractmethod
    async def sweep_once(self, now: Optional[datetime] = None) -> dict[HoldCheckAction, int]:
        """Evaluate every holding seat against wall-clock time."""
        pass

    @abstractmethod
    async def run_sweeper(self) -> None:
        pass

    @abstractmethod
    async def shutdown(self) -> None:
        pass
