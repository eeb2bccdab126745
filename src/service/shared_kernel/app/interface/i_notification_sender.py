from abc import ABC, abstractmethod


class INotificationSender(ABC):
    """Outbound customer messages (email/SMS transport lives behind this port)."""

    @abstractmethod
    async def send(self, *, to: str, subject: str, body: str) -> None:
        """Raise on transport failure; callers decide whether delivery is best effort."""
        pass
