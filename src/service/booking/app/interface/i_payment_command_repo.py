from abc import ABC, abstractmethod
from typing import Optional

from src.service.booking.domain.entity.payment_entity import PaymentEntity
from src.service.booking.domain.enum.payment_status import PaymentStatus


class IPaymentCommandRepo(ABC):
    @abstractmethod
    async def get_by_reference(self, reference: str) -> Optional[PaymentEntity]:
        pass

    @abstractmethod
    async def get_or_create_pending(self, payment: PaymentEntity) -> PaymentEntity:
        """Return the stored payment for payment.reference, inserting it as PENDING if absent."""
        pass

    @abstractmethod
    async def settle(
        self, *, reference: str, status: PaymentStatus, gateway_response: Optional[str] = None
    ) -> bool:
        """PENDING -> status. False if the payment is missing or already settled."""
        pass
