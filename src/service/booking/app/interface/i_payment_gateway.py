from abc import ABC, abstractmethod
from typing import Any, Mapping, Optional

from src.service.booking.app.dto.payment_dto import GatewayInitialization, GatewayVerification


class IPaymentGateway(ABC):
    """Card payment provider. Treated as a trusted oracle for transaction status."""

    @abstractmethod
    async def initialize(
        self,
        *,
        email: str,
        amount_minor: int,
        metadata: Mapping[str, Any],
        callback_url: Optional[str] = None,
    ) -> GatewayInitialization:
        pass

    @abstractmethod
    async def verify(self, *, reference: str) -> GatewayVerification:
        """Raises ExternalServiceError when the provider cannot be reached or rejects the call."""
        pass
