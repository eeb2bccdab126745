from datetime import datetime
from typing import List, Optional

import attrs

from src.service.booking.domain.enum.payment_status import PaymentStatus


@attrs.define
class PaymentEntity:
    """Gateway transaction; leaves PENDING exactly once, to SUCCESS or FAILED."""

    reference: str
    email: str
    amount_minor: int
    trip_id: Optional[int] = None
    seat_ids: List[int] = attrs.field(factory=list)
    authorization_url: Optional[str] = None
    status: PaymentStatus = PaymentStatus.PENDING
    gateway_response: Optional[str] = None
    id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def is_settled(self) -> bool:
        return self.status is not PaymentStatus.PENDING
