"""
Payment DTOs

Gateway-facing values, kept free of any particular gateway's JSON shape.
"""

from typing import List, Optional

import attrs


@attrs.define(frozen=True)
class GatewayInitialization:
    reference: str
    authorization_url: str
    access_code: Optional[str] = None


@attrs.define(frozen=True)
class GatewayVerification:
    reference: str
    status: str
    amount_minor: int
    email: Optional[str] = None
    trip_id: Optional[int] = None
    seat_ids: List[int] = attrs.field(factory=list)
    gateway_response: Optional[str] = None

    @property
    def is_success(self) -> bool:
        return self.status == 'success'


@attrs.define
class InitializePaymentRequest:
    email: str
    amount_minor: int
    trip_id: int
    seat_ids: List[int]
    callback_url: Optional[str] = None
