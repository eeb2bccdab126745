"""
Paystack payment gateway adapter

- POST /transaction/initialize        -> authorization_url + reference
- GET  /transaction/verify/:reference -> status, amount (kobo), metadata

Amounts are already in minor units on both sides. Metadata carries the trip
and seat ids so the verification callback knows what was paid for; both the
snake_case keys written here and the camelCase keys of older clients are read.
"""

from typing import Any, Mapping, Optional

import httpx
from pydantic import SecretStr

from src.platform.exception.exceptions import ExternalServiceError
from src.platform.logging.loguru_io import Logger
from src.service.booking.app.dto.payment_dto import GatewayInitialization, GatewayVerification
from src.service.booking.app.interface.i_payment_gateway import IPaymentGateway


class PaystackGatewayImpl(IPaymentGateway):
    def __init__(
        self,
        *,
        base_url: str,
        secret_key: SecretStr,
        timeout_seconds: float = 15.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = base_url.rstrip('/')
        self._secret_key = secret_key
        self.timeout_seconds = timeout_seconds
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            headers={
                'Authorization': f'Bearer {self._secret_key.get_secret_value()}',
                'Content-Type': 'application/json',
            },
            timeout=self.timeout_seconds,
            transport=self._transport,
        )

    @Logger.io
    async def initialize(
        self,
        *,
        email: str,
        amount_minor: int,
        metadata: Mapping[str, Any],
        callback_url: Optional[str] = None,
    ) -> GatewayInitialization:
        payload: dict[str, Any] = {'email': email, 'amount': amount_minor, 'metadata': dict(metadata)}
        if callback_url:
            payload['callback_url'] = callback_url

        data = await self._request('POST', '/transaction/initialize', json=payload)
        try:
            return GatewayInitialization(
                reference=data['reference'],
                authorization_url=data['authorization_url'],
                access_code=data.get('access_code'),
            )
        except KeyError as e:
            raise ExternalServiceError(f'Payment gateway response missing {e}') from e

    @Logger.io
    async def verify(self, *, reference: str) -> GatewayVerification:
        data = await self._request('GET', f'/transaction/verify/{reference}')
        metadata = data.get('metadata') or {}
        if not isinstance(metadata, dict):
            metadata = {}
        customer = data.get('customer') or {}

        trip_id = metadata.get('trip_id', metadata.get('tripId'))
        seat_ids = metadata.get('seat_ids', metadata.get('seatIds')) or []
        try:
            return GatewayVerification(
                reference=data.get('reference', reference),
                status=str(data.get('status', '')),
                amount_minor=int(data.get('amount') or 0),
                email=customer.get('email'),
                trip_id=int(trip_id) if trip_id is not None else None,
                seat_ids=[int(seat_id) for seat_id in seat_ids],
                gateway_response=data.get('gateway_response'),
            )
        except (TypeError, ValueError) as e:
            raise ExternalServiceError(f'Malformed payment metadata for {reference}: {e}') from e

    async def _request(self, method: str, path: str, **kwargs: Any) -> dict[str, Any]:
        try:
            async with self._client() as client:
                response = await client.request(method, path, **kwargs)
                response.raise_for_status()
                body = response.json()
        except httpx.HTTPStatusError as e:
            message = self._error_message(e.response)
            Logger.base.warning(f'[PAYSTACK] {method} {path} -> {e.response.status_code}: {message}')
            raise ExternalServiceError(f'Payment gateway error: {message}') from e
        except (httpx.HTTPError, ValueError) as e:
            Logger.base.warning(f'[PAYSTACK] {method} {path} failed: {e}')
            raise ExternalServiceError('Payment gateway unreachable') from e

        if not body.get('status'):
            raise ExternalServiceError(f'Payment gateway error: {body.get("message", "unknown")}')
        return body.get('data') or {}

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            return response.text or response.reason_phrase
        if isinstance(body, dict) and body.get('message'):
            return str(body['message'])
        return response.text or response.reason_phrase
