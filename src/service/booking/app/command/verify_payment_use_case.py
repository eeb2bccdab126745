from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.exception.exceptions import (
    ExternalServiceError,
    InvalidInputError,
    NotFoundError,
)
from src.platform.logging.loguru_io import Logger
from src.service.booking.app.command.finalize_booking_use_case import FinalizeBookingUseCase
from src.service.booking.app.dto.finalize_booking_dto import (
    FinalizeBookingRequest,
    FinalizeBookingResult,
)
from src.service.booking.app.interface.i_payment_command_repo import IPaymentCommandRepo
from src.service.booking.app.interface.i_payment_gateway import IPaymentGateway
from src.service.booking.domain.enum.payment_status import PaymentStatus


class VerifyPaymentUseCase:
    """
    Payment callback entry point.

    The gateway is asked for the transaction's real status; the request body
    is never trusted. A non-successful transaction settles the payment FAILED
    with the gateway's reason. A successful one is handed to the finalizer
    with the trip, seats and amount the gateway reports.
    """

    def __init__(
        self,
        *,
        payment_gateway: IPaymentGateway,
        payment_command_repo: IPaymentCommandRepo,
        finalize_booking_use_case: FinalizeBookingUseCase,
    ) -> None:
        self.payment_gateway = payment_gateway
        self.payment_command_repo = payment_command_repo
        self.finalize_booking_use_case = finalize_booking_use_case

    @classmethod
    @inject
    def depends(
        cls,
        payment_gateway: IPaymentGateway = Depends(Provide[Container.payment_gateway]),
        payment_command_repo: IPaymentCommandRepo = Depends(
            Provide[Container.payment_command_repo]
        ),
        finalize_booking_use_case: FinalizeBookingUseCase = Depends(FinalizeBookingUseCase.depends),
    ) -> Self:
        return cls(
            payment_gateway=payment_gateway,
            payment_command_repo=payment_command_repo,
            finalize_booking_use_case=finalize_booking_use_case,
        )

    @Logger.io
    async def execute(self, *, reference: str) -> FinalizeBookingResult:
        if not reference or not reference.strip():
            raise InvalidInputError('Payment reference is required')

        verification = await self.payment_gateway.verify(reference=reference)

        if not verification.is_success:
            reason = verification.gateway_response or verification.status or 'Payment not successful'
            await self.payment_command_repo.settle(
                reference=reference, status=PaymentStatus.FAILED, gateway_response=reason
            )
            raise ExternalServiceError(f'Payment verification failed: {reason}')

        if verification.trip_id is None or not verification.seat_ids:
            await self.payment_command_repo.settle(
                reference=reference,
                status=PaymentStatus.FAILED,
                gateway_response='Missing trip or seat ids in payment metadata',
            )
            raise InvalidInputError('Payment metadata does not name a trip and seats')
        if not verification.email:
            raise ExternalServiceError('Payment gateway did not report a customer email')

        request = FinalizeBookingRequest(
            payment_reference=reference,
            email=verification.email,
            trip_id=verification.trip_id,
            seat_ids=list(verification.seat_ids),
            total_amount_minor=verification.amount_minor,
        )
        try:
            return await self.finalize_booking_use_case.execute(request)
        except (InvalidInputError, NotFoundError) as e:
            await self.payment_command_repo.settle(
                reference=reference, status=PaymentStatus.FAILED, gateway_response=e.message
            )
            raise
