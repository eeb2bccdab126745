from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.exception.exceptions import InvalidInputError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.booking.app.dto.payment_dto import InitializePaymentRequest
from src.service.booking.app.interface.i_payment_command_repo import IPaymentCommandRepo
from src.service.booking.app.interface.i_payment_gateway import IPaymentGateway
from src.service.booking.domain.entity.payment_entity import PaymentEntity
from src.service.reservation.app.interface.i_seat_ledger import ISeatLedger
from src.service.reservation.app.interface.i_trip_query_repo import ITripQueryRepo


class InitializePaymentUseCase:
    """Open a gateway transaction for a set of seats and record it as a PENDING payment."""

    def __init__(
        self,
        *,
        payment_gateway: IPaymentGateway,
        payment_command_repo: IPaymentCommandRepo,
        trip_query_repo: ITripQueryRepo,
        seat_ledger: ISeatLedger,
    ) -> None:
        self.payment_gateway = payment_gateway
        self.payment_command_repo = payment_command_repo
        self.trip_query_repo = trip_query_repo
        self.seat_ledger = seat_ledger

    @classmethod
    @inject
    def depends(
        cls,
        payment_gateway: IPaymentGateway = Depends(Provide[Container.payment_gateway]),
        payment_command_repo: IPaymentCommandRepo = Depends(
            Provide[Container.payment_command_repo]
        ),
        trip_query_repo: ITripQueryRepo = Depends(Provide[Container.trip_query_repo]),
        seat_ledger: ISeatLedger = Depends(Provide[Container.seat_ledger]),
    ) -> Self:
        return cls(
            payment_gateway=payment_gateway,
            payment_command_repo=payment_command_repo,
            trip_query_repo=trip_query_repo,
            seat_ledger=seat_ledger,
        )

    @Logger.io
    async def execute(self, request: InitializePaymentRequest) -> PaymentEntity:
        if not request.email or '@' not in request.email:
            raise InvalidInputError('A valid email is required')
        if request.amount_minor <= 0:
            raise InvalidInputError('amount must be positive')
        if not request.seat_ids:
            raise InvalidInputError('seat_ids must be a non-empty list')
        if len(set(request.seat_ids)) != len(request.seat_ids):
            raise InvalidInputError('Duplicate seat ids in payment')

        if await self.trip_query_repo.get_by_id(request.trip_id) is None:
            raise NotFoundError('Trip not found')
        seats = await self.seat_ledger.find_many(request.seat_ids)
        if len(seats) != len(request.seat_ids) or any(s.trip_id != request.trip_id for s in seats):
            raise InvalidInputError('Every seat must exist and belong to the trip')

        initialization = await self.payment_gateway.initialize(
            email=request.email,
            amount_minor=request.amount_minor,
            metadata={'trip_id': request.trip_id, 'seat_ids': list(request.seat_ids)},
            callback_url=request.callback_url,
        )
        payment = await self.payment_command_repo.get_or_create_pending(
            PaymentEntity(
                reference=initialization.reference,
                email=request.email,
                amount_minor=request.amount_minor,
                trip_id=request.trip_id,
                seat_ids=list(request.seat_ids),
                authorization_url=initialization.authorization_url,
            )
        )
        Logger.base.info(
            f'[PAYMENT] Initialized {payment.reference} for {len(request.seat_ids)} seat(s)'
        )
        return payment
