from typing import List

from fastapi import APIRouter, Depends, status

from src.platform.logging.loguru_io import Logger
from src.service.booking.app.command.initialize_payment_use_case import InitializePaymentUseCase
from src.service.booking.app.command.verify_payment_use_case import VerifyPaymentUseCase
from src.service.booking.app.dto.payment_dto import (
    InitializePaymentRequest as InitializePaymentCommand,
)
from src.service.booking.app.query.list_user_bookings_use_case import ListUserBookingsUseCase
from src.service.booking.driving_adapter.http_controller.schema.payment_schema import (
    BookingResponse,
    FinalizeBookingResponse,
    InitializePaymentRequest,
    InitializePaymentResponse,
    VerifyPaymentRequest,
)


router = APIRouter()


@router.post('/initialize', status_code=status.HTTP_201_CREATED)
@Logger.io
async def initialize_payment(
    request: InitializePaymentRequest,
    use_case: InitializePaymentUseCase = Depends(InitializePaymentUseCase.depends),
) -> InitializePaymentResponse:
    payment = await use_case.execute(
        InitializePaymentCommand(
            email=request.email,
            amount_minor=request.amount_minor,
            trip_id=request.trip_id,
            seat_ids=request.seat_ids,
            callback_url=request.callback_url,
        )
    )
    return InitializePaymentResponse.from_entity(payment)


@router.post('/verify', status_code=status.HTTP_200_OK)
@Logger.io
async def verify_payment(
    request: VerifyPaymentRequest,
    use_case: VerifyPaymentUseCase = Depends(VerifyPaymentUseCase.depends),
) -> FinalizeBookingResponse:
    result = await use_case.execute(reference=request.reference)
    return FinalizeBookingResponse.from_result(result)


@router.get('/bookings/{user_id}', status_code=status.HTTP_200_OK)
@Logger.io
async def list_user_bookings(
    user_id: int,
    use_case: ListUserBookingsUseCase = Depends(ListUserBookingsUseCase.depends),
) -> List[BookingResponse]:
    bookings = await use_case.execute(user_id=user_id)
    return [BookingResponse.from_entity(booking) for booking in bookings]
