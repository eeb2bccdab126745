from typing import List

from fastapi import APIRouter, Depends, Query, status

from src.platform.logging.loguru_io import Logger
from src.service.reservation.app.command.confirm_hold_use_case import ConfirmHoldUseCase
from src.service.reservation.app.command.hold_seats_use_case import HoldSeatsUseCase
from src.service.reservation.app.command.mark_paid_directly_use_case import (
    MarkPaidDirectlyUseCase,
)
from src.service.reservation.app.query.check_seats_status_use_case import CheckSeatsStatusUseCase
from src.service.reservation.app.query.list_available_seats_use_case import (
    ListAvailableSeatsUseCase,
)
from src.service.reservation.driving_adapter.http_controller.schema.seat_schema import (
    HoldSeatsRequest,
    HoldSeatsResponse,
    SeatFailureResponse,
    SeatHoldResultResponse,
    SeatRefRequest,
    SeatResponse,
    SeatStatusRequest,
    SeatStatusResponse,
)
from src.service.shared_kernel.driving_adapter.current_user import get_current_user_id


router = APIRouter()


@router.get('/available', status_code=status.HTTP_200_OK)
@Logger.io
async def list_available_seats(
    trip_id: int = Query(gt=0),
    use_case: ListAvailableSeatsUseCase = Depends(ListAvailableSeatsUseCase.depends),
) -> List[SeatResponse]:
    seats = await use_case.execute(trip_id=trip_id)
    return [SeatResponse.from_entity(seat) for seat in seats]


@router.post('/hold', status_code=status.HTTP_200_OK)
@Logger.io
async def hold_seats(
    request: HoldSeatsRequest,
    user_id: int = Depends(get_current_user_id),
    use_case: HoldSeatsUseCase = Depends(HoldSeatsUseCase.depends),
) -> HoldSeatsResponse:
    result = await use_case.execute(
        user_id=user_id, seat_refs=[seat.to_seat_ref() for seat in request.seats]
    )
    return HoldSeatsResponse(
        held=len(result.held),
        results=[
            SeatHoldResultResponse(
                ok=outcome.ok,
                seat=SeatResponse.from_entity(outcome.seat) if outcome.seat else None,
                error=SeatFailureResponse.from_failure(outcome.error) if outcome.error else None,
            )
            for outcome in result.outcomes
        ],
    )


@router.post('/confirm', status_code=status.HTTP_200_OK)
@Logger.io
async def confirm_hold(
    request: SeatRefRequest,
    user_id: int = Depends(get_current_user_id),
    use_case: ConfirmHoldUseCase = Depends(ConfirmHoldUseCase.depends),
) -> SeatResponse:
    seat = await use_case.execute(user_id=user_id, seat_ref=request.to_seat_ref())
    return SeatResponse.from_entity(seat)


@router.post('/pay', status_code=status.HTTP_200_OK)
@Logger.io
async def mark_paid_directly(
    request: SeatRefRequest,
    user_id: int = Depends(get_current_user_id),
    use_case: MarkPaidDirectlyUseCase = Depends(MarkPaidDirectlyUseCase.depends),
) -> SeatResponse:
    seat = await use_case.execute(user_id=user_id, seat_ref=request.to_seat_ref())
    return SeatResponse.from_entity(seat)


@router.post('/status', status_code=status.HTTP_200_OK)
@Logger.io
async def check_seats_status(
    request: SeatStatusRequest,
    use_case: CheckSeatsStatusUseCase = Depends(CheckSeatsStatusUseCase.depends),
) -> List[SeatStatusResponse]:
    items = await use_case.execute(seat_ids=request.seat_ids)
    return [
        SeatStatusResponse(
            seat_id=item.seat_id,
            found=item.found,
            position=item.position,
            is_booked=item.is_booked,
            is_booking=item.is_booking,
            is_paid=item.is_paid,
        )
        for item in items
    ]
