from fastapi import APIRouter, Depends, Response, status

from src.platform.logging.loguru_io import Logger
from src.service.reservation.app.command.adjust_seat_count_use_case import AdjustSeatCountUseCase
from src.service.reservation.app.command.create_trip_with_seats_use_case import (
    CreateTripWithSeatsUseCase,
)
from src.service.reservation.app.command.delete_trip_use_case import DeleteTripUseCase
from src.service.reservation.app.dto.trip_dto import CreateTripRequest
from src.service.reservation.driving_adapter.http_controller.schema.trip_schema import (
    SeatCountRequest,
    TripCreateRequest,
    TripResponse,
)


router = APIRouter()


@router.post('', status_code=status.HTTP_201_CREATED)
@Logger.io
async def create_trip(
    request: TripCreateRequest,
    use_case: CreateTripWithSeatsUseCase = Depends(CreateTripWithSeatsUseCase.depends),
) -> TripResponse:
    trip = await use_case.execute(CreateTripRequest(**request.model_dump()))
    return TripResponse.from_entity(trip)


@router.delete('/{trip_id}', status_code=status.HTTP_204_NO_CONTENT)
@Logger.io
async def delete_trip(
    trip_id: int,
    use_case: DeleteTripUseCase = Depends(DeleteTripUseCase.depends),
) -> Response:
    await use_case.execute(trip_id=trip_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.patch('/{trip_id}/seat-count', status_code=status.HTTP_200_OK)
@Logger.io
async def adjust_seat_count(
    trip_id: int,
    request: SeatCountRequest,
    use_case: AdjustSeatCountUseCase = Depends(AdjustSeatCountUseCase.depends),
) -> TripResponse:
    trip = await use_case.execute(trip_id=trip_id, seat_count=request.seat_count)
    return TripResponse.from_entity(trip)
