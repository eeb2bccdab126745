from typing import AsyncContextManager, Callable, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.exception.exceptions import ConflictError
from src.platform.logging.loguru_io import Logger
from src.service.booking.app.interface.i_booking_command_repo import IBookingCommandRepo
from src.service.booking.domain.entity.booking_entity import BookingEntity
from src.service.booking.driven_adapter.model.booking_model import BookingModel
from src.service.booking.driven_adapter.repo.booking_mapper import booking_model_to_entity


class BookingCommandRepoImpl(IBookingCommandRepo):
    def __init__(self, session_factory: Callable[..., AsyncContextManager[AsyncSession]]) -> None:
        self.session_factory = session_factory

    @Logger.io
    async def get_by_seat(self, seat_id: int) -> Optional[BookingEntity]:
        async with self.session_factory() as session:
            result = await session.execute(select(BookingModel).where(BookingModel.seat_id == seat_id))
            booking_model = result.scalar_one_or_none()
            return booking_model_to_entity(booking_model) if booking_model else None

    @Logger.io
    async def code_exists(self, booking_code: str) -> bool:
        async with self.session_factory() as session:
            result = await session.execute(
                select(BookingModel.id).where(BookingModel.booking_code == booking_code)
            )
            return result.scalar_one_or_none() is not None

    @Logger.io
    async def create(self, booking: BookingEntity) -> BookingEntity:
        async with self.session_factory() as session:
            booking_model = BookingModel(
                booking_code=booking.booking_code,
                user_id=booking.user_id,
                seat_id=booking.seat_id,
                trip_id=booking.trip_id,
                payment_reference=booking.payment_reference,
                amount_minor=booking.amount_minor,
                position=booking.position,
            )
            session.add(booking_model)
            try:
                await session.commit()
            except IntegrityError as e:
                await session.rollback()
                raise ConflictError(f'Seat {booking.seat_id} already has a booking') from e
            await session.refresh(booking_model)
            return booking_model_to_entity(booking_model)
