"""
Finalize Booking Use Case

Turns a verified payment into paid seats plus booking records.

Flow:
1. Reject empty or duplicated seat lists before touching anything
2. Resolve the paying user (by email) and the trip
3. Load the payment, creating it PENDING if the callback beat initialization
   - already SUCCESS: duplicate delivery, report every seat as booked, write nothing
   - already FAILED:  decline
4. Per seat, in request order:
   seat exists -> no booking yet -> belongs to the trip -> free or held by the payer
   -> booking code -> conditional write to PAID -> booking insert
   A seat already PAID by the payer with a code but no booking is an interrupted
   earlier attempt: only the booking insert is redone, with the stored code
5. All seats booked: payment SUCCESS, confirmation sent (best effort)
   First failing seat: stop, payment FAILED with the reason, earlier seats stay booked
"""

from typing import List, Self, Union

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.core_setting import settings
from src.platform.config.di import Container
from src.platform.exception.exceptions import ConflictError, InvalidInputError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.booking.app.dto.finalize_booking_dto import (
    FinalizeBookingRequest,
    FinalizeBookingResult,
)
from src.service.booking.app.interface.i_booking_command_repo import IBookingCommandRepo
from src.service.booking.app.interface.i_payment_command_repo import IPaymentCommandRepo
from src.service.booking.domain.entity.booking_entity import BookingEntity, generate_booking_code
from src.service.booking.domain.entity.payment_entity import PaymentEntity
from src.service.booking.domain.enum.payment_status import PaymentStatus
from src.service.booking.domain.value_object.amount_split import split_amount
from src.service.reservation.app.interface.i_seat_ledger import ISeatLedger
from src.service.reservation.app.interface.i_trip_query_repo import ITripQueryRepo
from src.service.reservation.domain.entity.trip_entity import TripEntity
from src.service.reservation.domain.value_object import seat_transition
from src.service.shared_kernel.app.dto.seat_failure import SeatFailure
from src.service.shared_kernel.app.interface.i_notification_sender import INotificationSender
from src.service.shared_kernel.app.interface.i_user_query_repo import IUserQueryRepo
from src.service.shared_kernel.app.notification import notification_message
from src.service.shared_kernel.app.notification.notification_message import BookedSeatLine
from src.service.shared_kernel.domain.entity.user_entity import UserEntity
from src.service.shared_kernel.domain.enum.seat_error_code import SeatErrorCode


class FinalizeBookingUseCase:
    def __init__(
        self,
        *,
        seat_ledger: ISeatLedger,
        trip_query_repo: ITripQueryRepo,
        user_query_repo: IUserQueryRepo,
        booking_command_repo: IBookingCommandRepo,
        payment_command_repo: IPaymentCommandRepo,
        notification_sender: INotificationSender,
    ) -> None:
        self.seat_ledger = seat_ledger
        self.trip_query_repo = trip_query_repo
        self.user_query_repo = user_query_repo
        self.booking_command_repo = booking_command_repo
        self.payment_command_repo = payment_command_repo
        self.notification_sender = notification_sender

    @classmethod
    @inject
    def depends(
        cls,
        seat_ledger: ISeatLedger = Depends(Provide[Container.seat_ledger]),
        trip_query_repo: ITripQueryRepo = Depends(Provide[Container.trip_query_repo]),
        user_query_repo: IUserQueryRepo = Depends(Provide[Container.user_query_repo]),
        booking_command_repo: IBookingCommandRepo = Depends(
            Provide[Container.booking_command_repo]
        ),
        payment_command_repo: IPaymentCommandRepo = Depends(
            Provide[Container.payment_command_repo]
        ),
        notification_sender: INotificationSender = Depends(
            Provide[Container.notification_sender]
        ),
    ) -> Self:
        return cls(
            seat_ledger=seat_ledger,
            trip_query_repo=trip_query_repo,
            user_query_repo=user_query_repo,
            booking_command_repo=booking_command_repo,
            payment_command_repo=payment_command_repo,
            notification_sender=notification_sender,
        )

    @Logger.io
    async def execute(self, request: FinalizeBookingRequest) -> FinalizeBookingResult:
        seat_ids = list(request.seat_ids)
        if not seat_ids:
            raise InvalidInputError('seat_ids must be a non-empty list')
        if len(set(seat_ids)) != len(seat_ids):
            raise InvalidInputError('Duplicate seat ids in payment')
        if request.total_amount_minor < 0:
            raise InvalidInputError('Payment amount cannot be negative')

        user = await self.user_query_repo.get_by_email(request.email)
        if user is None or user.id is None:
            raise NotFoundError('User not found')
        trip = await self.trip_query_repo.get_by_id(request.trip_id)
        if trip is None:
            raise NotFoundError('Trip not found')

        payment = await self.payment_command_repo.get_or_create_pending(
            PaymentEntity(
                reference=request.payment_reference,
                email=request.email,
                amount_minor=request.total_amount_minor,
                trip_id=request.trip_id,
                seat_ids=seat_ids,
            )
        )
        if payment.status is PaymentStatus.SUCCESS:
            Logger.base.info(f'[FINALIZE] Duplicate callback for {payment.reference}, nothing to do')
            return FinalizeBookingResult.duplicate_result(
                payment_reference=payment.reference, seat_ids=seat_ids
            )
        if payment.status is PaymentStatus.FAILED:
            raise ConflictError(f'Payment {payment.reference} has already failed')

        amounts = split_amount(request.total_amount_minor, len(seat_ids))
        bookings: List[BookingEntity] = []
        for seat_id, amount_minor in zip(seat_ids, amounts):
            outcome = await self._finalize_seat(
                seat_id=seat_id,
                user=user,
                trip=trip,
                amount_minor=amount_minor,
                payment_reference=payment.reference,
            )
            if isinstance(outcome, SeatFailure):
                await self.payment_command_repo.settle(
                    reference=payment.reference,
                    status=PaymentStatus.FAILED,
                    gateway_response=f'{outcome.code}: {outcome.message}',
                )
                Logger.base.warning(
                    f'[FINALIZE] {payment.reference} stopped at seat {seat_id} ({outcome.code}); '
                    f'{len(bookings)} seat(s) already booked stay booked'
                )
                return FinalizeBookingResult.partial_result(
                    payment_reference=payment.reference, bookings=bookings, failure=outcome
                )
            bookings.append(outcome)

        settled = await self.payment_command_repo.settle(
            reference=payment.reference, status=PaymentStatus.SUCCESS
        )
        Logger.base.info(f'[FINALIZE] {payment.reference} booked {len(bookings)} seat(s)')
        if settled:
            await self._send_confirmation(user=user, trip=trip, bookings=bookings)
        return FinalizeBookingResult.success_result(
            payment_reference=payment.reference, bookings=bookings
        )

    async def _finalize_seat(
        self,
        *,
        seat_id: int,
        user: UserEntity,
        trip: TripEntity,
        amount_minor: int,
        payment_reference: str,
    ) -> Union[BookingEntity, SeatFailure]:
        user_id: int = user.id  # type: ignore[assignment]

        seat = await self.seat_ledger.find_by_id(seat_id)
        if seat is None:
            return SeatFailure(seat_id, SeatErrorCode.SEAT_NOT_FOUND, 'Seat not found')

        existing = await self.booking_command_repo.get_by_seat(seat_id)
        if existing is not None:
            if existing.payment_reference == payment_reference:
                # Retried callback for this same payment, booking already written
                return existing
            return SeatFailure(seat_id, SeatErrorCode.SEAT_ALREADY_BOOKED, 'Seat already booked')

        if seat.position is None or seat.trip_id != trip.id:
            return SeatFailure(
                seat_id, SeatErrorCode.INVALID_SEAT_STATE, 'Seat has no position on this trip'
            )

        if seat.is_paid and seat.paid_by == user_id and seat.booking_code is not None:
            # Paid by an earlier attempt whose booking insert never landed
            Logger.base.warning(
                f'[FINALIZE] Seat {seat_id} is paid without a booking, resuming with {seat.booking_code}'
            )
            booking_code = seat.booking_code
        elif seat.is_free or seat.is_held_by(user_id):
            booking_code = await self._new_booking_code()
            outcome = await self.seat_ledger.apply(
                seat_id=seat_id,
                transition=seat_transition.finalize_payment(
                    user_id=user_id, booking_code=booking_code
                ),
            )
            if not outcome.applied:
                return SeatFailure(
                    seat_id, SeatErrorCode.SEAT_UNAVAILABLE, 'Seat was claimed by another request'
                )
        else:
            return SeatFailure(seat_id, SeatErrorCode.SEAT_UNAVAILABLE, 'Seat is not available')

        try:
            return await self.booking_command_repo.create(
                BookingEntity.create(
                    booking_code=booking_code,
                    user_id=user_id,
                    seat_id=seat_id,
                    trip_id=trip.id,  # type: ignore[arg-type]
                    payment_reference=payment_reference,
                    amount_minor=amount_minor,
                    position=seat.position,
                )
            )
        except ConflictError:
            Logger.base.error(f'[FINALIZE] Seat {seat_id} is paid but its booking insert conflicted')
            return SeatFailure(seat_id, SeatErrorCode.SEAT_ALREADY_BOOKED, 'Seat already booked')

    async def _new_booking_code(self) -> str:
        for _ in range(settings.BOOKING_CODE_MAX_ATTEMPTS):
            code = generate_booking_code()
            if not await self.booking_command_repo.code_exists(code):
                return code
        raise ConflictError('Could not allocate a unique booking code')

    async def _send_confirmation(
        self, *, user: UserEntity, trip: TripEntity, bookings: List[BookingEntity]
    ) -> None:
        try:
            message = notification_message.booking_confirmation(
                name=user.name,
                trip_name=trip.trip_name,
                lines=[
                    BookedSeatLine(
                        position=b.position, booking_code=b.booking_code, amount_minor=b.amount_minor
                    )
                    for b in bookings
                ],
            )
            await self.notification_sender.send(
                to=user.email, subject=message.subject, body=message.body
            )
        except Exception as e:
            Logger.base.warning(f'[FINALIZE] Confirmation to {user.email} failed: {e}')
