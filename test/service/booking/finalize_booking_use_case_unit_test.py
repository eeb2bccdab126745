"""
Unit tests for FinalizeBookingUseCase

Test Coverage:
1. Input rejection before any mutation (empty, duplicate, negative amount)
2. Payment replay (already SUCCESS / already FAILED)
3. Per-seat checks and stop-at-first-failure
4. Confirmation only when this call settled the payment
"""

from datetime import date
from unittest.mock import AsyncMock

import pytest

from src.platform.exception.exceptions import ConflictError, InvalidInputError, NotFoundError
from src.service.booking.app.command.finalize_booking_use_case import FinalizeBookingUseCase
from src.service.booking.app.dto.finalize_booking_dto import FinalizeBookingRequest
from src.service.booking.domain.entity.booking_entity import BookingEntity
from src.service.booking.domain.entity.payment_entity import PaymentEntity
from src.service.booking.domain.enum.payment_status import PaymentStatus
from src.service.reservation.app.dto.seat_ledger_dto import CompareAndSetOutcome
from src.service.reservation.domain.entity.seat_entity import SeatEntity
from src.service.reservation.domain.entity.trip_entity import TripEntity
from src.service.shared_kernel.domain.entity.user_entity import UserEntity
from src.service.shared_kernel.domain.enum.seat_error_code import SeatErrorCode


pytestmark = pytest.mark.unit

USER = UserEntity(id=7, name='Ada Obi', email='ada@example.com')
TRIP = TripEntity(
    id=1,
    trip_name='Morning Express',
    bus='Coaster',
    pickup_city='Lagos',
    pickup_location='Jibowu',
    dropoff_city='Ibadan',
    dropoff_location='Challenge',
    takeoff_date=date(2026, 12, 1),
    takeoff_time='08:30',
    seat_count=10,
)


def _request(seat_ids, total=9000) -> FinalizeBookingRequest:
    return FinalizeBookingRequest(
        payment_reference='ref-1',
        email=USER.email,
        trip_id=TRIP.id,
        seat_ids=seat_ids,
        total_amount_minor=total,
    )


def _payment(status=PaymentStatus.PENDING) -> PaymentEntity:
    return PaymentEntity(reference='ref-1', email=USER.email, amount_minor=9000, status=status)


class TestFinalizeBookingUseCase:
    def setup_method(self):
        self.seat_ledger = AsyncMock()
        self.trip_query_repo = AsyncMock()
        self.user_query_repo = AsyncMock()
        self.booking_command_repo = AsyncMock()
        self.payment_command_repo = AsyncMock()
        self.notification_sender = AsyncMock()

        self.user_query_repo.get_by_email.return_value = USER
        self.trip_query_repo.get_by_id.return_value = TRIP
        self.payment_command_repo.get_or_create_pending.return_value = _payment()
        self.payment_command_repo.settle.return_value = True
        self.booking_command_repo.get_by_seat.return_value = None
        self.booking_command_repo.code_exists.return_value = False
        self.booking_command_repo.create.side_effect = lambda booking: booking
        self.seat_ledger.find_by_id.side_effect = lambda seat_id: SeatEntity(
            id=seat_id, trip_id=TRIP.id, position=seat_id
        )
        self.seat_ledger.apply.return_value = CompareAndSetOutcome(applied=True, seat=None)

        self.use_case = FinalizeBookingUseCase(
            seat_ledger=self.seat_ledger,
            trip_query_repo=self.trip_query_repo,
            user_query_repo=self.user_query_repo,
            booking_command_repo=self.booking_command_repo,
            payment_command_repo=self.payment_command_repo,
            notification_sender=self.notification_sender,
        )

    # ==================== Input rejection ====================

    @pytest.mark.asyncio
    @pytest.mark.parametrize('seat_ids', [[], [3, 3]])
    async def test_bad_seat_lists_are_rejected_before_any_write(self, seat_ids):
        with pytest.raises(InvalidInputError):
            await self.use_case.execute(_request(seat_ids))

        self.payment_command_repo.get_or_create_pending.assert_not_called()
        self.seat_ledger.apply.assert_not_called()

    @pytest.mark.asyncio
    async def test_unknown_user(self):
        self.user_query_repo.get_by_email.return_value = None

        with pytest.raises(NotFoundError):
            await self.use_case.execute(_request([1]))

    @pytest.mark.asyncio
    async def test_unknown_trip(self):
        self.trip_query_repo.get_by_id.return_value = None

        with pytest.raises(NotFoundError):
            await self.use_case.execute(_request([1]))

    # ==================== Replays ====================

    @pytest.mark.asyncio
    async def test_already_successful_payment_reports_duplicate(self):
        self.payment_command_repo.get_or_create_pending.return_value = _payment(PaymentStatus.SUCCESS)

        result = await self.use_case.execute(_request([1, 2]))

        assert result.success is False
        assert result.payment_status is PaymentStatus.SUCCESS
        assert [f.code for f in result.failures] == [SeatErrorCode.SEAT_ALREADY_BOOKED] * 2
        self.seat_ledger.apply.assert_not_called()
        self.notification_sender.send.assert_not_called()

    @pytest.mark.asyncio
    async def test_already_failed_payment_conflicts(self):
        self.payment_command_repo.get_or_create_pending.return_value = _payment(PaymentStatus.FAILED)

        with pytest.raises(ConflictError):
            await self.use_case.execute(_request([1]))

    # ==================== Booking ====================

    @pytest.mark.asyncio
    async def test_all_seats_booked_with_split_amounts(self):
        result = await self.use_case.execute(_request([1, 2, 3], total=1000))

        assert result.success is True
        assert [b.amount_minor for b in result.bookings] == [334, 333, 333]
        assert [b.seat_id for b in result.bookings] == [1, 2, 3]
        assert len({b.booking_code for b in result.bookings}) == 3
        self.payment_command_repo.settle.assert_awaited_once_with(
            reference='ref-1', status=PaymentStatus.SUCCESS
        )
        self.notification_sender.send.assert_awaited_once()
        assert self.notification_sender.send.call_args.kwargs['to'] == USER.email

    @pytest.mark.asyncio
    async def test_stops_at_first_failing_seat(self):
        # Given: seat 2 is held by another user
        def find(seat_id):
            if seat_id == 2:
                return SeatEntity(id=2, trip_id=TRIP.id, position=2, is_booking=True, booked_by=8)
            return SeatEntity(id=seat_id, trip_id=TRIP.id, position=seat_id)

        self.seat_ledger.find_by_id.side_effect = find

        # When
        result = await self.use_case.execute(_request([1, 2, 3]))

        # Then: seat 1 stays booked, seat 3 is never attempted
        assert result.success is False
        assert result.payment_status is PaymentStatus.FAILED
        assert [b.seat_id for b in result.bookings] == [1]
        assert result.failed_seat.seat_id == 2
        assert result.failed_seat.code is SeatErrorCode.SEAT_UNAVAILABLE
        assert self.seat_ledger.apply.await_count == 1
        assert self.payment_command_repo.settle.call_args.kwargs['status'] is PaymentStatus.FAILED
        self.notification_sender.send.assert_not_called()

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        'seat, code',
        [
            (None, SeatErrorCode.SEAT_NOT_FOUND),
            (SeatEntity(id=1, trip_id=99, position=1), SeatErrorCode.INVALID_SEAT_STATE),
            (SeatEntity(id=1, trip_id=1, position=None), SeatErrorCode.INVALID_SEAT_STATE),
            (SeatEntity(id=1, trip_id=1, position=1, is_paid=True), SeatErrorCode.SEAT_UNAVAILABLE),
        ],
    )
    async def test_seat_checks(self, seat, code):
        self.seat_ledger.find_by_id.side_effect = None
        self.seat_ledger.find_by_id.return_value = seat

        result = await self.use_case.execute(_request([1]))

        assert result.failed_seat.code is code

    @pytest.mark.asyncio
    async def test_seat_with_existing_booking_is_already_booked(self):
        self.booking_command_repo.get_by_seat.return_value = BookingEntity(
            booking_code='ZZZZ9999',
            user_id=8,
            seat_id=1,
            trip_id=1,
            payment_reference='other-ref',
            amount_minor=100,
            position=1,
        )

        result = await self.use_case.execute(_request([1]))

        assert result.failed_seat.code is SeatErrorCode.SEAT_ALREADY_BOOKED

    @pytest.mark.asyncio
    async def test_retry_reuses_bookings_of_the_same_payment(self):
        # Given: a crash left seat 1 booked under this payment
        previous = BookingEntity(
            booking_code='KEEP0001',
            user_id=7,
            seat_id=1,
            trip_id=1,
            payment_reference='ref-1',
            amount_minor=4500,
            position=1,
        )
        self.booking_command_repo.get_by_seat.side_effect = lambda seat_id: (
            previous if seat_id == 1 else None
        )

        # When
        result = await self.use_case.execute(_request([1, 2]))

        # Then
        assert result.success is True
        assert result.bookings[0] is previous
        assert self.seat_ledger.apply.await_count == 1

    @pytest.mark.asyncio
    async def test_lost_race_on_the_conditional_write(self):
        self.seat_ledger.apply.return_value = CompareAndSetOutcome(applied=False, seat=None)

        result = await self.use_case.execute(_request([1]))

        assert result.failed_seat.code is SeatErrorCode.SEAT_UNAVAILABLE
        self.booking_command_repo.create.assert_not_called()

    @pytest.mark.asyncio
    async def test_no_confirmation_when_another_call_settled_first(self):
        self.payment_command_repo.settle.return_value = False

        result = await self.use_case.execute(_request([1]))

        assert result.success is True
        self.notification_sender.send.assert_not_called()

    @pytest.mark.asyncio
    async def test_confirmation_failure_does_not_fail_the_booking(self):
        self.notification_sender.send.side_effect = RuntimeError('smtp down')

        result = await self.use_case.execute(_request([1]))

        assert result.success is True

    @pytest.mark.asyncio
    async def test_seat_paid_by_payer_without_booking_is_resumed(self):
        # Given: an earlier attempt stamped the seat but its booking insert was lost
        self.seat_ledger.find_by_id.side_effect = None
        self.seat_ledger.find_by_id.return_value = SeatEntity(
            id=1,
            trip_id=TRIP.id,
            position=1,
            is_booking=True,
            is_booked=True,
            is_paid=True,
            booked_by=USER.id,
            paid_by=USER.id,
            booking_code='KEEP0001',
        )

        # When
        result = await self.use_case.execute(_request([1]))

        # Then: the stored code is reused and the seat is not written again
        assert result.success is True
        assert result.bookings[0].booking_code == 'KEEP0001'
        self.seat_ledger.apply.assert_not_called()
        self.booking_command_repo.code_exists.assert_not_called()

    @pytest.mark.asyncio
    async def test_seat_paid_directly_by_payer_is_not_resumed(self):
        # Given: paid through the direct path, so no booking code was ever stamped
        self.seat_ledger.find_by_id.side_effect = None
        self.seat_ledger.find_by_id.return_value = SeatEntity(
            id=1,
            trip_id=TRIP.id,
            position=1,
            is_booked=True,
            is_paid=True,
            booked_by=USER.id,
            paid_by=USER.id,
        )

        result = await self.use_case.execute(_request([1]))

        assert result.failed_seat.code is SeatErrorCode.SEAT_UNAVAILABLE
        self.booking_command_repo.create.assert_not_called()
