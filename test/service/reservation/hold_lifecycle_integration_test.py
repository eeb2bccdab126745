"""
Integration tests for the hold lifecycle

Hold -> reminders -> release, driven by explicit `now` values so the 10/20/30
minute stages are checked without waiting.
"""

from datetime import timedelta

import pytest

from src.platform.config.di import container
from src.platform.exception.exceptions import ConflictError, NotFoundError
from src.service.booking.app.command.finalize_booking_use_case import FinalizeBookingUseCase
from src.service.booking.app.dto.finalize_booking_dto import FinalizeBookingRequest
from src.service.reservation.app.command.confirm_hold_use_case import ConfirmHoldUseCase
from src.service.reservation.app.command.hold_seats_use_case import HoldSeatsUseCase
from src.service.reservation.app.command.mark_paid_directly_use_case import (
    MarkPaidDirectlyUseCase,
)
from src.service.reservation.domain.enum.hold_check_action import HoldCheckAction
from src.service.reservation.domain.enum.seat_state import SeatState
from src.service.reservation.domain.value_object.seat_ref import TripPositionRef


@pytest.fixture
def hold_seats(database) -> HoldSeatsUseCase:
    return HoldSeatsUseCase(
        seat_ledger=container.seat_ledger(),
        hold_expiry_scheduler=container.hold_expiry_scheduler(),
    )


@pytest.fixture
def expiry_check(database):
    return container.hold_expiry_check_use_case()


@pytest.fixture
def sent_messages(database):
    return container.notification_sender().sent


async def _hold(hold_seats, *, user_id, trip_id, position):
    result = await hold_seats.execute(
        user_id=user_id, seat_refs=[TripPositionRef(trip_id=trip_id, position=position)]
    )
    (seat,) = result.held
    return seat


class TestHoldExpiry:
    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_reminders_then_release(
        self, hold_seats, expiry_check, sent_messages, passenger, trip
    ):
        # Given
        seat = await _hold(hold_seats, user_id=passenger.id, trip_id=trip.id, position=1)
        started = seat.hold_started_at
        assert seat.hold_expires_at == started + timedelta(minutes=30)

        # When / Then: T+10 first reminder, repeated check is a no-op
        assert await expiry_check.execute(seat_id=seat.id, now=started + timedelta(minutes=10)) is (
            HoldCheckAction.REMINDED
        )
        assert await expiry_check.execute(seat_id=seat.id, now=started + timedelta(minutes=11)) is (
            HoldCheckAction.NOOP
        )

        # T+20 second reminder
        assert await expiry_check.execute(seat_id=seat.id, now=started + timedelta(minutes=20)) is (
            HoldCheckAction.REMINDED
        )

        # T+30 release
        assert await expiry_check.execute(seat_id=seat.id, now=started + timedelta(minutes=30)) is (
            HoldCheckAction.RELEASED
        )
        released = await container.seat_ledger().find_by_id(seat.id)
        assert released.state is SeatState.FREE
        assert released.booked_by is None
        assert released.hold_started_at is None

        # And: two reminders and one cancellation went to the holder
        assert [m['to'] for m in sent_messages] == [passenger.email] * 3
        assert 'cancelled' in sent_messages[-1]['subject']

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_paid_before_expiry_is_not_released(
        self, hold_seats, expiry_check, sent_messages, passenger, trip
    ):
        # Given: held at T, paid at T+29
        seat = await _hold(hold_seats, user_id=passenger.id, trip_id=trip.id, position=2)
        started = seat.hold_started_at
        pay = MarkPaidDirectlyUseCase(seat_ledger=container.seat_ledger())
        await pay.execute(
            user_id=passenger.id, seat_ref=TripPositionRef(trip_id=trip.id, position=2)
        )

        # When: the T+30 check fires
        action = await expiry_check.execute(
            seat_id=seat.id, hold_started_at=started, now=started + timedelta(minutes=30)
        )

        # Then
        assert action is HoldCheckAction.NOOP
        final = await container.seat_ledger().find_by_id(seat.id)
        assert final.state is SeatState.PAID
        assert len(sent_messages) == 0

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_finalized_before_expiry_is_not_released(
        self, hold_seats, expiry_check, sent_messages, passenger, trip
    ):
        # Given: held at T, payment callback finalized at T+29
        seat = await _hold(hold_seats, user_id=passenger.id, trip_id=trip.id, position=3)
        started = seat.hold_started_at
        finalize = FinalizeBookingUseCase(
            seat_ledger=container.seat_ledger(),
            trip_query_repo=container.trip_query_repo(),
            user_query_repo=container.user_query_repo(),
            booking_command_repo=container.booking_command_repo(),
            payment_command_repo=container.payment_command_repo(),
            notification_sender=container.notification_sender(),
        )
        result = await finalize.execute(
            FinalizeBookingRequest(
                payment_reference='PSK-before-expiry',
                email=passenger.email,
                trip_id=trip.id,
                seat_ids=[seat.id],
                total_amount_minor=3000,
            )
        )
        assert result.success is True

        # When: the T+30 check fires
        action = await expiry_check.execute(
            seat_id=seat.id, hold_started_at=started, now=started + timedelta(minutes=30)
        )

        # Then: the seat stays paid and the only message is the confirmation
        assert action is HoldCheckAction.NOOP
        final = await container.seat_ledger().find_by_id(seat.id)
        assert final.state is SeatState.PAID
        assert final.paid_by == passenger.id
        assert final.booking_code == result.bookings[0].booking_code
        assert len(sent_messages) == 1
        assert 'booking confirmed' in sent_messages[0]['subject']

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_stale_watchdog_does_not_release_a_newer_hold(
        self, hold_seats, expiry_check, passenger, another_passenger, trip
    ):
        # Given: the first hold expires and another passenger holds the seat again
        first = await _hold(hold_seats, user_id=passenger.id, trip_id=trip.id, position=3)
        await expiry_check.execute(
            seat_id=first.id, now=first.hold_started_at + timedelta(minutes=30)
        )
        await _hold(hold_seats, user_id=another_passenger.id, trip_id=trip.id, position=3)

        # When: the first hold's watchdog fires late
        action = await expiry_check.execute(
            seat_id=first.id,
            hold_started_at=first.hold_started_at,
            now=first.hold_started_at + timedelta(hours=1),
        )

        # Then
        assert action is HoldCheckAction.NOOP
        seat = await container.seat_ledger().find_by_id(first.id)
        assert seat.is_held_by(another_passenger.id)

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_sweeper_catches_up_after_downtime(
        self, hold_seats, sent_messages, passenger, trip
    ):
        # Given: two holds, the process "sleeps" for 25 minutes
        seat_a = await _hold(hold_seats, user_id=passenger.id, trip_id=trip.id, position=4)
        await _hold(hold_seats, user_id=passenger.id, trip_id=trip.id, position=5)
        scheduler = container.hold_expiry_scheduler()

        # When
        counts = await scheduler.sweep_once(seat_a.hold_started_at + timedelta(minutes=25))

        # Then: one (latest) reminder per hold, nothing released
        assert counts == {HoldCheckAction.REMINDED: 2}
        seat = await container.seat_ledger().find_by_id(seat_a.id)
        assert seat.reminders_sent == 2
        assert len(sent_messages) == 2

        # And: a sweep past expiry releases both
        counts = await scheduler.sweep_once(seat_a.hold_started_at + timedelta(minutes=31))
        assert counts == {HoldCheckAction.RELEASED: 2}
        assert await container.seat_ledger().list_holding() == []


class TestConfirmAndDirectPay:
    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_confirm_own_hold(self, hold_seats, passenger, trip):
        await _hold(hold_seats, user_id=passenger.id, trip_id=trip.id, position=6)
        confirm = ConfirmHoldUseCase(seat_ledger=container.seat_ledger())

        seat = await confirm.execute(
            user_id=passenger.id, seat_ref=TripPositionRef(trip_id=trip.id, position=6)
        )

        assert seat.state is SeatState.BOOKED
        assert seat.hold_expires_at is None

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_confirm_someone_elses_hold_conflicts(
        self, hold_seats, passenger, another_passenger, trip
    ):
        await _hold(hold_seats, user_id=passenger.id, trip_id=trip.id, position=7)
        confirm = ConfirmHoldUseCase(seat_ledger=container.seat_ledger())

        with pytest.raises(ConflictError):
            await confirm.execute(
                user_id=another_passenger.id, seat_ref=TripPositionRef(trip_id=trip.id, position=7)
            )

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_confirm_unknown_seat(self, database, trip):
        confirm = ConfirmHoldUseCase(seat_ledger=container.seat_ledger())

        with pytest.raises(NotFoundError):
            await confirm.execute(user_id=1, seat_ref=TripPositionRef(trip_id=trip.id, position=50))

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_paid_seat_cannot_be_paid_again(self, passenger, another_passenger, trip):
        pay = MarkPaidDirectlyUseCase(seat_ledger=container.seat_ledger())
        ref = TripPositionRef(trip_id=trip.id, position=8)
        await pay.execute(user_id=passenger.id, seat_ref=ref)

        with pytest.raises(ConflictError):
            await pay.execute(user_id=another_passenger.id, seat_ref=ref)
        with pytest.raises(ConflictError):
            await pay.execute(user_id=passenger.id, seat_ref=ref)
