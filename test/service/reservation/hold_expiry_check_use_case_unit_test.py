"""
Unit tests for HoldExpiryCheckUseCase

Test Coverage:
1. Stage selection from elapsed time (nothing due, reminder 1/2, release)
2. No-ops: seat gone, not holding, superseded hold, lost conditional write
3. Catch-up after downtime sends only the latest reminder
4. Notification failures never undo the transition
"""

from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock

import pytest

from src.service.reservation.app.command.hold_expiry_check_use_case import HoldExpiryCheckUseCase
from src.service.reservation.app.dto.seat_ledger_dto import CompareAndSetOutcome
from src.service.reservation.domain.entity.seat_entity import SeatEntity
from src.service.reservation.domain.enum.hold_check_action import HoldCheckAction
from src.service.shared_kernel.domain.entity.user_entity import UserEntity


pytestmark = pytest.mark.unit

STARTED = datetime(2026, 12, 1, 8, 0, tzinfo=timezone.utc)


def _holding(reminders_sent: int = 0) -> SeatEntity:
    return SeatEntity(
        id=5,
        trip_id=1,
        position=12,
        is_booking=True,
        booked_by=7,
        hold_started_at=STARTED,
        hold_expires_at=STARTED + timedelta(minutes=30),
        reminders_sent=reminders_sent,
    )


class TestHoldExpiryCheckUseCase:
    def setup_method(self):
        self.seat_ledger = AsyncMock()
        self.trip_query_repo = AsyncMock()
        self.user_query_repo = AsyncMock()
        self.notification_sender = AsyncMock()
        self.user_query_repo.get_by_id.return_value = UserEntity(
            id=7, name='Ada Obi', email='ada@example.com'
        )
        self.trip_query_repo.get_by_id.return_value = None
        self.seat_ledger.apply.return_value = CompareAndSetOutcome(applied=True, seat=None)
        self.use_case = HoldExpiryCheckUseCase(
            seat_ledger=self.seat_ledger,
            trip_query_repo=self.trip_query_repo,
            user_query_repo=self.user_query_repo,
            notification_sender=self.notification_sender,
        )

    def test_stage_offsets(self):
        assert self.use_case.stage_offsets == [
            timedelta(minutes=10),
            timedelta(minutes=20),
            timedelta(minutes=30),
        ]

    @pytest.mark.asyncio
    async def test_nothing_due_before_first_reminder(self):
        self.seat_ledger.find_by_id.return_value = _holding()

        action = await self.use_case.execute(seat_id=5, now=STARTED + timedelta(minutes=9))

        assert action is HoldCheckAction.NOOP
        self.seat_ledger.apply.assert_not_called()

    @pytest.mark.asyncio
    async def test_first_reminder_at_ten_minutes(self):
        self.seat_ledger.find_by_id.return_value = _holding()

        action = await self.use_case.execute(seat_id=5, now=STARTED + timedelta(minutes=10))

        assert action is HoldCheckAction.REMINDED
        transition = self.seat_ledger.apply.call_args.kwargs['transition']
        assert transition.changes == {'reminders_sent': 1}
        self.notification_sender.send.assert_awaited_once()
        assert '20 minutes' in self.notification_sender.send.call_args.kwargs['body']

    @pytest.mark.asyncio
    async def test_reminder_already_sent_is_not_repeated(self):
        self.seat_ledger.find_by_id.return_value = _holding(reminders_sent=1)

        action = await self.use_case.execute(seat_id=5, now=STARTED + timedelta(minutes=15))

        assert action is HoldCheckAction.NOOP
        self.notification_sender.send.assert_not_called()

    @pytest.mark.asyncio
    async def test_late_check_sends_only_the_latest_reminder(self):
        # Given: the process was down through the first reminder
        self.seat_ledger.find_by_id.return_value = _holding(reminders_sent=0)

        # When
        action = await self.use_case.execute(seat_id=5, now=STARTED + timedelta(minutes=25))

        # Then: one reminder, recorded as stage 2
        assert action is HoldCheckAction.REMINDED
        transition = self.seat_ledger.apply.call_args.kwargs['transition']
        assert transition.changes == {'reminders_sent': 2}
        assert self.notification_sender.send.await_count == 1

    @pytest.mark.asyncio
    async def test_release_at_thirty_minutes(self):
        self.seat_ledger.find_by_id.return_value = _holding(reminders_sent=2)

        action = await self.use_case.execute(seat_id=5, now=STARTED + timedelta(minutes=30))

        assert action is HoldCheckAction.RELEASED
        transition = self.seat_ledger.apply.call_args.kwargs['transition']
        assert transition.name == 'release_expired'
        assert 'cancelled' in self.notification_sender.send.call_args.kwargs['subject']

    @pytest.mark.asyncio
    async def test_paid_seat_is_left_alone(self):
        seat = _holding()
        seat.is_paid = True
        seat.is_booked = True
        self.seat_ledger.find_by_id.return_value = seat

        action = await self.use_case.execute(seat_id=5, now=STARTED + timedelta(minutes=30))

        assert action is HoldCheckAction.NOOP
        self.seat_ledger.apply.assert_not_called()

    @pytest.mark.asyncio
    async def test_missing_seat_is_a_noop(self):
        self.seat_ledger.find_by_id.return_value = None

        assert await self.use_case.execute(seat_id=5) is HoldCheckAction.NOOP

    @pytest.mark.asyncio
    async def test_superseded_hold_is_a_noop(self):
        self.seat_ledger.find_by_id.return_value = _holding()

        action = await self.use_case.execute(
            seat_id=5,
            hold_started_at=STARTED - timedelta(hours=1),
            now=STARTED + timedelta(minutes=30),
        )

        assert action is HoldCheckAction.NOOP
        self.seat_ledger.apply.assert_not_called()

    @pytest.mark.asyncio
    async def test_lost_conditional_write_sends_nothing(self):
        # Given: payment landed between the read and the release
        self.seat_ledger.find_by_id.return_value = _holding()
        self.seat_ledger.apply.return_value = CompareAndSetOutcome(applied=False, seat=None)

        action = await self.use_case.execute(seat_id=5, now=STARTED + timedelta(minutes=31))

        assert action is HoldCheckAction.NOOP
        self.notification_sender.send.assert_not_called()

    @pytest.mark.asyncio
    async def test_notification_failure_keeps_the_release(self):
        self.seat_ledger.find_by_id.return_value = _holding()
        self.notification_sender.send.side_effect = RuntimeError('smtp down')

        action = await self.use_case.execute(seat_id=5, now=STARTED + timedelta(minutes=30))

        assert action is HoldCheckAction.RELEASED
