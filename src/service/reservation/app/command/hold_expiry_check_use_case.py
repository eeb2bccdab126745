"""
Hold Expiry Check Use Case

One deferred check of one hold. The same check serves every stage: it re-reads
the seat, works out which stage is due from the hold's own start time, and
performs at most that stage through a guarded ledger write.

    T+10min  reminder #1   (reminders_sent 0 -> 1)
    T+20min  reminder #2   (reminders_sent 1 -> 2)
    T+30min  release       (HOLDING -> FREE) + cancellation notice

Firing twice, firing late, or firing after payment landed is harmless: the
write is conditional on the seat still being the same unpaid hold.
"""

from datetime import datetime, timedelta
from typing import Callable, Optional, Sequence

from src.platform.logging.loguru_io import Logger
from src.platform.types.utc_datetime import utc_now
from src.service.reservation.app.interface.i_seat_ledger import ISeatLedger
from src.service.reservation.app.interface.i_trip_query_repo import ITripQueryRepo
from src.service.reservation.domain.entity.seat_entity import SeatEntity
from src.service.reservation.domain.enum.hold_check_action import HoldCheckAction
from src.service.reservation.domain.enum.seat_state import SeatState
from src.service.reservation.domain.value_object import seat_transition
from src.service.shared_kernel.app.interface.i_notification_sender import INotificationSender
from src.service.shared_kernel.app.interface.i_user_query_repo import IUserQueryRepo
from src.service.shared_kernel.app.notification import notification_message
from src.service.shared_kernel.app.notification.notification_message import NotificationMessage


class HoldExpiryCheckUseCase:
    def __init__(
        self,
        *,
        seat_ledger: ISeatLedger,
        trip_query_repo: ITripQueryRepo,
        user_query_repo: IUserQueryRepo,
        notification_sender: INotificationSender,
        reminder_minutes: Sequence[int] = (10, 20),
        expiry_minutes: int = 30,
    ) -> None:
        self.seat_ledger = seat_ledger
        self.trip_query_repo = trip_query_repo
        self.user_query_repo = user_query_repo
        self.notification_sender = notification_sender
        self.reminder_offsets = sorted(timedelta(minutes=m) for m in reminder_minutes)
        self.expiry = timedelta(minutes=expiry_minutes)

    @property
    def stage_offsets(self) -> list[timedelta]:
        return [*self.reminder_offsets, self.expiry]

    @Logger.io
    async def execute(
        self,
        *,
        seat_id: int,
        hold_started_at: Optional[datetime] = None,
        now: Optional[datetime] = None,
    ) -> HoldCheckAction:
        now = now or utc_now()
        seat = await self.seat_ledger.find_by_id(seat_id)

        if seat is None or seat.state is not SeatState.HOLDING or seat.hold_started_at is None:
            return HoldCheckAction.NOOP
        if hold_started_at is not None and seat.hold_started_at != hold_started_at:
            # Superseded: this watchdog belongs to an earlier hold on the same seat
            return HoldCheckAction.NOOP

        elapsed = now - seat.hold_started_at
        if elapsed >= self.expiry:
            return await self._release(seat)

        due_stage = sum(1 for offset in self.reminder_offsets if elapsed >= offset)
        if due_stage > seat.reminders_sent:
            return await self._remind(seat, stage=due_stage, remaining=self.expiry - elapsed)

        return HoldCheckAction.NOOP

    async def _release(self, seat: SeatEntity) -> HoldCheckAction:
        outcome = await self.seat_ledger.apply(
            seat_id=seat.id,
            transition=seat_transition.release_expired(hold_started_at=seat.hold_started_at),  # type: ignore[arg-type]
        )
        if not outcome.applied:
            return HoldCheckAction.NOOP

        Logger.base.info(f'[EXPIRY] Released seat {seat.id} held by user {seat.booked_by}')
        await self._notify_holder(
            seat,
            build=lambda name, trip_name: notification_message.hold_cancelled(
                name=name, trip_name=trip_name, position=seat.position or 0
            ),
        )
        return HoldCheckAction.RELEASED

    async def _remind(self, seat: SeatEntity, *, stage: int, remaining: timedelta) -> HoldCheckAction:
        outcome = await self.seat_ledger.apply(
            seat_id=seat.id,
            transition=seat_transition.record_reminder(
                hold_started_at=seat.hold_started_at,  # type: ignore[arg-type]
                sent_before=seat.reminders_sent,
                stage=stage,
            ),
        )
        if not outcome.applied:
            return HoldCheckAction.NOOP

        minutes_left = max(int(remaining.total_seconds() // 60), 1)
        Logger.base.info(
            f'[EXPIRY] Reminder #{stage} for seat {seat.id}, {minutes_left} min left'
        )
        await self._notify_holder(
            seat,
            build=lambda name, trip_name: notification_message.hold_reminder(
                name=name, trip_name=trip_name, position=seat.position or 0, minutes_left=minutes_left
            ),
        )
        return HoldCheckAction.REMINDED

    async def _notify_holder(
        self, seat: SeatEntity, *, build: Callable[[str, str], NotificationMessage]
    ) -> None:
        # Delivery is best effort; the seat transition has already been committed
        try:
            if seat.booked_by is None:
                return
            user = await self.user_query_repo.get_by_id(seat.booked_by)
            if user is None:
                Logger.base.warning(f'[EXPIRY] Holder {seat.booked_by} of seat {seat.id} not found')
                return
            trip = await self.trip_query_repo.get_by_id(seat.trip_id)
            trip_name = trip.trip_name if trip else f'trip {seat.trip_id}'
            message = build(user.name, trip_name)
            await self.notification_sender.send(
                to=user.email, subject=message.subject, body=message.body
            )
        except Exception as e:
            Logger.base.warning(f'[EXPIRY] Notification for seat {seat.id} failed: {e}')
