"""
Hold Expiry Scheduler

Two ways a hold check fires, both funnelled through HoldExpiryCheckUseCase:
- watchdog: one asyncio task per fresh hold, sleeping until each stage is due
  (prompt firing while this process stays up)
- sweeper: a background loop over every persisted hold, so holds created by
  another worker or before a restart are still reminded and released

Both may hit the same stage; the check's conditional writes keep it single.
"""

import asyncio
from collections import Counter
from datetime import datetime
from typing import Optional

import anyio

from src.platform.logging.loguru_io import Logger
from src.platform.types.utc_datetime import utc_now
from src.service.reservation.app.command.hold_expiry_check_use_case import HoldExpiryCheckUseCase
from src.service.reservation.app.interface.i_hold_expiry_scheduler import IHoldExpiryScheduler
from src.service.reservation.app.interface.i_seat_ledger import ISeatLedger
from src.service.reservation.domain.enum.hold_check_action import HoldCheckAction


class HoldExpirySchedulerImpl(IHoldExpiryScheduler):
    def __init__(
        self,
        *,
        seat_ledger: ISeatLedger,
        check_use_case: HoldExpiryCheckUseCase,
        sweep_interval_seconds: float = 30,
    ) -> None:
        self.seat_ledger = seat_ledger
        self.check_use_case = check_use_case
        self.sweep_interval_seconds = sweep_interval_seconds
        self._watchdogs: dict[int, asyncio.Task[None]] = {}

    @property
    def pending_watchdogs(self) -> int:
        return sum(1 for task in self._watchdogs.values() if not task.done())

    def schedule_hold(self, *, seat_id: int, hold_started_at: datetime) -> None:
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            Logger.base.warning(f'[EXPIRY] No running loop, seat {seat_id} left to the sweeper')
            return

        previous = self._watchdogs.pop(seat_id, None)
        if previous is not None and not previous.done():
            previous.cancel()

        task = asyncio.create_task(
            self._watch(seat_id=seat_id, hold_started_at=hold_started_at),
            name=f'hold-watchdog-{seat_id}',
        )
        self._watchdogs[seat_id] = task
        task.add_done_callback(lambda t, sid=seat_id: self._forget(sid, t))

    def _forget(self, seat_id: int, task: 'asyncio.Task[None]') -> None:
        if self._watchdogs.get(seat_id) is task:
            del self._watchdogs[seat_id]

    async def _watch(self, *, seat_id: int, hold_started_at: datetime) -> None:
        for offset in self.check_use_case.stage_offsets:
            delay = (hold_started_at + offset - utc_now()).total_seconds()
            if delay > 0:
                await anyio.sleep(delay)
            try:
                action = await self.check_use_case.execute(
                    seat_id=seat_id, hold_started_at=hold_started_at
                )
            except Exception as e:
                Logger.base.warning(f'[EXPIRY] Watchdog for seat {seat_id} failed, sweeper will retry: {e}')
                return
            if action is HoldCheckAction.RELEASED:
                return

    @Logger.io
    async def sweep_once(self, now: Optional[datetime] = None) -> dict[HoldCheckAction, int]:
        now = now or utc_now()
        counts: Counter[HoldCheckAction] = Counter()
        for seat in await self.seat_ledger.list_holding():
            try:
                action = await self.check_use_case.execute(
                    seat_id=seat.id, hold_started_at=seat.hold_started_at, now=now
                )
            except Exception as e:
                Logger.base.warning(f'[EXPIRY] Sweep check for seat {seat.id} failed: {e}')
                continue
            counts[action] += 1

        if counts[HoldCheckAction.REMINDED] or counts[HoldCheckAction.RELEASED]:
            Logger.base.info(
                f'[EXPIRY] Sweep: {counts[HoldCheckAction.REMINDED]} reminded, '
                f'{counts[HoldCheckAction.RELEASED]} released'
            )
        return dict(counts)

    async def run_sweeper(self) -> None:
        Logger.base.info(f'[EXPIRY] Sweeper started, interval {self.sweep_interval_seconds}s')
        while True:
            try:
                await self.sweep_once()
            except Exception as e:
                Logger.base.exception(f'[EXPIRY] Sweep failed: {e}')
            await anyio.sleep(self.sweep_interval_seconds)

    async def shutdown(self) -> None:
        tasks = [task for task in self._watchdogs.values() if not task.done()]
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        self._watchdogs.clear()
