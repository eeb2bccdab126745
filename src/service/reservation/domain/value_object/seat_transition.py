"""
Seat state machine, expressed as data.

Each transition carries the column values the seat must still have at write
time (`expected`, any one of the alternatives) and the columns it sets
(`changes`). The ledger turns that into a single conditional UPDATE, so the
guard and the write can never be separated by another request.

    FREE ──hold──> HOLDING ──confirm──> BOOKED
      ^               │
      └─release_expired┘
    FREE | own HOLDING ──finalize_payment──> PAID   (terminal)
"""

from datetime import datetime, timedelta
from typing import Any, Mapping

import attrs


FREE_FLAGS: Mapping[str, Any] = {'is_booking': False, 'is_booked': False, 'is_paid': False}

_CLEARED_HOLD: Mapping[str, Any] = {
    'hold_started_at': None,
    'hold_expires_at': None,
}


@attrs.define(frozen=True)
class SeatTransition:
    name: str
    expected: tuple[Mapping[str, Any], ...]
    changes: Mapping[str, Any]


def _held_by(user_id: int) -> dict[str, Any]:
    return {'is_booking': True, 'is_booked': False, 'is_paid': False, 'booked_by': user_id}


def hold(*, user_id: int, now: datetime, window: timedelta) -> SeatTransition:
    return SeatTransition(
        name='hold',
        expected=(FREE_FLAGS,),
        changes={
            'is_booking': True,
            'booked_by': user_id,
            'hold_started_at': now,
            'hold_expires_at': now + window,
            'reminders_sent': 0,
        },
    )


def confirm(*, user_id: int) -> SeatTransition:
    return SeatTransition(
        name='confirm',
        expected=(_held_by(user_id),),
        changes={'is_booked': True, 'is_booking': False, **_CLEARED_HOLD},
    )


def release_expired(*, hold_started_at: datetime) -> SeatTransition:
    # Pinning hold_started_at keeps a stale watchdog from releasing a newer hold
    return SeatTransition(
        name='release_expired',
        expected=(
            {
                'is_booking': True,
                'is_booked': False,
                'is_paid': False,
                'hold_started_at': hold_started_at,
            },
        ),
        changes={'is_booking': False, 'booked_by': None, 'reminders_sent': 0, **_CLEARED_HOLD},
    )


def record_reminder(*, hold_started_at: datetime, sent_before: int, stage: int) -> SeatTransition:
    return SeatTransition(
        name=f'record_reminder_{stage}',
        expected=(
            {
                'is_booking': True,
                'is_booked': False,
                'is_paid': False,
                'hold_started_at': hold_started_at,
                'reminders_sent': sent_before,
            },
        ),
        changes={'reminders_sent': stage},
    )


def finalize_payment(*, user_id: int, booking_code: str) -> SeatTransition:
    return SeatTransition(
        name='finalize_payment',
        expected=(FREE_FLAGS, _held_by(user_id)),
        changes={
            'is_paid': True,
            'is_booked': True,
            'is_booking': True,
            'booked_by': user_id,
            'paid_by': user_id,
            'booking_code': booking_code,
            **_CLEARED_HOLD,
        },
    )


def mark_paid_directly(*, user_id: int) -> SeatTransition:
    return SeatTransition(
        name='mark_paid_directly',
        expected=(
            FREE_FLAGS,
            _held_by(user_id),
            {'is_booking': False, 'is_booked': True, 'is_paid': False, 'booked_by': user_id},
        ),
        changes={
            'is_paid': True,
            'is_booked': True,
            'is_booking': False,
            'booked_by': user_id,
            'paid_by': user_id,
            **_CLEARED_HOLD,
        },
    )
