"""Message bodies for the customer notifications sent by reservation and booking flows."""

from typing import Sequence

import attrs

from src.platform.config.core_setting import settings


@attrs.define(frozen=True)
class NotificationMessage:
    subject: str
    body: str


@attrs.define(frozen=True)
class BookedSeatLine:
    position: int
    booking_code: str
    amount_minor: int


def format_amount(amount_minor: int) -> str:
    return f'{amount_minor / 100:,.2f}'


def booking_confirmation(
    *, name: str, trip_name: str, lines: Sequence[BookedSeatLine]
) -> NotificationMessage:
    total = sum(line.amount_minor for line in lines)
    seat_lines = '\n'.join(
        f'  Seat {line.position}: code {line.booking_code}, amount {format_amount(line.amount_minor)}'
        for line in lines
    )
    body = (
        f'Dear {name},\n\n'
        f'Your booking for {trip_name} is confirmed.\n\n'
        f'{seat_lines}\n\n'
        f'Total paid: {format_amount(total)}\n\n'
        f'Present your booking code at boarding.\n\n'
        f'{settings.APP_NAME}'
    )
    return NotificationMessage(subject=f'{settings.APP_NAME}: booking confirmed', body=body)


def hold_reminder(
    *, name: str, trip_name: str, position: int, minutes_left: int
) -> NotificationMessage:
    body = (
        f'Dear {name},\n\n'
        f'Seat {position} on {trip_name} is being held for you. '
        f'Complete payment within {minutes_left} minutes or the seat will be released.\n\n'
        f'{settings.APP_NAME}'
    )
    return NotificationMessage(subject=f'{settings.APP_NAME}: complete your booking', body=body)


def hold_cancelled(*, name: str, trip_name: str, position: int) -> NotificationMessage:
    body = (
        f'Dear {name},\n\n'
        f'Your hold on seat {position} for {trip_name} expired before payment '
        f'and the seat has been released.\n\n'
        f'{settings.APP_NAME}'
    )
    return NotificationMessage(subject=f'{settings.APP_NAME}: seat hold cancelled', body=body)
