"""
Wire Modules Configuration

Modules whose `depends` classmethods carry Provide markers.
Shared between the server entrypoint and the API tests.
"""

from types import ModuleType

from src.service.booking.app.command import (
    finalize_booking_use_case,
    initialize_payment_use_case,
    verify_payment_use_case,
)
from src.service.booking.app.query import list_user_bookings_use_case
from src.service.reservation.app.command import (
    adjust_seat_count_use_case,
    confirm_hold_use_case,
    create_trip_with_seats_use_case,
    delete_trip_use_case,
    hold_seats_use_case,
    mark_paid_directly_use_case,
)
from src.service.reservation.app.query import (
    check_seats_status_use_case,
    list_available_seats_use_case,
)


WIRE_MODULES: list[ModuleType] = [
    create_trip_with_seats_use_case,
    delete_trip_use_case,
    adjust_seat_count_use_case,
    hold_seats_use_case,
    confirm_hold_use_case,
    mark_paid_directly_use_case,
    list_available_seats_use_case,
    check_seats_status_use_case,
    initialize_payment_use_case,
    verify_payment_use_case,
    finalize_booking_use_case,
    list_user_bookings_use_case,
]
