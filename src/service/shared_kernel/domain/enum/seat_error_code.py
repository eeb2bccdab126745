from enum import StrEnum


class SeatErrorCode(StrEnum):
    SEAT_NOT_FOUND = 'SEAT_NOT_FOUND'
    SEAT_ALREADY_HELD = 'SEAT_ALREADY_HELD'
    SEAT_ALREADY_BOOKED = 'SEAT_ALREADY_BOOKED'
    INVALID_SEAT_STATE = 'INVALID_SEAT_STATE'
    SEAT_UNAVAILABLE = 'SEAT_UNAVAILABLE'
