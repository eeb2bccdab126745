from enum import StrEnum


class SeatState(StrEnum):
    FREE = 'free'
    HOLDING = 'holding'
    BOOKED = 'booked'
    PAID = 'paid'
