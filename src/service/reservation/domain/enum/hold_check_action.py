from enum import StrEnum


class HoldCheckAction(StrEnum):
    NOOP = 'noop'
    REMINDED = 'reminded'
    RELEASED = 'released'
