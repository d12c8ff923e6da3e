from enum import StrEnum


class HoldStatus(StrEnum):
    HELD = 'HELD'
    CONFIRMED = 'CONFIRMED'
    RELEASED = 'RELEASED'
    EXPIRED = 'EXPIRED'
