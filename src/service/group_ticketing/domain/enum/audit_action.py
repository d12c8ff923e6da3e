from enum import StrEnum


class AuditEntityType(StrEnum):
    FLIGHT_GROUP = 'FLIGHT_GROUP'
    SEAT_HOLD = 'SEAT_HOLD'


class AuditAction(StrEnum):
    GROUP_STATUS_CHANGED = 'GROUP_STATUS_CHANGED'
    HOLD_CREATED = 'HOLD_CREATED'
    HOLD_CONFIRMED = 'HOLD_CONFIRMED'
    HOLD_RELEASED = 'HOLD_RELEASED'
    HOLD_EXPIRED = 'HOLD_EXPIRED'
