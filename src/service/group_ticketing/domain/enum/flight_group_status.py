from enum import StrEnum


class FlightGroupStatus(StrEnum):
    DRAFT = 'DRAFT'
    PUBLISHED = 'PUBLISHED'
    CLOSED = 'CLOSED'  # terminal
    CANCELLED = 'CANCELLED'  # terminal
