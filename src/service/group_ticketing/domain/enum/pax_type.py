from enum import StrEnum


class PaxType(StrEnum):
    """Passenger category; each one has its own seat bucket and fare."""

    ADT = 'ADT'  # adult
    CHD = 'CHD'  # child
    INF = 'INF'  # infant
