from enum import StrEnum


class PnrMode(StrEnum):
    GROUP_PNR = 'GROUP_PNR'
    PER_BOOKING_PNR = 'PER_BOOKING_PNR'
