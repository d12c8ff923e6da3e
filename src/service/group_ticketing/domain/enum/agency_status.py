from enum import StrEnum


class AgencyStatus(StrEnum):
    ACTIVE = 'ACTIVE'
    SUSPENDED = 'SUSPENDED'
