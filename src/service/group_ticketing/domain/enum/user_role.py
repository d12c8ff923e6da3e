from enum import StrEnum


class UserRole(StrEnum):
    ADMIN = 'ADMIN'
    MANAGER = 'MANAGER'
    SUB_AGENT = 'SUB_AGENT'
