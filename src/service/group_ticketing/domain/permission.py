"""
Role-based access control

Each operation names one Capability; a role is granted a fixed set of
capabilities. Agency scoping (own agency / descendants / tenancy) is checked
separately by the use cases once the target row is loaded.
"""

from enum import StrEnum
from typing import Mapping
from uuid import UUID

from src.platform.exception.exceptions import ForbiddenError
from src.service.group_ticketing.domain.enum.user_role import UserRole
from src.service.group_ticketing.domain.value_object.caller_identity import CallerIdentity


class Capability(StrEnum):
    CREATE_AGENCY = 'CREATE_AGENCY'
    UPDATE_AGENCY = 'UPDATE_AGENCY'
    DELETE_AGENCY = 'DELETE_AGENCY'
    VIEW_AGENCY = 'VIEW_AGENCY'
    MANAGE_USERS = 'MANAGE_USERS'
    CREATE_FLIGHT_GROUP = 'CREATE_FLIGHT_GROUP'
    CONFIGURE_SEAT_BUCKETS = 'CONFIGURE_SEAT_BUCKETS'
    CHANGE_GROUP_STATUS = 'CHANGE_GROUP_STATUS'
    VIEW_FLIGHT_GROUP = 'VIEW_FLIGHT_GROUP'
    QUOTE_FARE = 'QUOTE_FARE'
    HOLD_SEATS = 'HOLD_SEATS'
    CONFIRM_HOLD = 'CONFIRM_HOLD'
    RELEASE_HOLD = 'RELEASE_HOLD'
    EXPIRE_HOLDS = 'EXPIRE_HOLDS'


_SELLING = frozenset(
    {
        Capability.VIEW_AGENCY,
        Capability.VIEW_FLIGHT_GROUP,
        Capability.QUOTE_FARE,
        Capability.HOLD_SEATS,
        Capability.RELEASE_HOLD,
    }
)

_MANAGING = _SELLING | {
    Capability.MANAGE_USERS,
    Capability.CREATE_FLIGHT_GROUP,
    Capability.CONFIGURE_SEAT_BUCKETS,
    Capability.CHANGE_GROUP_STATUS,
    Capability.CONFIRM_HOLD,
}

ROLE_CAPABILITIES: Mapping[UserRole, frozenset[Capability]] = {
    UserRole.SUB_AGENT: _SELLING,
    UserRole.MANAGER: frozenset(_MANAGING),
    UserRole.ADMIN: frozenset(Capability),
}


def has_capability(role: UserRole, capability: Capability) -> bool:
    return capability in ROLE_CAPABILITIES.get(role, frozenset())


def ensure_capability(identity: CallerIdentity, capability: Capability) -> None:
    if not has_capability(identity.role, capability):
        raise ForbiddenError(f'Role {identity.role} is not allowed to {capability.lower()}')


def ensure_same_agency(identity: CallerIdentity, agency_id: UUID) -> None:
    """Tenancy: non-admin callers only touch rows owned by their own agency."""
    if not identity.is_admin and identity.agency_id != agency_id:
        raise ForbiddenError('Resource belongs to another agency')
