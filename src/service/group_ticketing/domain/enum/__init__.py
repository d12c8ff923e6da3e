"""Group Ticketing Domain Enums"""

from src.service.group_ticketing.domain.enum.agency_status import AgencyStatus
from src.service.group_ticketing.domain.enum.audit_action import AuditAction, AuditEntityType
from src.service.group_ticketing.domain.enum.flight_group_status import FlightGroupStatus
from src.service.group_ticketing.domain.enum.hold_status import HoldStatus
from src.service.group_ticketing.domain.enum.pax_type import PaxType
from src.service.group_ticketing.domain.enum.pnr_mode import PnrMode
from src.service.group_ticketing.domain.enum.user_role import UserRole


__all__ = [
    'AgencyStatus',
    'AuditAction',
    'AuditEntityType',
    'FlightGroupStatus',
    'HoldStatus',
    'PaxType',
    'PnrMode',
    'UserRole',
]
