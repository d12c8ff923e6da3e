from datetime import datetime
from typing import Any, Dict, Optional
from uuid import UUID

import attrs
import uuid_utils.compat as uuid

from src.service.group_ticketing.domain.entity.flight_group_entity import FlightGroup
from src.service.group_ticketing.domain.entity.seat_hold_entity import SeatHold
from src.service.group_ticketing.domain.enum.audit_action import AuditAction, AuditEntityType
from src.service.group_ticketing.domain.enum.flight_group_status import FlightGroupStatus
from src.service.group_ticketing.domain.enum.hold_status import HoldStatus


_HOLD_ACTIONS = {
    HoldStatus.HELD: AuditAction.HOLD_CREATED,
    HoldStatus.CONFIRMED: AuditAction.HOLD_CONFIRMED,
    HoldStatus.RELEASED: AuditAction.HOLD_RELEASED,
    HoldStatus.EXPIRED: AuditAction.HOLD_EXPIRED,
}


@attrs.define
class AuditLog:
    """
    Append-only record of a lifecycle or inventory change.

    actor_user_id is None when the system made the change (the expiry sweep).
    """

    id: UUID
    agency_id: UUID
    entity_type: AuditEntityType
    entity_id: UUID
    action: AuditAction
    occurred_at: datetime
    actor_user_id: Optional[UUID] = None
    old_values: Optional[Dict[str, Any]] = None
    new_values: Optional[Dict[str, Any]] = None

    @classmethod
    def group_transition(
        cls,
        *,
        flight_group: FlightGroup,
        previous: FlightGroupStatus,
        actor_user_id: UUID,
        now: datetime,
        released_holds: int = 0,
    ) -> 'AuditLog':
        new_values: Dict[str, Any] = {'status': str(flight_group.status)}
        if flight_group.status == FlightGroupStatus.CANCELLED:
            new_values['released_holds'] = released_holds
        return cls(
            id=uuid.uuid7(),
            agency_id=flight_group.agency_id,
            entity_type=AuditEntityType.FLIGHT_GROUP,
            entity_id=flight_group.id,
            action=AuditAction.GROUP_STATUS_CHANGED,
            occurred_at=now,
            actor_user_id=actor_user_id,
            old_values={'status': str(previous)},
            new_values=new_values,
        )

    @classmethod
    def hold_change(
        cls,
        *,
        hold: SeatHold,
        agency_id: UUID,
        actor_user_id: Optional[UUID],
        now: datetime,
        reason: Optional[str] = None,
    ) -> 'AuditLog':
        """Record the hold's current status; anything but HELD was resolved from HELD."""
        new_values: Dict[str, Any] = {
            'status': str(hold.status),
            'quantity': hold.quantity,
            'seat_bucket_id': str(hold.seat_bucket_id),
        }
        if hold.is_held:
            new_values['expires_at'] = hold.expires_at.isoformat()
        if reason:
            new_values['reason'] = reason
        return cls(
            id=uuid.uuid7(),
            agency_id=agency_id,
            entity_type=AuditEntityType.SEAT_HOLD,
            entity_id=hold.id,
            action=_HOLD_ACTIONS[hold.status],
            occurred_at=now,
            actor_user_id=actor_user_id,
            old_values=None if hold.is_held else {'status': str(HoldStatus.HELD)},
            new_values=new_values,
        )
