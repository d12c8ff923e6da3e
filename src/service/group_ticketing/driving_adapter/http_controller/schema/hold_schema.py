from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from src.service.group_ticketing.domain.entity.seat_hold_entity import SeatHold
from src.service.group_ticketing.domain.enum.hold_status import HoldStatus


class HoldRequest(BaseModel):
    model_config = ConfigDict(json_schema_extra={'example': {'quantity': 10}})

    quantity: int = Field(..., gt=0)


class HoldResponse(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            'example': {
                'holdId': '01234567-89ab-7def-0123-456789abcdef',
                'flightGroupId': '01234567-89ab-7def-0123-456789abcde0',
                'seatBucketId': '01234567-89ab-7def-0123-456789abcde1',
                'quantity': 10,
                'status': 'HELD',
                'expiresAt': '2026-10-19T08:00:00Z',
                'resolvedAt': None,
            }
        },
    )

    hold_id: UUID
    flight_group_id: UUID
    seat_bucket_id: UUID
    quantity: int
    status: HoldStatus
    expires_at: datetime
    resolved_at: Optional[datetime] = None

    @classmethod
    def from_entity(cls, hold: SeatHold) -> 'HoldResponse':
        return cls(
            hold_id=hold.id,
            flight_group_id=hold.flight_group_id,
            seat_bucket_id=hold.seat_bucket_id,
            quantity=hold.quantity,
            status=hold.status,
            expires_at=hold.expires_at,
            resolved_at=hold.resolved_at,
        )


class ExpireHoldsResponse(BaseModel):
    expired: int
