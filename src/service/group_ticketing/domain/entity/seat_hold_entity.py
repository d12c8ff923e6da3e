from datetime import datetime, timedelta
from typing import Optional
from uuid import UUID

import attrs
import uuid_utils.compat as uuid

from src.platform.exception.exceptions import DomainError
from src.service.group_ticketing.domain.enum.hold_status import HoldStatus


@attrs.define
class SeatHold:
    """Handle for seats counted in a bucket's seats_on_hold until confirmed, released or expired."""

    id: UUID
    seat_bucket_id: UUID
    flight_group_id: UUID
    quantity: int
    held_by: UUID
    expires_at: datetime
    status: HoldStatus = HoldStatus.HELD
    created_at: Optional[datetime] = None
    resolved_at: Optional[datetime] = None

    @classmethod
    def create(
        cls,
        *,
        seat_bucket_id: UUID,
        flight_group_id: UUID,
        quantity: int,
        held_by: UUID,
        now: datetime,
        ttl: timedelta,
    ) -> 'SeatHold':
        if quantity <= 0:
            raise DomainError('quantity must be greater than 0')
        return cls(
            id=uuid.uuid7(),
            seat_bucket_id=seat_bucket_id,
            flight_group_id=flight_group_id,
            quantity=quantity,
            held_by=held_by,
            expires_at=now + ttl,
            created_at=now,
        )

    @property
    def is_held(self) -> bool:
        return self.status == HoldStatus.HELD

    def is_expired(self, now: datetime) -> bool:
        return self.is_held and self.expires_at <= now

    def confirm(self, now: datetime) -> None:
        self._resolve(HoldStatus.CONFIRMED, now)

    def release(self, now: datetime) -> None:
        self._resolve(HoldStatus.RELEASED, now)

    def expire(self, now: datetime) -> None:
        self._resolve(HoldStatus.EXPIRED, now)

    def _resolve(self, status: HoldStatus, now: datetime) -> None:
        if not self.is_held:
            raise DomainError(f'Hold {self.id} is already {self.status}')
        self.status = status
        self.resolved_at = now
