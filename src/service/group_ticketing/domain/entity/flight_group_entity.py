from datetime import datetime
from typing import Mapping, Optional, Sequence
from uuid import UUID

import attrs
import uuid_utils.compat as uuid

from src.platform.exception.exceptions import (
    DomainError,
    GroupNotOnSaleError,
    InvalidTransitionError,
)
from src.service.group_ticketing.domain.clock import as_utc
from src.service.group_ticketing.domain.entity.seat_bucket_entity import SeatBucket
from src.service.group_ticketing.domain.enum.flight_group_status import FlightGroupStatus
from src.service.group_ticketing.domain.enum.pnr_mode import PnrMode
from src.service.group_ticketing.domain.enum.user_role import UserRole
from src.service.group_ticketing.domain.permission import ensure_same_agency
from src.service.group_ticketing.domain.value_object.caller_identity import CallerIdentity


ALLOWED_TRANSITIONS: Mapping[FlightGroupStatus, frozenset[FlightGroupStatus]] = {
    FlightGroupStatus.DRAFT: frozenset({FlightGroupStatus.PUBLISHED, FlightGroupStatus.CANCELLED}),
    FlightGroupStatus.PUBLISHED: frozenset({FlightGroupStatus.CLOSED, FlightGroupStatus.CANCELLED}),
    FlightGroupStatus.CLOSED: frozenset(),
    FlightGroupStatus.CANCELLED: frozenset(),
}


def _airport_code(value: str, *, field: str) -> str:
    code = (value or '').strip().upper()
    if len(code) != 3 or not code.isalpha():
        raise DomainError(f'{field} must be a 3-letter airport code')
    return code


@attrs.define
class FlightGroup:
    id: UUID
    agency_id: UUID
    carrier_code: str
    flight_number: str
    origin: str
    destination: str
    departure_time_utc: datetime
    arrival_time_utc: datetime
    departure_time_local: datetime
    arrival_time_local: datetime
    sales_start: datetime
    sales_end: datetime
    created_by: UUID
    pnr_mode: PnrMode = PnrMode.PER_BOOKING_PNR
    status: FlightGroupStatus = FlightGroupStatus.DRAFT
    baggage_rule: Optional[str] = None
    fare_notes: Optional[str] = None
    terms: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def create(
        cls,
        *,
        agency_id: UUID,
        created_by: UUID,
        carrier_code: str,
        flight_number: str,
        origin: str,
        destination: str,
        departure_time_utc: datetime,
        arrival_time_utc: datetime,
        departure_time_local: datetime,
        arrival_time_local: datetime,
        sales_start: datetime,
        sales_end: datetime,
        pnr_mode: PnrMode = PnrMode.PER_BOOKING_PNR,
        baggage_rule: Optional[str] = None,
        fare_notes: Optional[str] = None,
        terms: Optional[str] = None,
    ) -> 'FlightGroup':
        carrier = (carrier_code or '').strip().upper()
        if len(carrier) != 2 or not carrier.isalnum():
            raise DomainError('carrier_code must be a 2-character airline code')
        number = (flight_number or '').strip().upper()
        if not number or len(number) > 6 or not number.isalnum():
            raise DomainError('flight_number must be 1 to 6 alphanumeric characters')

        origin_code = _airport_code(origin, field='origin')
        destination_code = _airport_code(destination, field='destination')
        if origin_code == destination_code:
            raise DomainError('origin and destination must differ')

        departure, arrival = as_utc(departure_time_utc), as_utc(arrival_time_utc)
        start, end = as_utc(sales_start), as_utc(sales_end)
        if departure >= arrival:
            raise DomainError('departure_time_utc must be before arrival_time_utc')
        if start > end:
            raise DomainError('sales_start must not be after sales_end')
        if end > departure:
            raise DomainError('sales_end must not be after departure_time_utc')

        return cls(
            id=uuid.uuid7(),
            agency_id=agency_id,
            created_by=created_by,
            carrier_code=carrier,
            flight_number=number,
            origin=origin_code,
            destination=destination_code,
            departure_time_utc=departure,
            arrival_time_utc=arrival,
            departure_time_local=departure_time_local,
            arrival_time_local=arrival_time_local,
            sales_start=start,
            sales_end=end,
            pnr_mode=PnrMode(pnr_mode),
            baggage_rule=baggage_rule,
            fare_notes=fare_notes,
            terms=terms,
        )

    # ========== Lifecycle ==========

    @property
    def is_terminal(self) -> bool:
        return not ALLOWED_TRANSITIONS[self.status]

    def can_transition_to(self, target: FlightGroupStatus) -> bool:
        return target in ALLOWED_TRANSITIONS[self.status]

    def transition_to(
        self, target: FlightGroupStatus, *, buckets: Sequence[SeatBucket]
    ) -> FlightGroupStatus:
        """Apply a lifecycle transition; returns the previous status."""
        target = FlightGroupStatus(target)
        if not self.can_transition_to(target):
            raise InvalidTransitionError(f'Cannot change flight group from {self.status} to {target}')

        if target == FlightGroupStatus.PUBLISHED:
            self._ensure_publishable(buckets)

        previous = self.status
        self.status = target
        return previous

    def _ensure_publishable(self, buckets: Sequence[SeatBucket]) -> None:
        if not buckets:
            raise InvalidTransitionError('Cannot publish a flight group without seat buckets')
        empty = sorted(b.pax_type for b in buckets if b.total_seats <= 0)
        if empty:
            raise InvalidTransitionError(
                f'Cannot publish: seat buckets without seats: {", ".join(empty)}'
            )
        if not self.sales_start < self.sales_end:
            raise InvalidTransitionError('Cannot publish: sales_start must be before sales_end')

    # ========== Sales gates ==========

    def is_on_sale(self, now: datetime) -> bool:
        return (
            self.status == FlightGroupStatus.PUBLISHED
            and as_utc(self.sales_start) <= now <= as_utc(self.sales_end)
        )

    def ensure_on_sale(self, now: datetime) -> None:
        if self.status != FlightGroupStatus.PUBLISHED:
            raise GroupNotOnSaleError(f'Flight group is {self.status}, not on sale')
        if not self.is_on_sale(now):
            raise GroupNotOnSaleError('Flight group is outside its sales window')

    def ensure_accepts_confirmations(self) -> None:
        # holds taken before closing still resolve to issued seats
        if self.status not in (FlightGroupStatus.PUBLISHED, FlightGroupStatus.CLOSED):
            raise GroupNotOnSaleError(f'Flight group is {self.status}, holds cannot be confirmed')

    def ensure_buckets_configurable(self) -> None:
        if self.status not in (FlightGroupStatus.DRAFT, FlightGroupStatus.PUBLISHED):
            raise InvalidTransitionError(
                f'Seat buckets of a {self.status} flight group cannot be changed'
            )

    def ensure_accessible_by(self, identity: CallerIdentity) -> None:
        ensure_same_agency(identity, self.agency_id)

    def is_visible_to(self, identity: CallerIdentity, now: datetime) -> bool:
        """Sub-agents only see what they can sell right now."""
        if identity.role == UserRole.SUB_AGENT:
            return self.is_on_sale(now)
        return True
