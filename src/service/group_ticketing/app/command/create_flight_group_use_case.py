from datetime import datetime
from typing import List, Optional, Self, Sequence
from uuid import UUID

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.core_setting import settings
from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import DomainError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.group_ticketing.app.dto.flight_group_detail import FlightGroupDetail
from src.service.group_ticketing.app.dto.seat_bucket_spec import SeatBucketSpec
from src.service.group_ticketing.domain.entity.flight_group_entity import FlightGroup
from src.service.group_ticketing.domain.entity.seat_bucket_entity import SeatBucket
from src.service.group_ticketing.domain.enum.pnr_mode import PnrMode
from src.service.group_ticketing.domain.permission import (
    Capability,
    ensure_capability,
    ensure_same_agency,
)
from src.service.group_ticketing.domain.value_object.caller_identity import CallerIdentity


class CreateFlightGroupUseCase:
    def __init__(self, *, uow: AbstractUnitOfWork, enforce_single_currency: bool | None = None) -> None:
        self.uow = uow
        self.enforce_single_currency = (
            settings.ENFORCE_SINGLE_CURRENCY
            if enforce_single_currency is None
            else enforce_single_currency
        )

    @classmethod
    @inject
    def depends(
        cls, uow: AbstractUnitOfWork = Depends(Provide[Container.unit_of_work])
    ) -> Self:
        return cls(uow=uow)

    @Logger.io
    async def execute(
        self,
        *,
        identity: CallerIdentity,
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
        agency_id: Optional[UUID] = None,
        seat_buckets: Sequence[SeatBucketSpec] = (),
    ) -> FlightGroupDetail:
        """
        Create a DRAFT flight group, optionally with its initial seat buckets.

        Only ADMIN may create a group on behalf of another agency; everyone
        else creates groups for their own agency.
        """
        ensure_capability(identity, Capability.CREATE_FLIGHT_GROUP)
        owner_id = agency_id or identity.agency_id
        ensure_same_agency(identity, owner_id)

        flight_group = FlightGroup.create(
            agency_id=owner_id,
            created_by=identity.user_id,
            carrier_code=carrier_code,
            flight_number=flight_number,
            origin=origin,
            destination=destination,
            departure_time_utc=departure_time_utc,
            arrival_time_utc=arrival_time_utc,
            departure_time_local=departure_time_local,
            arrival_time_local=arrival_time_local,
            sales_start=sales_start,
            sales_end=sales_end,
            pnr_mode=pnr_mode,
            baggage_rule=baggage_rule,
            fare_notes=fare_notes,
            terms=terms,
        )
        buckets = self._build_buckets(flight_group_id=flight_group.id, specs=seat_buckets)

        async with self.uow:
            agency = await self.uow.agency_repo.get_by_id(agency_id=owner_id)
            if not agency:
                raise NotFoundError('Agency not found')
            agency.ensure_active()

            flight_group = await self.uow.flight_group_repo.create(flight_group=flight_group)
            for bucket in buckets:
                await self.uow.seat_bucket_repo.create(bucket=bucket)
            await self.uow.commit()

        Logger.base.info(
            f'✈️ [GROUP] Created {flight_group.carrier_code}{flight_group.flight_number} '
            f'{flight_group.origin}-{flight_group.destination} as {flight_group.id} '
            f'with {len(buckets)} seat buckets'
        )
        return FlightGroupDetail(flight_group=flight_group, buckets=buckets)

    def _build_buckets(
        self, *, flight_group_id: UUID, specs: Sequence[SeatBucketSpec]
    ) -> List[SeatBucket]:
        buckets: List[SeatBucket] = []
        seen = set()
        for spec in specs:
            bucket = SeatBucket.create(
                flight_group_id=flight_group_id,
                pax_type=spec.pax_type,
                total_seats=spec.total_seats,
                base_fare=spec.base_fare,
                tax_amount=spec.tax_amount,
                fee_amount=spec.fee_amount,
                currency=spec.currency,
            )
            if bucket.pax_type in seen:
                raise DomainError(f'Duplicate seat bucket for {bucket.pax_type}')
            seen.add(bucket.pax_type)
            buckets.append(bucket)

        if self.enforce_single_currency and len({b.currency for b in buckets}) > 1:
            raise DomainError('All seat buckets of a flight group must share one currency')
        return buckets
