from decimal import Decimal
from typing import Self
from uuid import UUID

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.core_setting import settings
from src.platform.config.di import Container
from src.platform.database.transaction_retry import run_with_retry
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import ConflictError, DomainError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.group_ticketing.domain.entity.seat_bucket_entity import SeatBucket
from src.service.group_ticketing.domain.enum.flight_group_status import FlightGroupStatus
from src.service.group_ticketing.domain.enum.pax_type import PaxType
from src.service.group_ticketing.domain.permission import Capability, ensure_capability
from src.service.group_ticketing.domain.value_object.caller_identity import CallerIdentity
from src.service.group_ticketing.domain.value_object.money import normalize_currency


class ConfigureSeatBucketUseCase:
    """
    Create or update the bucket of one pax type.

    DRAFT groups: buckets may be added, resized and repriced.
    PUBLISHED groups: only capacity changes, never below on_hold + issued.
    """

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
        flight_group_id: UUID,
        pax_type: PaxType,
        total_seats: int,
        base_fare: Decimal,
        currency: str,
        tax_amount: Decimal = Decimal('0.00'),
        fee_amount: Decimal = Decimal('0.00'),
    ) -> SeatBucket:
        ensure_capability(identity, Capability.CONFIGURE_SEAT_BUCKETS)
        return await run_with_retry(
            lambda: self._configure(
                identity=identity,
                flight_group_id=flight_group_id,
                pax_type=PaxType(pax_type),
                total_seats=total_seats,
                base_fare=base_fare,
                currency=currency,
                tax_amount=tax_amount,
                fee_amount=fee_amount,
            )
        )

    async def _configure(
        self,
        *,
        identity: CallerIdentity,
        flight_group_id: UUID,
        pax_type: PaxType,
        total_seats: int,
        base_fare: Decimal,
        currency: str,
        tax_amount: Decimal,
        fee_amount: Decimal,
    ) -> SeatBucket:
        async with self.uow:
            flight_group = await self.uow.flight_group_repo.get_for_share(
                flight_group_id=flight_group_id
            )
            if not flight_group:
                raise NotFoundError('Flight group not found')
            flight_group.ensure_accessible_by(identity)
            flight_group.ensure_buckets_configurable()
            is_draft = flight_group.status == FlightGroupStatus.DRAFT

            bucket = await self.uow.seat_bucket_repo.get_by_group_and_pax_for_update(
                flight_group_id=flight_group_id, pax_type=pax_type
            )

            if self.enforce_single_currency:
                siblings = await self.uow.seat_bucket_repo.list_by_group(
                    flight_group_id=flight_group_id
                )
                currencies = {b.currency for b in siblings if b.pax_type != pax_type}
                if currencies and normalize_currency(currency) not in currencies:
                    raise DomainError(
                        f'All seat buckets of a flight group must use {", ".join(sorted(currencies))}'
                    )

            if bucket is None:
                if not is_draft:
                    raise ConflictError('Seat buckets can only be added while the flight group is DRAFT')
                bucket = SeatBucket.create(
                    flight_group_id=flight_group_id,
                    pax_type=pax_type,
                    total_seats=total_seats,
                    base_fare=base_fare,
                    tax_amount=tax_amount,
                    fee_amount=fee_amount,
                    currency=currency,
                )
                await self.uow.seat_bucket_repo.create(bucket=bucket)
            else:
                if not is_draft and not bucket.has_same_fare(
                    base_fare=base_fare,
                    tax_amount=tax_amount,
                    fee_amount=fee_amount,
                    currency=currency,
                ):
                    raise ConflictError('Fares cannot change once the flight group is published')
                bucket.resize(total_seats)
                if is_draft:
                    bucket.reprice(
                        base_fare=base_fare,
                        tax_amount=tax_amount,
                        fee_amount=fee_amount,
                        currency=currency,
                    )
                await self.uow.seat_bucket_repo.update(bucket=bucket)

            await self.uow.commit()

        Logger.base.info(
            f'🪑 [BUCKET] {flight_group_id}/{pax_type}: total={bucket.total_seats} '
            f'unit_price={bucket.unit_price} {bucket.currency}'
        )
        return bucket
