"""
Fare Quote Use Case

Prices a passenger mix against the current buckets of a flight group. A quote
does not reserve anything; it only checks the counts against what is
available at the time of the quote.
"""

from datetime import datetime
from typing import Callable, List, Mapping, Self
from uuid import UUID

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import CapacityExceededError, DomainError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.group_ticketing.domain.clock import utc_now
from src.service.group_ticketing.domain.enum.pax_type import PaxType
from src.service.group_ticketing.domain.permission import Capability, ensure_capability
from src.service.group_ticketing.domain.value_object.caller_identity import CallerIdentity
from src.service.group_ticketing.domain.value_object.fare_quote import FareQuote, FareQuoteLine


class QuoteFareUseCase:
    def __init__(
        self, *, uow: AbstractUnitOfWork, clock: Callable[[], datetime] = utc_now
    ) -> None:
        self.uow = uow
        self.clock = clock

    @classmethod
    @inject
    def depends(
        cls, uow: AbstractUnitOfWork = Depends(Provide[Container.unit_of_work])
    ) -> Self:
        return cls(uow=uow)

    @Logger.io
    async def quote(
        self,
        *,
        identity: CallerIdentity,
        flight_group_id: UUID,
        passengers: Mapping[PaxType, int],
    ) -> FareQuote:
        ensure_capability(identity, Capability.QUOTE_FARE)
        requested = {PaxType(pax): count for pax, count in passengers.items()}
        if any(count < 0 for count in requested.values()):
            raise DomainError('Passenger counts must not be negative')
        if sum(requested.values()) <= 0:
            raise DomainError('At least one passenger is required')

        async with self.uow:
            flight_group = await self.uow.flight_group_repo.get_by_id(
                flight_group_id=flight_group_id
            )
            if not flight_group:
                raise NotFoundError('Flight group not found')
            flight_group.ensure_accessible_by(identity)
            if not flight_group.is_visible_to(identity, self.clock()):
                raise NotFoundError('Flight group not found')

            buckets = {
                bucket.pax_type: bucket
                for bucket in await self.uow.seat_bucket_repo.list_by_group(
                    flight_group_id=flight_group_id
                )
            }

        lines: List[FareQuoteLine] = []
        for pax_type in PaxType:
            quantity = requested.get(pax_type, 0)
            if quantity == 0:
                continue
            bucket = buckets.get(pax_type)
            if not bucket:
                raise NotFoundError(f'Flight group has no {pax_type} seat bucket')
            if quantity > bucket.available_seats:
                raise CapacityExceededError(
                    f'Only {bucket.available_seats} {pax_type} seats left, requested {quantity}'
                )
            lines.append(
                FareQuoteLine(
                    pax_type=pax_type,
                    quantity=quantity,
                    unit_base_fare=bucket.base_fare,
                    unit_tax_amount=bucket.tax_amount,
                    unit_fee_amount=bucket.fee_amount,
                    seats_available=bucket.available_seats,
                )
            )

        currencies = {buckets[line.pax_type].currency for line in lines}
        if len(currencies) > 1:
            raise DomainError('Cannot quote seat buckets priced in different currencies')

        quote = FareQuote(currency=currencies.pop(), lines=lines)
        Logger.base.info(
            f'💰 [QUOTE] {flight_group_id}: {quote.passenger_count} pax, '
            f'{quote.grand_total} {quote.currency}'
        )
        return quote
