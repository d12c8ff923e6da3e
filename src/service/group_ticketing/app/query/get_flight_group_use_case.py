from datetime import datetime
from typing import Callable, Self
from uuid import UUID

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.group_ticketing.app.dto.flight_group_detail import FlightGroupDetail
from src.service.group_ticketing.domain.clock import utc_now
from src.service.group_ticketing.domain.permission import Capability, ensure_capability
from src.service.group_ticketing.domain.value_object.caller_identity import CallerIdentity


class GetFlightGroupUseCase:
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
    async def get_by_id(
        self, *, identity: CallerIdentity, flight_group_id: UUID
    ) -> FlightGroupDetail:
        ensure_capability(identity, Capability.VIEW_FLIGHT_GROUP)
        async with self.uow:
            flight_group = await self.uow.flight_group_repo.get_by_id(
                flight_group_id=flight_group_id
            )
            if not flight_group:
                raise NotFoundError('Flight group not found')
            flight_group.ensure_accessible_by(identity)
            # groups a sub-agent cannot sell do not exist for them
            if not flight_group.is_visible_to(identity, self.clock()):
                raise NotFoundError('Flight group not found')

            buckets = await self.uow.seat_bucket_repo.list_by_group(
                flight_group_id=flight_group_id
            )
        return FlightGroupDetail(flight_group=flight_group, buckets=buckets)
