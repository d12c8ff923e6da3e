from datetime import datetime
from typing import Callable, List, Self

import attrs
from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.logging.loguru_io import Logger
from src.service.group_ticketing.app.dto.flight_group_detail import FlightGroupDetail
from src.service.group_ticketing.app.dto.flight_group_filter import FlightGroupFilter
from src.service.group_ticketing.domain.clock import utc_now
from src.service.group_ticketing.domain.enum.flight_group_status import FlightGroupStatus
from src.service.group_ticketing.domain.enum.user_role import UserRole
from src.service.group_ticketing.domain.permission import Capability, ensure_capability
from src.service.group_ticketing.domain.value_object.caller_identity import CallerIdentity


MAX_PAGE_SIZE = 500


class ListFlightGroupsUseCase:
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
    async def list_groups(
        self, *, identity: CallerIdentity, filters: FlightGroupFilter
    ) -> List[FlightGroupDetail]:
        ensure_capability(identity, Capability.VIEW_FLIGHT_GROUP)
        scoped = self.scope_filters(identity=identity, filters=filters)

        async with self.uow:
            groups = await self.uow.flight_group_repo.list_groups(filters=scoped)
            buckets_by_group = await self.uow.seat_bucket_repo.list_by_groups(
                flight_group_ids=[group.id for group in groups]
            )

        Logger.base.info(f'📋 [GROUP] Found {len(groups)} flight groups for {identity.username}')
        return [
            FlightGroupDetail(flight_group=group, buckets=buckets_by_group.get(group.id, []))
            for group in groups
        ]

    def scope_filters(
        self, *, identity: CallerIdentity, filters: FlightGroupFilter
    ) -> FlightGroupFilter:
        """Narrow the caller's filters to what their role may see."""
        scoped = attrs.evolve(
            filters,
            origin=filters.origin.upper() if filters.origin else None,
            destination=filters.destination.upper() if filters.destination else None,
            limit=max(1, min(filters.limit, MAX_PAGE_SIZE)),
            offset=max(0, filters.offset),
        )
        if not identity.is_admin:
            scoped = attrs.evolve(scoped, agency_id=identity.agency_id)
        if identity.role == UserRole.SUB_AGENT:
            if scoped.status not in (None, FlightGroupStatus.PUBLISHED):
                # nothing else is visible to a sub-agent
                return attrs.evolve(scoped, status=FlightGroupStatus.PUBLISHED, limit=0)
            scoped = attrs.evolve(
                scoped, status=FlightGroupStatus.PUBLISHED, on_sale_at=self.clock()
            )
        return scoped
