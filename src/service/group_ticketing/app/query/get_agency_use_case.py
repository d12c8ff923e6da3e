from typing import Self
from uuid import UUID

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.group_ticketing.app.agency_tree import ensure_visible
from src.service.group_ticketing.domain.entity.agency_entity import Agency
from src.service.group_ticketing.domain.permission import Capability, ensure_capability
from src.service.group_ticketing.domain.value_object.caller_identity import CallerIdentity


class GetAgencyUseCase:
    def __init__(self, *, uow: AbstractUnitOfWork) -> None:
        self.uow = uow

    @classmethod
    @inject
    def depends(
        cls, uow: AbstractUnitOfWork = Depends(Provide[Container.unit_of_work])
    ) -> Self:
        return cls(uow=uow)

    @Logger.io
    async def get_by_id(self, *, identity: CallerIdentity, agency_id: UUID) -> Agency:
        ensure_capability(identity, Capability.VIEW_AGENCY)
        async with self.uow:
            agency = await self.uow.agency_repo.get_by_id(agency_id=agency_id)
            if not agency:
                raise NotFoundError('Agency not found')
            await ensure_visible(self.uow.agency_repo, identity=identity, agency=agency)
        return agency
