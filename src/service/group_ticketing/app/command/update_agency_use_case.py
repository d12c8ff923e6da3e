from typing import Optional, Self
from uuid import UUID

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.group_ticketing.app.agency_tree import ensure_no_cycle
from src.service.group_ticketing.domain.entity.agency_entity import Agency
from src.service.group_ticketing.domain.enum.agency_status import AgencyStatus
from src.service.group_ticketing.domain.permission import Capability, ensure_capability
from src.service.group_ticketing.domain.value_object.caller_identity import CallerIdentity


class UpdateAgencyUseCase:
    def __init__(self, *, uow: AbstractUnitOfWork) -> None:
        self.uow = uow

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
        agency_id: UUID,
        name: Optional[str] = None,
        status: Optional[AgencyStatus] = None,
        update_parent: bool = False,
        parent_agency_id: Optional[UUID] = None,
    ) -> Agency:
        """
        Patch an agency. `update_parent` distinguishes "move to root"
        (parent_agency_id=None) from "leave the parent alone".
        """
        ensure_capability(identity, Capability.UPDATE_AGENCY)

        async with self.uow:
            agency = await self.uow.agency_repo.get_for_update(agency_id=agency_id)
            if not agency:
                raise NotFoundError('Agency not found')

            if name is not None:
                agency.rename(name)
            if status is not None:
                agency.status = AgencyStatus(status)
            if update_parent and parent_agency_id != agency.parent_agency_id:
                if parent_agency_id is not None:
                    parent = await self.uow.agency_repo.get_by_id(agency_id=parent_agency_id)
                    if not parent:
                        raise NotFoundError('Parent agency not found')
                    await ensure_no_cycle(
                        self.uow.agency_repo, agency_id=agency.id, new_parent_id=parent_agency_id
                    )
                agency.parent_agency_id = parent_agency_id

            agency = await self.uow.agency_repo.update(agency=agency)
            await self.uow.commit()

        Logger.base.info(f'🏢 [AGENCY] Updated {agency.code}: status={agency.status}')
        return agency
