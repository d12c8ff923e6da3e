from typing import Self
from uuid import UUID

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import ConflictError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.group_ticketing.domain.permission import Capability, ensure_capability
from src.service.group_ticketing.domain.value_object.caller_identity import CallerIdentity


class DeleteAgencyUseCase:
    """Child agencies become roots and the agency's users are removed with it."""

    def __init__(self, *, uow: AbstractUnitOfWork) -> None:
        self.uow = uow

    @classmethod
    @inject
    def depends(
        cls, uow: AbstractUnitOfWork = Depends(Provide[Container.unit_of_work])
    ) -> Self:
        return cls(uow=uow)

    @Logger.io
    async def execute(self, *, identity: CallerIdentity, agency_id: UUID) -> None:
        ensure_capability(identity, Capability.DELETE_AGENCY)
        if agency_id == identity.agency_id:
            raise ConflictError('You cannot delete your own agency')

        async with self.uow:
            agency = await self.uow.agency_repo.get_for_update(agency_id=agency_id)
            if not agency:
                raise NotFoundError('Agency not found')
            if await self.uow.agency_repo.owns_flight_groups(agency_id=agency_id):
                raise ConflictError('Agency still owns flight groups and cannot be deleted')

            await self.uow.agency_repo.delete(agency_id=agency_id)
            await self.uow.commit()

        Logger.base.info(f'🗑️ [AGENCY] Deleted {agency.code} ({agency_id})')
