from typing import Optional, Self
from uuid import UUID

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import ConflictError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.group_ticketing.domain.entity.agency_entity import Agency
from src.service.group_ticketing.domain.permission import Capability, ensure_capability
from src.service.group_ticketing.domain.value_object.caller_identity import CallerIdentity


class CreateAgencyUseCase:
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
        name: str,
        code: str,
        parent_agency_id: Optional[UUID] = None,
        contact_email: Optional[str] = None,
        contact_phone: Optional[str] = None,
        address: Optional[str] = None,
        city: Optional[str] = None,
        country: Optional[str] = None,
    ) -> Agency:
        ensure_capability(identity, Capability.CREATE_AGENCY)
        agency = Agency.create(
            name=name,
            code=code,
            parent_agency_id=parent_agency_id,
            contact_email=contact_email,
            contact_phone=contact_phone,
            address=address,
            city=city,
            country=country,
        )

        async with self.uow:
            if parent_agency_id is not None:
                parent = await self.uow.agency_repo.get_by_id(agency_id=parent_agency_id)
                if not parent:
                    raise NotFoundError('Parent agency not found')
            if await self.uow.agency_repo.get_by_code(code=agency.code):
                raise ConflictError(f'Agency code {agency.code} already exists')

            agency = await self.uow.agency_repo.create(agency=agency)
            await self.uow.commit()

        Logger.base.info(f'🏢 [AGENCY] Created {agency.code} ({agency.id})')
        return agency
