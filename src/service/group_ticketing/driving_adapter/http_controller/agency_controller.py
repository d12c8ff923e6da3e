from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, status

from src.platform.logging.loguru_io import Logger
from src.service.group_ticketing.app.command.create_agency_use_case import CreateAgencyUseCase
from src.service.group_ticketing.app.command.delete_agency_use_case import DeleteAgencyUseCase
from src.service.group_ticketing.app.command.update_agency_use_case import UpdateAgencyUseCase
from src.service.group_ticketing.app.query.get_agency_use_case import GetAgencyUseCase
from src.service.group_ticketing.app.query.list_child_agencies_use_case import (
    ListChildAgenciesUseCase,
)
from src.service.group_ticketing.domain.permission import Capability
from src.service.group_ticketing.domain.value_object.caller_identity import CallerIdentity
from src.service.group_ticketing.driving_adapter.http_controller.auth.role_auth import (
    require_capability,
)
from src.service.group_ticketing.driving_adapter.http_controller.schema.agency_schema import (
    AgencyCreateRequest,
    AgencyResponse,
    AgencyUpdateRequest,
)


router = APIRouter()


@router.post('', status_code=status.HTTP_201_CREATED)
@Logger.io
async def create_agency(
    request: AgencyCreateRequest,
    identity: CallerIdentity = Depends(require_capability(Capability.CREATE_AGENCY)),
    use_case: CreateAgencyUseCase = Depends(CreateAgencyUseCase.depends),
) -> AgencyResponse:
    agency = await use_case.execute(
        identity=identity,
        name=request.name,
        code=request.code,
        parent_agency_id=request.parent_agency_id,
        contact_email=request.contact_email,
        contact_phone=request.contact_phone,
        address=request.address,
        city=request.city,
        country=request.country,
    )
    return AgencyResponse.from_entity(agency)


@router.get('/{agency_id}', status_code=status.HTTP_200_OK)
@Logger.io
async def get_agency(
    agency_id: UUID,
    identity: CallerIdentity = Depends(require_capability(Capability.VIEW_AGENCY)),
    use_case: GetAgencyUseCase = Depends(GetAgencyUseCase.depends),
) -> AgencyResponse:
    agency = await use_case.get_by_id(identity=identity, agency_id=agency_id)
    return AgencyResponse.from_entity(agency)


@router.get('/{agency_id}/children', status_code=status.HTTP_200_OK)
@Logger.io
async def list_child_agencies(
    agency_id: UUID,
    identity: CallerIdentity = Depends(require_capability(Capability.VIEW_AGENCY)),
    use_case: ListChildAgenciesUseCase = Depends(ListChildAgenciesUseCase.depends),
) -> List[AgencyResponse]:
    children = await use_case.list_children(identity=identity, agency_id=agency_id)
    return [AgencyResponse.from_entity(child) for child in children]


@router.patch('/{agency_id}', status_code=status.HTTP_200_OK)
@Logger.io
async def update_agency(
    agency_id: UUID,
    request: AgencyUpdateRequest,
    identity: CallerIdentity = Depends(require_capability(Capability.UPDATE_AGENCY)),
    use_case: UpdateAgencyUseCase = Depends(UpdateAgencyUseCase.depends),
) -> AgencyResponse:
    agency = await use_case.execute(
        identity=identity,
        agency_id=agency_id,
        name=request.name,
        status=request.status,
        update_parent=request.updates_parent,
        parent_agency_id=request.parent_agency_id,
    )
    return AgencyResponse.from_entity(agency)


@router.delete('/{agency_id}', status_code=status.HTTP_204_NO_CONTENT)
@Logger.io
async def delete_agency(
    agency_id: UUID,
    identity: CallerIdentity = Depends(require_capability(Capability.DELETE_AGENCY)),
    use_case: DeleteAgencyUseCase = Depends(DeleteAgencyUseCase.depends),
) -> None:
    await use_case.execute(identity=identity, agency_id=agency_id)
