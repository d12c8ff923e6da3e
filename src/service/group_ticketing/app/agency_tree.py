"""Parent-pointer walks over the agency tree."""

from typing import AsyncIterator, Optional
from uuid import UUID

from src.platform.exception.exceptions import DomainError, ForbiddenError
from src.service.group_ticketing.app.interface.i_agency_repo import IAgencyRepo
from src.service.group_ticketing.domain.entity.agency_entity import Agency
from src.service.group_ticketing.domain.value_object.caller_identity import CallerIdentity


async def iter_ancestor_ids(
    agency_repo: IAgencyRepo, parent_agency_id: Optional[UUID]
) -> AsyncIterator[UUID]:
    """Yield parent, grandparent, ... up to the root; stops on a corrupt loop."""
    seen: set[UUID] = set()
    cursor = parent_agency_id
    while cursor is not None and cursor not in seen:
        seen.add(cursor)
        yield cursor
        parent = await agency_repo.get_by_id(agency_id=cursor)
        cursor = parent.parent_agency_id if parent else None


async def ensure_no_cycle(
    agency_repo: IAgencyRepo, *, agency_id: UUID, new_parent_id: UUID
) -> None:
    if new_parent_id == agency_id:
        raise DomainError('An agency cannot be its own parent')
    async for ancestor_id in iter_ancestor_ids(agency_repo, new_parent_id):
        if ancestor_id == agency_id:
            raise DomainError('An agency cannot be moved under one of its descendants')


async def ensure_visible(
    agency_repo: IAgencyRepo, *, identity: CallerIdentity, agency: Agency
) -> None:
    """Admins see every agency; others see their own agency and its descendants."""
    if identity.is_admin or agency.id == identity.agency_id:
        return
    async for ancestor_id in iter_ancestor_ids(agency_repo, agency.parent_agency_id):
        if ancestor_id == identity.agency_id:
            return
    raise ForbiddenError('Agency is outside your agency tree')
