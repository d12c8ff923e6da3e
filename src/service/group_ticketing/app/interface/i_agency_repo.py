from abc import ABC, abstractmethod
from typing import List, Optional
from uuid import UUID

from src.service.group_ticketing.domain.entity.agency_entity import Agency


class IAgencyRepo(ABC):
    """Agency repository bound to the unit of work's session"""

    @abstractmethod
    async def create(self, *, agency: Agency) -> Agency:
        pass

    @abstractmethod
    async def get_by_id(self, *, agency_id: UUID) -> Optional[Agency]:
        pass

    @abstractmethod
    async def get_for_update(self, *, agency_id: UUID) -> Optional[Agency]:
        pass

    @abstractmethod
    async def get_by_code(self, *, code: str) -> Optional[Agency]:
        pass

    @abstractmethod
    async def list_children(self, *, parent_agency_id: UUID) -> List[Agency]:
        pass

    @abstractmethod
    async def update(self, *, agency: Agency) -> Agency:
        pass

    @abstractmethod
    async def delete(self, *, agency_id: UUID) -> None:
        """Delete the agency and its users; children keep existing as roots."""
        pass

    @abstractmethod
    async def owns_flight_groups(self, *, agency_id: UUID) -> bool:
        """True when the agency owns flight groups or one of its users created any."""
        pass
