from abc import ABC, abstractmethod
from typing import List, Optional
from uuid import UUID

from src.service.group_ticketing.app.dto.flight_group_filter import FlightGroupFilter
from src.service.group_ticketing.domain.entity.flight_group_entity import FlightGroup


class IFlightGroupRepo(ABC):
    """
    Lock order shared by every writer: flight group -> seat bucket -> seat hold.
    Reservations take the group row FOR SHARE, status changes FOR UPDATE.
    """

    @abstractmethod
    async def create(self, *, flight_group: FlightGroup) -> FlightGroup:
        pass

    @abstractmethod
    async def get_by_id(self, *, flight_group_id: UUID) -> Optional[FlightGroup]:
        pass

    @abstractmethod
    async def get_for_share(self, *, flight_group_id: UUID) -> Optional[FlightGroup]:
        pass

    @abstractmethod
    async def get_for_update(self, *, flight_group_id: UUID) -> Optional[FlightGroup]:
        pass

    @abstractmethod
    async def list_groups(self, *, filters: FlightGroupFilter) -> List[FlightGroup]:
        pass

    @abstractmethod
    async def update_status(self, *, flight_group: FlightGroup) -> FlightGroup:
        pass
