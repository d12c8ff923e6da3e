from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from src.service.group_ticketing.domain.entity.seat_hold_entity import SeatHold


class ISeatHoldRepo(ABC):
    @abstractmethod
    async def create(self, *, hold: SeatHold) -> SeatHold:
        pass

    @abstractmethod
    async def get_by_id(self, *, hold_id: UUID) -> Optional[SeatHold]:
        pass

    @abstractmethod
    async def get_for_update(self, *, hold_id: UUID) -> Optional[SeatHold]:
        pass

    @abstractmethod
    async def update(self, *, hold: SeatHold) -> SeatHold:
        pass

    @abstractmethod
    async def list_expired_for_bucket_for_update(
        self, *, bucket_id: UUID, now: datetime
    ) -> List[SeatHold]:
        pass

    @abstractmethod
    async def list_held_for_group_for_update(self, *, flight_group_id: UUID) -> List[SeatHold]:
        pass

    @abstractmethod
    async def list_bucket_ids_with_expired_holds(
        self, *, now: datetime, limit: int = 500, after_bucket_id: Optional[UUID] = None
    ) -> List[UUID]:
        """
        Unlocked scan feeding the expiry sweep; each bucket is re-checked under lock.

        Ids come back in ascending order; pass the last id of a page as
        `after_bucket_id` to fetch the next one.
        """
        pass
