from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Sequence
from uuid import UUID

from src.service.group_ticketing.domain.entity.seat_bucket_entity import SeatBucket
from src.service.group_ticketing.domain.enum.pax_type import PaxType


class ISeatBucketRepo(ABC):
    @abstractmethod
    async def create(self, *, bucket: SeatBucket) -> SeatBucket:
        pass

    @abstractmethod
    async def get_by_id(self, *, bucket_id: UUID) -> Optional[SeatBucket]:
        pass

    @abstractmethod
    async def get_for_update(self, *, bucket_id: UUID) -> Optional[SeatBucket]:
        """SELECT ... FOR UPDATE; the caller must already hold the group lock."""
        pass

    @abstractmethod
    async def get_by_group_and_pax_for_update(
        self, *, flight_group_id: UUID, pax_type: PaxType
    ) -> Optional[SeatBucket]:
        pass

    @abstractmethod
    async def list_by_group(
        self, *, flight_group_id: UUID, for_update: bool = False
    ) -> List[SeatBucket]:
        """Buckets of one group ordered by id (lock order when for_update)."""
        pass

    @abstractmethod
    async def list_by_groups(
        self, *, flight_group_ids: Sequence[UUID]
    ) -> Dict[UUID, List[SeatBucket]]:
        pass

    @abstractmethod
    async def update(self, *, bucket: SeatBucket) -> SeatBucket:
        """Persist counters, capacity and fare of a bucket locked in this transaction."""
        pass
