from abc import ABC, abstractmethod

from src.service.group_ticketing.domain.entity.flight_group_entity import FlightGroup
from src.service.group_ticketing.domain.entity.seat_bucket_entity import SeatBucket
from src.service.group_ticketing.domain.entity.seat_hold_entity import SeatHold


class IJobPublisher(ABC):
    """
    Enqueues follow-up work after an inventory change committed.

    Implementations never raise: a queue outage is logged and the committed
    inventory change stands.
    """

    @abstractmethod
    async def publish_hold_confirmed(
        self, *, hold: SeatHold, bucket: SeatBucket, flight_group: FlightGroup
    ) -> None:
        pass

    @abstractmethod
    async def publish_group_cancelled(
        self, *, flight_group: FlightGroup, released_holds: int
    ) -> None:
        pass
