from typing import List

import attrs

from src.service.group_ticketing.domain.entity.flight_group_entity import FlightGroup
from src.service.group_ticketing.domain.entity.seat_bucket_entity import SeatBucket


@attrs.define
class FlightGroupDetail:
    flight_group: FlightGroup
    buckets: List[SeatBucket] = attrs.field(factory=list)
