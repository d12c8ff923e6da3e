from datetime import datetime
from typing import Optional
from uuid import UUID

import attrs

from src.service.group_ticketing.domain.enum.flight_group_status import FlightGroupStatus


@attrs.define
class FlightGroupFilter:
    agency_id: Optional[UUID] = None
    status: Optional[FlightGroupStatus] = None
    origin: Optional[str] = None
    destination: Optional[str] = None
    # only groups whose sales window contains this instant
    on_sale_at: Optional[datetime] = None
    limit: int = 100
    offset: int = 0
