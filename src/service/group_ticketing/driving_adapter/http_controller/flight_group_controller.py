from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from src.platform.logging.loguru_io import Logger
from src.service.group_ticketing.app.command.change_group_status_use_case import (
    ChangeGroupStatusUseCase,
)
from src.service.group_ticketing.app.command.configure_seat_bucket_use_case import (
    ConfigureSeatBucketUseCase,
)
from src.service.group_ticketing.app.command.create_flight_group_use_case import (
    CreateFlightGroupUseCase,
)
from src.service.group_ticketing.app.command.reserve_seats_use_case import ReserveSeatsUseCase
from src.service.group_ticketing.app.dto.flight_group_detail import FlightGroupDetail
from src.service.group_ticketing.app.dto.flight_group_filter import FlightGroupFilter
from src.service.group_ticketing.app.query.get_flight_group_use_case import GetFlightGroupUseCase
from src.service.group_ticketing.app.query.list_flight_groups_use_case import (
    ListFlightGroupsUseCase,
)
from src.service.group_ticketing.app.query.quote_fare_use_case import QuoteFareUseCase
from src.service.group_ticketing.domain.enum.flight_group_status import FlightGroupStatus
from src.service.group_ticketing.domain.enum.pax_type import PaxType
from src.service.group_ticketing.domain.permission import Capability
from src.service.group_ticketing.domain.value_object.caller_identity import CallerIdentity
from src.service.group_ticketing.driving_adapter.http_controller.auth.role_auth import (
    require_capability,
)
from src.service.group_ticketing.driving_adapter.http_controller.schema.flight_group_schema import (
    FareQuoteRequest,
    FareQuoteResponse,
    FlightGroupCreateRequest,
    FlightGroupResponse,
    FlightGroupStatusRequest,
    SeatBucketConfigRequest,
    SeatBucketResponse,
)
from src.service.group_ticketing.driving_adapter.http_controller.schema.hold_schema import (
    HoldRequest,
    HoldResponse,
)


router = APIRouter()


@router.post('', status_code=status.HTTP_201_CREATED)
@Logger.io
async def create_flight_group(
    request: FlightGroupCreateRequest,
    identity: CallerIdentity = Depends(require_capability(Capability.CREATE_FLIGHT_GROUP)),
    use_case: CreateFlightGroupUseCase = Depends(CreateFlightGroupUseCase.depends),
) -> FlightGroupResponse:
    detail = await use_case.execute(
        identity=identity,
        carrier_code=request.carrier_code,
        flight_number=request.flight_number,
        origin=request.origin,
        destination=request.destination,
        departure_time_utc=request.departure_time_utc,
        arrival_time_utc=request.arrival_time_utc,
        departure_time_local=request.departure_time_local,
        arrival_time_local=request.arrival_time_local,
        sales_start=request.sales_start,
        sales_end=request.sales_end,
        pnr_mode=request.pnr_mode,
        baggage_rule=request.baggage_rule,
        fare_notes=request.fare_notes,
        terms=request.terms,
        agency_id=request.agency_id,
        seat_buckets=[bucket.to_spec() for bucket in request.seat_buckets],
    )
    return FlightGroupResponse.from_detail(detail)


@router.get('', status_code=status.HTTP_200_OK)
@Logger.io
async def list_flight_groups(
    status_filter: Optional[FlightGroupStatus] = Query(None, alias='status'),
    origin: Optional[str] = Query(None, min_length=3, max_length=3),
    destination: Optional[str] = Query(None, min_length=3, max_length=3),
    agency_id: Optional[UUID] = None,
    limit: int = Query(100, ge=1, le=500),
    offset: int = Query(0, ge=0),
    identity: CallerIdentity = Depends(require_capability(Capability.VIEW_FLIGHT_GROUP)),
    use_case: ListFlightGroupsUseCase = Depends(ListFlightGroupsUseCase.depends),
) -> List[FlightGroupResponse]:
    details = await use_case.list_groups(
        identity=identity,
        filters=FlightGroupFilter(
            agency_id=agency_id,
            status=status_filter,
            origin=origin,
            destination=destination,
            limit=limit,
            offset=offset,
        ),
    )
    return [FlightGroupResponse.from_detail(detail) for detail in details]


@router.get('/{flight_group_id}', status_code=status.HTTP_200_OK)
@Logger.io
async def get_flight_group(
    flight_group_id: UUID,
    identity: CallerIdentity = Depends(require_capability(Capability.VIEW_FLIGHT_GROUP)),
    use_case: GetFlightGroupUseCase = Depends(GetFlightGroupUseCase.depends),
) -> FlightGroupResponse:
    detail = await use_case.get_by_id(identity=identity, flight_group_id=flight_group_id)
    return FlightGroupResponse.from_detail(detail)


@router.put('/{flight_group_id}/seat-buckets/{pax_type}', status_code=status.HTTP_200_OK)
@Logger.io
async def configure_seat_bucket(
    flight_group_id: UUID,
    pax_type: PaxType,
    request: SeatBucketConfigRequest,
    identity: CallerIdentity = Depends(require_capability(Capability.CONFIGURE_SEAT_BUCKETS)),
    use_case: ConfigureSeatBucketUseCase = Depends(ConfigureSeatBucketUseCase.depends),
) -> SeatBucketResponse:
    bucket = await use_case.execute(
        identity=identity,
        flight_group_id=flight_group_id,
        pax_type=pax_type,
        total_seats=request.total_seats,
        base_fare=request.base_fare,
        tax_amount=request.tax_amount,
        fee_amount=request.fee_amount,
        currency=request.currency,
    )
    return SeatBucketResponse.from_entity(bucket)


@router.post('/{flight_group_id}/quote', status_code=status.HTTP_200_OK)
@Logger.io
async def quote_fare(
    flight_group_id: UUID,
    request: FareQuoteRequest,
    identity: CallerIdentity = Depends(require_capability(Capability.QUOTE_FARE)),
    use_case: QuoteFareUseCase = Depends(QuoteFareUseCase.depends),
) -> FareQuoteResponse:
    quote = await use_case.quote(
        identity=identity, flight_group_id=flight_group_id, passengers=request.passengers()
    )
    return FareQuoteResponse.from_quote(flight_group_id=flight_group_id, quote=quote)


@router.patch('/{flight_group_id}/status', status_code=status.HTTP_200_OK)
@Logger.io
async def change_flight_group_status(
    flight_group_id: UUID,
    request: FlightGroupStatusRequest,
    identity: CallerIdentity = Depends(require_capability(Capability.CHANGE_GROUP_STATUS)),
    use_case: ChangeGroupStatusUseCase = Depends(ChangeGroupStatusUseCase.depends),
) -> FlightGroupResponse:
    flight_group = await use_case.execute(
        identity=identity, flight_group_id=flight_group_id, status=request.status
    )
    return FlightGroupResponse.from_detail(FlightGroupDetail(flight_group=flight_group))


@router.post('/{flight_group_id}/seat-buckets/{pax_type}/hold', status_code=status.HTTP_201_CREATED)
@Logger.io
async def hold_seats(
    flight_group_id: UUID,
    pax_type: PaxType,
    request: HoldRequest,
    identity: CallerIdentity = Depends(require_capability(Capability.HOLD_SEATS)),
    use_case: ReserveSeatsUseCase = Depends(ReserveSeatsUseCase.depends),
) -> HoldResponse:
    hold = await use_case.execute(
        identity=identity,
        flight_group_id=flight_group_id,
        pax_type=pax_type,
        quantity=request.quantity,
    )
    return HoldResponse.from_entity(hold)
