from typing import List, Optional
from uuid import UUID

from sqlalchemy import Select, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.logging.loguru_io import Logger
from src.service.group_ticketing.app.dto.flight_group_filter import FlightGroupFilter
from src.service.group_ticketing.app.interface.i_flight_group_repo import IFlightGroupRepo
from src.service.group_ticketing.domain.entity.flight_group_entity import FlightGroup
from src.service.group_ticketing.domain.enum.flight_group_status import FlightGroupStatus
from src.service.group_ticketing.domain.enum.pnr_mode import PnrMode
from src.service.group_ticketing.driven_adapter.model.flight_group_model import FlightGroupModel


class FlightGroupRepoImpl(IFlightGroupRepo):
    def __init__(self, *, session: AsyncSession) -> None:
        self.session = session

    @staticmethod
    def _to_entity(model: FlightGroupModel) -> FlightGroup:
        return FlightGroup(
            id=model.id,
            agency_id=model.agency_id,
            carrier_code=model.carrier_code,
            flight_number=model.flight_number,
            origin=model.origin,
            destination=model.destination,
            departure_time_utc=model.departure_time_utc,
            arrival_time_utc=model.arrival_time_utc,
            departure_time_local=model.departure_time_local,
            arrival_time_local=model.arrival_time_local,
            sales_start=model.sales_start,
            sales_end=model.sales_end,
            created_by=model.created_by,
            pnr_mode=PnrMode(model.pnr_mode),
            status=FlightGroupStatus(model.status),
            baggage_rule=model.baggage_rule,
            fare_notes=model.fare_notes,
            terms=model.terms,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _by_id(self, flight_group_id: UUID) -> Select:
        return select(FlightGroupModel).where(FlightGroupModel.id == flight_group_id)

    @Logger.io
    async def create(self, *, flight_group: FlightGroup) -> FlightGroup:
        model = FlightGroupModel(
            id=flight_group.id,
            agency_id=flight_group.agency_id,
            carrier_code=flight_group.carrier_code,
            flight_number=flight_group.flight_number,
            pnr_mode=flight_group.pnr_mode,
            origin=flight_group.origin,
            destination=flight_group.destination,
            departure_time_utc=flight_group.departure_time_utc,
            arrival_time_utc=flight_group.arrival_time_utc,
            departure_time_local=flight_group.departure_time_local.replace(tzinfo=None),
            arrival_time_local=flight_group.arrival_time_local.replace(tzinfo=None),
            baggage_rule=flight_group.baggage_rule,
            fare_notes=flight_group.fare_notes,
            terms=flight_group.terms,
            sales_start=flight_group.sales_start,
            sales_end=flight_group.sales_end,
            status=flight_group.status,
            created_by=flight_group.created_by,
        )
        self.session.add(model)
        await self.session.flush()
        await self.session.refresh(model)
        return self._to_entity(model)

    @Logger.io
    async def get_by_id(self, *, flight_group_id: UUID) -> Optional[FlightGroup]:
        result = await self.session.execute(self._by_id(flight_group_id))
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    @Logger.io
    async def get_for_share(self, *, flight_group_id: UUID) -> Optional[FlightGroup]:
        result = await self.session.execute(
            self._by_id(flight_group_id).with_for_update(read=True)
        )
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    @Logger.io
    async def get_for_update(self, *, flight_group_id: UUID) -> Optional[FlightGroup]:
        result = await self.session.execute(self._by_id(flight_group_id).with_for_update())
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    @Logger.io
    async def list_groups(self, *, filters: FlightGroupFilter) -> List[FlightGroup]:
        stmt = select(FlightGroupModel)
        if filters.agency_id is not None:
            stmt = stmt.where(FlightGroupModel.agency_id == filters.agency_id)
        if filters.status is not None:
            stmt = stmt.where(FlightGroupModel.status == filters.status)
        if filters.origin:
            stmt = stmt.where(FlightGroupModel.origin == filters.origin)
        if filters.destination:
            stmt = stmt.where(FlightGroupModel.destination == filters.destination)
        if filters.on_sale_at is not None:
            stmt = stmt.where(
                FlightGroupModel.sales_start <= filters.on_sale_at,
                FlightGroupModel.sales_end >= filters.on_sale_at,
            )
        stmt = (
            stmt.order_by(FlightGroupModel.departure_time_utc, FlightGroupModel.id)
            .limit(filters.limit)
            .offset(filters.offset)
        )
        result = await self.session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    @Logger.io
    async def update_status(self, *, flight_group: FlightGroup) -> FlightGroup:
        result = await self.session.execute(
            update(FlightGroupModel)
            .where(FlightGroupModel.id == flight_group.id)
            .values(status=flight_group.status)
            .returning(FlightGroupModel)
        )
        return self._to_entity(result.scalar_one())
