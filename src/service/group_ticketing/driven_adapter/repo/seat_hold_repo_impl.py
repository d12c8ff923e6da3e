from datetime import datetime
from typing import List, Optional
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.logging.loguru_io import Logger
from src.service.group_ticketing.app.interface.i_seat_hold_repo import ISeatHoldRepo
from src.service.group_ticketing.domain.entity.seat_hold_entity import SeatHold
from src.service.group_ticketing.domain.enum.hold_status import HoldStatus
from src.service.group_ticketing.driven_adapter.model.seat_hold_model import SeatHoldModel


class SeatHoldRepoImpl(ISeatHoldRepo):
    def __init__(self, *, session: AsyncSession) -> None:
        self.session = session

    @staticmethod
    def _to_entity(model: SeatHoldModel) -> SeatHold:
        return SeatHold(
            id=model.id,
            seat_bucket_id=model.seat_bucket_id,
            flight_group_id=model.flight_group_id,
            quantity=model.quantity,
            held_by=model.held_by,
            expires_at=model.expires_at,
            status=HoldStatus(model.status),
            created_at=model.created_at,
            resolved_at=model.resolved_at,
        )

    @Logger.io
    async def create(self, *, hold: SeatHold) -> SeatHold:
        model = SeatHoldModel(
            id=hold.id,
            seat_bucket_id=hold.seat_bucket_id,
            flight_group_id=hold.flight_group_id,
            quantity=hold.quantity,
            status=hold.status,
            held_by=hold.held_by,
            expires_at=hold.expires_at,
            created_at=hold.created_at,
        )
        self.session.add(model)
        await self.session.flush()
        return self._to_entity(model)

    @Logger.io
    async def get_by_id(self, *, hold_id: UUID) -> Optional[SeatHold]:
        result = await self.session.execute(select(SeatHoldModel).where(SeatHoldModel.id == hold_id))
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    @Logger.io
    async def get_for_update(self, *, hold_id: UUID) -> Optional[SeatHold]:
        result = await self.session.execute(
            select(SeatHoldModel).where(SeatHoldModel.id == hold_id).with_for_update()
        )
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    @Logger.io
    async def update(self, *, hold: SeatHold) -> SeatHold:
        await self.session.execute(
            update(SeatHoldModel)
            .where(SeatHoldModel.id == hold.id)
            .values(status=hold.status, resolved_at=hold.resolved_at)
        )
        return hold

    @Logger.io
    async def list_expired_for_bucket_for_update(
        self, *, bucket_id: UUID, now: datetime
    ) -> List[SeatHold]:
        result = await self.session.execute(
            select(SeatHoldModel)
            .where(
                SeatHoldModel.seat_bucket_id == bucket_id,
                SeatHoldModel.status == HoldStatus.HELD,
                SeatHoldModel.expires_at <= now,
            )
            .order_by(SeatHoldModel.id)
            .with_for_update()
        )
        return [self._to_entity(model) for model in result.scalars()]

    @Logger.io
    async def list_held_for_group_for_update(self, *, flight_group_id: UUID) -> List[SeatHold]:
        result = await self.session.execute(
            select(SeatHoldModel)
            .where(
                SeatHoldModel.flight_group_id == flight_group_id,
                SeatHoldModel.status == HoldStatus.HELD,
            )
            .order_by(SeatHoldModel.seat_bucket_id, SeatHoldModel.id)
            .with_for_update()
        )
        return [self._to_entity(model) for model in result.scalars()]

    @Logger.io
    async def list_bucket_ids_with_expired_holds(
        self, *, now: datetime, limit: int = 500, after_bucket_id: Optional[UUID] = None
    ) -> List[UUID]:
        stmt = select(SeatHoldModel.seat_bucket_id).where(
            SeatHoldModel.status == HoldStatus.HELD, SeatHoldModel.expires_at <= now
        )
        if after_bucket_id:
            stmt = stmt.where(SeatHoldModel.seat_bucket_id > after_bucket_id)
        result = await self.session.execute(
            stmt.group_by(SeatHoldModel.seat_bucket_id)
            .order_by(SeatHoldModel.seat_bucket_id)
            .limit(limit)
        )
        return list(result.scalars())
