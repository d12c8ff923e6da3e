from collections import defaultdict
from typing import Dict, List, Optional, Sequence
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.exception.exceptions import ConflictError
from src.platform.logging.loguru_io import Logger
from src.service.group_ticketing.app.interface.i_seat_bucket_repo import ISeatBucketRepo
from src.service.group_ticketing.domain.entity.seat_bucket_entity import SeatBucket
from src.service.group_ticketing.domain.enum.pax_type import PaxType
from src.service.group_ticketing.driven_adapter.model.seat_bucket_model import SeatBucketModel


class SeatBucketRepoImpl(ISeatBucketRepo):
    def __init__(self, *, session: AsyncSession) -> None:
        self.session = session

    @staticmethod
    def _to_entity(model: SeatBucketModel) -> SeatBucket:
        return SeatBucket(
            id=model.id,
            flight_group_id=model.flight_group_id,
            pax_type=PaxType(model.pax_type),
            total_seats=model.total_seats,
            base_fare=model.base_fare,
            currency=model.currency,
            tax_amount=model.tax_amount,
            fee_amount=model.fee_amount,
            seats_on_hold=model.seats_on_hold,
            seats_issued=model.seats_issued,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    @Logger.io
    async def create(self, *, bucket: SeatBucket) -> SeatBucket:
        model = SeatBucketModel(
            id=bucket.id,
            flight_group_id=bucket.flight_group_id,
            pax_type=bucket.pax_type,
            total_seats=bucket.total_seats,
            seats_on_hold=bucket.seats_on_hold,
            seats_issued=bucket.seats_issued,
            base_fare=bucket.base_fare,
            tax_amount=bucket.tax_amount,
            fee_amount=bucket.fee_amount,
            currency=bucket.currency,
        )
        self.session.add(model)
        try:
            await self.session.flush()
        except IntegrityError as e:
            raise ConflictError(f'Flight group already has a {bucket.pax_type} seat bucket') from e
        await self.session.refresh(model)
        return self._to_entity(model)

    @Logger.io
    async def get_by_id(self, *, bucket_id: UUID) -> Optional[SeatBucket]:
        result = await self.session.execute(
            select(SeatBucketModel).where(SeatBucketModel.id == bucket_id)
        )
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    @Logger.io
    async def get_for_update(self, *, bucket_id: UUID) -> Optional[SeatBucket]:
        result = await self.session.execute(
            select(SeatBucketModel).where(SeatBucketModel.id == bucket_id).with_for_update()
        )
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    @Logger.io
    async def get_by_group_and_pax_for_update(
        self, *, flight_group_id: UUID, pax_type: PaxType
    ) -> Optional[SeatBucket]:
        result = await self.session.execute(
            select(SeatBucketModel)
            .where(
                SeatBucketModel.flight_group_id == flight_group_id,
                SeatBucketModel.pax_type == pax_type,
            )
            .with_for_update()
        )
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    @Logger.io
    async def list_by_group(
        self, *, flight_group_id: UUID, for_update: bool = False
    ) -> List[SeatBucket]:
        stmt = (
            select(SeatBucketModel)
            .where(SeatBucketModel.flight_group_id == flight_group_id)
            .order_by(SeatBucketModel.id)
        )
        if for_update:
            stmt = stmt.with_for_update()
        result = await self.session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    @Logger.io
    async def list_by_groups(
        self, *, flight_group_ids: Sequence[UUID]
    ) -> Dict[UUID, List[SeatBucket]]:
        if not flight_group_ids:
            return {}
        result = await self.session.execute(
            select(SeatBucketModel)
            .where(SeatBucketModel.flight_group_id.in_(flight_group_ids))
            .order_by(SeatBucketModel.flight_group_id, SeatBucketModel.pax_type)
        )
        grouped: Dict[UUID, List[SeatBucket]] = defaultdict(list)
        for model in result.scalars():
            grouped[model.flight_group_id].append(self._to_entity(model))
        return dict(grouped)

    @Logger.io
    async def update(self, *, bucket: SeatBucket) -> SeatBucket:
        result = await self.session.execute(
            update(SeatBucketModel)
            .where(SeatBucketModel.id == bucket.id)
            .values(
                total_seats=bucket.total_seats,
                seats_on_hold=bucket.seats_on_hold,
                seats_issued=bucket.seats_issued,
                base_fare=bucket.base_fare,
                tax_amount=bucket.tax_amount,
                fee_amount=bucket.fee_amount,
                currency=bucket.currency,
            )
            .returning(SeatBucketModel)
        )
        return self._to_entity(result.scalar_one())
