from datetime import datetime
from typing import Callable, Optional, Self
from uuid import UUID

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace

from src.platform.config.di import Container
from src.platform.database.transaction_retry import run_with_retry
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import LockTimeoutError
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.inventory_metrics import metrics
from src.service.group_ticketing.app import audit_trail
from src.service.group_ticketing.domain import inventory_ledger
from src.service.group_ticketing.domain.clock import utc_now
from src.service.group_ticketing.domain.entity.audit_log_entity import AuditLog


class ExpireStaleHoldsUseCase:
    """
    Expire every HELD hold with expires_at <= now, one bucket per transaction.

    Each bucket is locked in the same order as a reservation (group FOR SHARE,
    bucket FOR UPDATE, holds FOR UPDATE), so a confirm racing the sweep either
    sees the hold still HELD or already EXPIRED. A bucket that stays locked is
    skipped and picked up by the next run.
    """

    BATCH_SIZE = 500

    def __init__(
        self, *, uow: AbstractUnitOfWork, clock: Callable[[], datetime] = utc_now
    ) -> None:
        self.uow = uow
        self.clock = clock
        self.tracer = trace.get_tracer(__name__)

    @classmethod
    @inject
    def depends(
        cls, uow: AbstractUnitOfWork = Depends(Provide[Container.unit_of_work])
    ) -> Self:
        return cls(uow=uow)

    @Logger.io
    async def execute(self, *, now: Optional[datetime] = None) -> int:
        """Returns the number of holds expired by this run."""
        now = now or self.clock()
        expired_holds = 0
        swept_buckets = 0
        after_bucket_id: Optional[UUID] = None
        with self.tracer.start_as_current_span('inventory.expire_stale_holds'):
            while True:
                async with self.uow:
                    bucket_ids = await self.uow.seat_hold_repo.list_bucket_ids_with_expired_holds(
                        now=now, limit=self.BATCH_SIZE, after_bucket_id=after_bucket_id
                    )
                if not bucket_ids:
                    break

                for bucket_id in bucket_ids:
                    try:
                        expired_holds += await run_with_retry(
                            lambda bucket_id=bucket_id: self._expire_bucket(
                                bucket_id=bucket_id, now=now
                            )
                        )
                    except LockTimeoutError:
                        Logger.base.warning(
                            f'⏳ [EXPIRY] Bucket {bucket_id} busy, left for next run'
                        )

                swept_buckets += len(bucket_ids)
                # keyset paging: a skipped bucket sorts before the cursor and is not fetched again
                after_bucket_id = bucket_ids[-1]
                if len(bucket_ids) < self.BATCH_SIZE:
                    break

        if expired_holds:
            Logger.base.info(f'⌛ [EXPIRY] {expired_holds} holds expired in {swept_buckets} buckets')
        return expired_holds

    async def _expire_bucket(self, *, bucket_id: UUID, now: datetime) -> int:
        async with self.uow:
            snapshot = await self.uow.seat_bucket_repo.get_by_id(bucket_id=bucket_id)
            if not snapshot:
                return 0
            flight_group = await self.uow.flight_group_repo.get_for_share(
                flight_group_id=snapshot.flight_group_id
            )
            bucket = await self.uow.seat_bucket_repo.get_for_update(bucket_id=bucket_id)
            if not flight_group or not bucket:
                return 0

            holds = await self.uow.seat_hold_repo.list_expired_for_bucket_for_update(
                bucket_id=bucket_id, now=now
            )
            expired = inventory_ledger.expire(bucket, holds, now=now)
            if not expired:
                return 0

            for hold in expired:
                await self.uow.seat_hold_repo.update(hold=hold)
            await self.uow.seat_bucket_repo.update(bucket=bucket)
            audit = await audit_trail.write_entries(
                self.uow,
                [
                    AuditLog.hold_change(
                        hold=hold, agency_id=flight_group.agency_id, actor_user_id=None, now=now
                    )
                    for hold in expired
                ],
            )
            await self.uow.commit()

        metrics.record_release(reason='expired', quantity=sum(h.quantity for h in expired))
        audit_trail.log_entries(audit)
        return len(expired)
