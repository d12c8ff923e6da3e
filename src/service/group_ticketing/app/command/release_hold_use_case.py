from datetime import datetime
from typing import Callable, List, Self
from uuid import UUID

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace

from src.platform.config.di import Container
from src.platform.database.transaction_retry import run_with_retry
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import HoldNotFoundError
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.inventory_metrics import metrics
from src.service.group_ticketing.app import audit_trail
from src.service.group_ticketing.domain import inventory_ledger
from src.service.group_ticketing.domain.clock import utc_now
from src.service.group_ticketing.domain.entity.audit_log_entity import AuditLog
from src.service.group_ticketing.domain.entity.seat_hold_entity import SeatHold
from src.service.group_ticketing.domain.permission import Capability, ensure_capability
from src.service.group_ticketing.domain.value_object.caller_identity import CallerIdentity


class ReleaseHoldUseCase:
    """Idempotent: releasing a resolved hold returns it unchanged; only unknown ids fail."""

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
    async def execute(self, *, identity: CallerIdentity, hold_id: UUID) -> SeatHold:
        ensure_capability(identity, Capability.RELEASE_HOLD)
        with self.tracer.start_as_current_span(
            'inventory.release', attributes={'hold.id': str(hold_id)}
        ):
            hold, released, audit = await run_with_retry(
                lambda: self._release(identity=identity, hold_id=hold_id)
            )
        if released:
            metrics.record_release(reason='released', quantity=released)
            Logger.base.info(f'↩️ [HOLD] {hold.id} released, {released} seats back on sale')
            audit_trail.log_entries(audit)
        return hold

    async def _release(
        self, *, identity: CallerIdentity, hold_id: UUID
    ) -> tuple[SeatHold, int, List[AuditLog]]:
        now = self.clock()
        async with self.uow:
            snapshot = await self.uow.seat_hold_repo.get_by_id(hold_id=hold_id)
            if not snapshot:
                raise HoldNotFoundError()

            flight_group = await self.uow.flight_group_repo.get_for_share(
                flight_group_id=snapshot.flight_group_id
            )
            if not flight_group:
                raise HoldNotFoundError()
            flight_group.ensure_accessible_by(identity)

            if not snapshot.is_held:
                return snapshot, 0, []

            bucket = await self.uow.seat_bucket_repo.get_for_update(bucket_id=snapshot.seat_bucket_id)
            hold = await self.uow.seat_hold_repo.get_for_update(hold_id=hold_id)
            if not bucket or not hold:
                raise HoldNotFoundError()

            released = inventory_ledger.release(bucket, hold, now=now)
            if not released:
                return hold, 0, []

            await self.uow.seat_hold_repo.update(hold=hold)
            await self.uow.seat_bucket_repo.update(bucket=bucket)
            audit = await audit_trail.write_entries(
                self.uow,
                [
                    AuditLog.hold_change(
                        hold=hold,
                        agency_id=flight_group.agency_id,
                        actor_user_id=identity.user_id,
                        now=now,
                    )
                ],
            )
            await self.uow.commit()

        return hold, released, audit
