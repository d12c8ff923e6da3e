from datetime import datetime
from typing import Callable, Optional, Self
from uuid import UUID

import attrs
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
from src.service.group_ticketing.app.interface.i_job_publisher import IJobPublisher
from src.service.group_ticketing.domain import inventory_ledger
from src.service.group_ticketing.domain.clock import utc_now
from src.service.group_ticketing.domain.entity.audit_log_entity import AuditLog
from src.service.group_ticketing.domain.entity.flight_group_entity import FlightGroup
from src.service.group_ticketing.domain.entity.seat_bucket_entity import SeatBucket
from src.service.group_ticketing.domain.entity.seat_hold_entity import SeatHold
from src.service.group_ticketing.domain.enum.hold_status import HoldStatus
from src.service.group_ticketing.domain.permission import Capability, ensure_capability
from src.service.group_ticketing.domain.value_object.caller_identity import CallerIdentity


@attrs.define
class _Outcome:
    hold: SeatHold
    bucket: SeatBucket
    flight_group: FlightGroup
    changed: bool
    audit: Optional[AuditLog] = None


class ConfirmHoldUseCase:
    """
    Issue the seats of a hold.

    - HELD and within TTL: on_hold -> issued
    - already CONFIRMED: no-op success
    - RELEASED / EXPIRED / unknown: HoldNotFoundError
    - HELD but past TTL: expired (seats released, committed), then HoldNotFoundError
    """

    def __init__(
        self,
        *,
        uow: AbstractUnitOfWork,
        job_publisher: IJobPublisher,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.uow = uow
        self.job_publisher = job_publisher
        self.clock = clock
        self.tracer = trace.get_tracer(__name__)

    @classmethod
    @inject
    def depends(
        cls,
        uow: AbstractUnitOfWork = Depends(Provide[Container.unit_of_work]),
        job_publisher: IJobPublisher = Depends(Provide[Container.job_publisher]),
    ) -> Self:
        return cls(uow=uow, job_publisher=job_publisher)

    @Logger.io
    async def execute(self, *, identity: CallerIdentity, hold_id: UUID) -> SeatHold:
        ensure_capability(identity, Capability.CONFIRM_HOLD)

        with self.tracer.start_as_current_span(
            'inventory.confirm', attributes={'hold.id': str(hold_id)}
        ):
            outcome = await run_with_retry(
                lambda: self._confirm(identity=identity, hold_id=hold_id)
            )

        if outcome.changed:
            metrics.record_confirm(pax_type=str(outcome.bucket.pax_type), quantity=outcome.hold.quantity)
            Logger.base.info(
                f'✅ [HOLD] {outcome.hold.id} confirmed, {outcome.hold.quantity} '
                f'{outcome.bucket.pax_type} seats issued'
            )
            if outcome.audit:
                audit_trail.log_entries([outcome.audit])
            await self.job_publisher.publish_hold_confirmed(
                hold=outcome.hold, bucket=outcome.bucket, flight_group=outcome.flight_group
            )
        return outcome.hold

    async def _confirm(self, *, identity: CallerIdentity, hold_id: UUID) -> _Outcome:
        now = self.clock()
        async with self.uow:
            # unlocked read to learn the group and bucket, then lock in order
            snapshot = await self.uow.seat_hold_repo.get_by_id(hold_id=hold_id)
            if not snapshot:
                raise HoldNotFoundError()

            flight_group = await self.uow.flight_group_repo.get_for_share(
                flight_group_id=snapshot.flight_group_id
            )
            if not flight_group:
                raise HoldNotFoundError()
            flight_group.ensure_accessible_by(identity)

            bucket = await self.uow.seat_bucket_repo.get_for_update(bucket_id=snapshot.seat_bucket_id)
            hold = await self.uow.seat_hold_repo.get_for_update(hold_id=hold_id)
            if not bucket or not hold:
                raise HoldNotFoundError()

            if hold.status == HoldStatus.CONFIRMED:
                return _Outcome(hold=hold, bucket=bucket, flight_group=flight_group, changed=False)

            if hold.is_expired(now):
                inventory_ledger.expire(bucket, [hold], now=now)
                await self.uow.seat_hold_repo.update(hold=hold)
                await self.uow.seat_bucket_repo.update(bucket=bucket)
                expired = await audit_trail.write_entries(
                    self.uow,
                    [
                        AuditLog.hold_change(
                            hold=hold, agency_id=flight_group.agency_id, actor_user_id=None, now=now
                        )
                    ],
                )
                await self.uow.commit()
                metrics.record_release(reason='expired', quantity=hold.quantity)
                audit_trail.log_entries(expired)
                raise HoldNotFoundError(f'Hold {hold_id} has expired')

            if hold.is_held:
                flight_group.ensure_accepts_confirmations()
            changed = inventory_ledger.confirm(bucket, hold, now=now)
            if not changed:
                return _Outcome(hold=hold, bucket=bucket, flight_group=flight_group, changed=False)

            audit = AuditLog.hold_change(
                hold=hold,
                agency_id=flight_group.agency_id,
                actor_user_id=identity.user_id,
                now=now,
            )
            await self.uow.seat_hold_repo.update(hold=hold)
            await self.uow.seat_bucket_repo.update(bucket=bucket)
            await audit_trail.write_entries(self.uow, [audit])
            await self.uow.commit()

        return _Outcome(
            hold=hold, bucket=bucket, flight_group=flight_group, changed=True, audit=audit
        )
