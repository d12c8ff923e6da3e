from datetime import datetime, timedelta
import time
from typing import Callable, Optional, Self
from uuid import UUID

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace

from src.platform.config.core_setting import settings
from src.platform.config.di import Container
from src.platform.database.transaction_retry import run_with_retry
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import (
    CapacityExceededError,
    CustomBaseError,
    DomainError,
    GroupNotOnSaleError,
    LockTimeoutError,
    NotFoundError,
)
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.inventory_metrics import metrics
from src.service.group_ticketing.app import audit_trail
from src.service.group_ticketing.domain import inventory_ledger
from src.service.group_ticketing.domain.clock import utc_now
from src.service.group_ticketing.domain.entity.audit_log_entity import AuditLog
from src.service.group_ticketing.domain.entity.seat_hold_entity import SeatHold
from src.service.group_ticketing.domain.enum.pax_type import PaxType
from src.service.group_ticketing.domain.permission import Capability, ensure_capability
from src.service.group_ticketing.domain.value_object.caller_identity import CallerIdentity


class ReserveSeatsUseCase:
    """
    Hold seats of one bucket.

    Transaction: group FOR SHARE -> bucket FOR UPDATE -> expired holds of the
    bucket FOR UPDATE. Expired holds are released first, then the
    check-and-increment runs against the locked counters.
    """

    def __init__(
        self,
        *,
        uow: AbstractUnitOfWork,
        hold_ttl: Optional[timedelta] = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.uow = uow
        self.hold_ttl = hold_ttl or timedelta(minutes=settings.HOLD_TTL_MINUTES)
        self.clock = clock
        self.tracer = trace.get_tracer(__name__)

    @classmethod
    @inject
    def depends(
        cls, uow: AbstractUnitOfWork = Depends(Provide[Container.unit_of_work])
    ) -> Self:
        return cls(uow=uow)

    @Logger.io
    async def execute(
        self,
        *,
        identity: CallerIdentity,
        flight_group_id: UUID,
        pax_type: PaxType,
        quantity: int,
    ) -> SeatHold:
        ensure_capability(identity, Capability.HOLD_SEATS)
        if quantity <= 0:
            raise DomainError('quantity must be greater than 0')

        started = time.perf_counter()
        result = 'held'
        try:
            with self.tracer.start_as_current_span(
                'inventory.reserve',
                attributes={
                    'flight_group.id': str(flight_group_id),
                    'seat_bucket.pax_type': str(pax_type),
                    'hold.quantity': quantity,
                },
            ):
                return await run_with_retry(
                    lambda: self._reserve(
                        identity=identity,
                        flight_group_id=flight_group_id,
                        pax_type=pax_type,
                        quantity=quantity,
                    )
                )
        except CapacityExceededError:
            result = 'capacity_exceeded'
            raise
        except GroupNotOnSaleError:
            result = 'not_on_sale'
            raise
        except LockTimeoutError:
            result = 'lock_timeout'
            raise
        except CustomBaseError:
            result = 'rejected'
            raise
        finally:
            metrics.record_hold(
                pax_type=str(pax_type), result=result, duration=time.perf_counter() - started
            )

    async def _reserve(
        self,
        *,
        identity: CallerIdentity,
        flight_group_id: UUID,
        pax_type: PaxType,
        quantity: int,
    ) -> SeatHold:
        now = self.clock()
        async with self.uow:
            flight_group = await self.uow.flight_group_repo.get_for_share(
                flight_group_id=flight_group_id
            )
            if not flight_group:
                raise NotFoundError('Flight group not found')
            flight_group.ensure_accessible_by(identity)
            flight_group.ensure_on_sale(now)

            bucket = await self.uow.seat_bucket_repo.get_by_group_and_pax_for_update(
                flight_group_id=flight_group_id, pax_type=pax_type
            )
            if not bucket:
                raise NotFoundError(f'Flight group has no {pax_type} seat bucket')

            stale = await self.uow.seat_hold_repo.list_expired_for_bucket_for_update(
                bucket_id=bucket.id, now=now
            )
            expired = inventory_ledger.expire(bucket, stale, now=now)
            for expired_hold in expired:
                await self.uow.seat_hold_repo.update(hold=expired_hold)
            expired_seats = sum(h.quantity for h in expired)
            audit = [
                AuditLog.hold_change(
                    hold=expired_hold, agency_id=flight_group.agency_id, actor_user_id=None, now=now
                )
                for expired_hold in expired
            ]

            try:
                hold = inventory_ledger.reserve(
                    bucket, quantity=quantity, held_by=identity.user_id, now=now, ttl=self.hold_ttl
                )
            except CapacityExceededError:
                if expired:
                    # keep the expiry even though this request is rejected
                    await self.uow.seat_bucket_repo.update(bucket=bucket)
                    await audit_trail.write_entries(self.uow, audit)
                    await self.uow.commit()
                    metrics.record_release(reason='expired', quantity=expired_seats)
                    audit_trail.log_entries(audit)
                raise

            await self.uow.seat_hold_repo.create(hold=hold)
            await self.uow.seat_bucket_repo.update(bucket=bucket)
            audit.append(
                AuditLog.hold_change(
                    hold=hold,
                    agency_id=flight_group.agency_id,
                    actor_user_id=identity.user_id,
                    now=now,
                )
            )
            await audit_trail.write_entries(self.uow, audit)
            await self.uow.commit()

        metrics.record_release(reason='expired', quantity=expired_seats)
        audit_trail.log_entries(audit)
        Logger.base.info(
            f'🎫 [HOLD] {quantity} {pax_type} seats held on {flight_group_id} as {hold.id} '
            f'(on_hold={bucket.seats_on_hold}, issued={bucket.seats_issued}, total={bucket.total_seats})'
        )
        return hold
