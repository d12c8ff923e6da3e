from datetime import datetime
from typing import Callable, List, Self
from uuid import UUID

import attrs
from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace

from src.platform.config.di import Container
from src.platform.database.transaction_retry import run_with_retry
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.inventory_metrics import metrics
from src.service.group_ticketing.app import audit_trail
from src.service.group_ticketing.app.interface.i_job_publisher import IJobPublisher
from src.service.group_ticketing.domain import inventory_ledger
from src.service.group_ticketing.domain.clock import utc_now
from src.service.group_ticketing.domain.entity.audit_log_entity import AuditLog
from src.service.group_ticketing.domain.entity.flight_group_entity import FlightGroup
from src.service.group_ticketing.domain.enum.flight_group_status import FlightGroupStatus
from src.service.group_ticketing.domain.permission import Capability, ensure_capability
from src.service.group_ticketing.domain.value_object.caller_identity import CallerIdentity


@attrs.define
class _Transition:
    flight_group: FlightGroup
    previous: FlightGroupStatus
    released_holds: int = 0
    released_seats: int = 0
    audit: List[AuditLog] = attrs.Factory(list)


class ChangeGroupStatusUseCase:
    """
    Drive the flight group lifecycle.

    Cancelling releases every HELD hold of the group in the same transaction;
    issued seats are left untouched.
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
    async def execute(
        self, *, identity: CallerIdentity, flight_group_id: UUID, status: FlightGroupStatus
    ) -> FlightGroup:
        ensure_capability(identity, Capability.CHANGE_GROUP_STATUS)
        target = FlightGroupStatus(status)

        with self.tracer.start_as_current_span(
            'lifecycle.transition',
            attributes={'flight_group.id': str(flight_group_id), 'flight_group.target': target},
        ):
            transition = await run_with_retry(
                lambda: self._transition(
                    identity=identity, flight_group_id=flight_group_id, target=target
                )
            )

        metrics.record_transition(from_status=transition.previous, to_status=target)
        metrics.record_release(reason='cancelled', quantity=transition.released_seats)
        Logger.base.info(
            f'🔀 [LIFECYCLE] {flight_group_id} {transition.previous} -> {target}'
            + (
                f', released {transition.released_holds} holds'
                if target == FlightGroupStatus.CANCELLED
                else ''
            )
        )
        audit_trail.log_entries(transition.audit)

        if target == FlightGroupStatus.CANCELLED:
            await self.job_publisher.publish_group_cancelled(
                flight_group=transition.flight_group, released_holds=transition.released_holds
            )
        return transition.flight_group

    async def _transition(
        self, *, identity: CallerIdentity, flight_group_id: UUID, target: FlightGroupStatus
    ) -> _Transition:
        now = self.clock()
        async with self.uow:
            flight_group = await self.uow.flight_group_repo.get_for_update(
                flight_group_id=flight_group_id
            )
            if not flight_group:
                raise NotFoundError('Flight group not found')
            flight_group.ensure_accessible_by(identity)

            buckets = await self.uow.seat_bucket_repo.list_by_group(
                flight_group_id=flight_group_id, for_update=True
            )
            previous = flight_group.transition_to(target, buckets=buckets)
            transition = _Transition(flight_group=flight_group, previous=previous)

            if target == FlightGroupStatus.CANCELLED:
                buckets_by_id = {bucket.id: bucket for bucket in buckets}
                holds = await self.uow.seat_hold_repo.list_held_for_group_for_update(
                    flight_group_id=flight_group_id
                )
                touched = set()
                for hold in holds:
                    bucket = buckets_by_id[hold.seat_bucket_id]
                    transition.released_seats += inventory_ledger.release(bucket, hold, now=now)
                    transition.released_holds += 1
                    touched.add(bucket.id)
                    await self.uow.seat_hold_repo.update(hold=hold)
                    transition.audit.append(
                        AuditLog.hold_change(
                            hold=hold,
                            agency_id=flight_group.agency_id,
                            actor_user_id=identity.user_id,
                            now=now,
                            reason='group_cancelled',
                        )
                    )
                for bucket_id in touched:
                    await self.uow.seat_bucket_repo.update(bucket=buckets_by_id[bucket_id])

            await self.uow.flight_group_repo.update_status(flight_group=flight_group)
            transition.audit.insert(
                0,
                AuditLog.group_transition(
                    flight_group=flight_group,
                    previous=previous,
                    actor_user_id=identity.user_id,
                    now=now,
                    released_holds=transition.released_holds,
                ),
            )
            await audit_trail.write_entries(self.uow, transition.audit)
            await self.uow.commit()

        return transition
