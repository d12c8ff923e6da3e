from collections.abc import Callable
from datetime import datetime, timedelta
from unittest.mock import AsyncMock
from uuid import UUID

import pytest
import uuid_utils.compat as uuid

from src.platform.exception.exceptions import (
    ForbiddenError,
    GroupNotOnSaleError,
    HoldNotFoundError,
    LockTimeoutError,
)
from src.service.group_ticketing.app.command.confirm_hold_use_case import ConfirmHoldUseCase
from src.service.group_ticketing.app.command.expire_stale_holds_use_case import (
    ExpireStaleHoldsUseCase,
)
from src.service.group_ticketing.app.command.release_hold_use_case import ReleaseHoldUseCase
from src.service.group_ticketing.app.command.reserve_seats_use_case import ReserveSeatsUseCase
from src.service.group_ticketing.app.interface.i_job_publisher import IJobPublisher
from src.service.group_ticketing.domain.enum.flight_group_status import FlightGroupStatus
from src.service.group_ticketing.domain.enum.hold_status import HoldStatus
from src.service.group_ticketing.domain.enum.pax_type import PaxType
from src.service.group_ticketing.domain.enum.user_role import UserRole
from test.service.group_ticketing.builders import (
    NOW,
    FixedClock,
    SeededWorld,
    make_bucket,
    make_identity,
    seed_hold,
)
from test.service.group_ticketing.in_memory_unit_of_work import InMemoryStore, InMemoryUnitOfWork


TTL = timedelta(minutes=30)


@pytest.fixture
def job_publisher() -> AsyncMock:
    return AsyncMock(spec=IJobPublisher)


@pytest.fixture
def confirm(
    uow_factory: Callable[[], InMemoryUnitOfWork], clock: FixedClock, job_publisher: AsyncMock
) -> Callable[[], ConfirmHoldUseCase]:
    return lambda: ConfirmHoldUseCase(uow=uow_factory(), job_publisher=job_publisher, clock=clock)


@pytest.fixture
def release(
    uow_factory: Callable[[], InMemoryUnitOfWork], clock: FixedClock
) -> Callable[[], ReleaseHoldUseCase]:
    return lambda: ReleaseHoldUseCase(uow=uow_factory(), clock=clock)


@pytest.fixture
def expire(
    uow_factory: Callable[[], InMemoryUnitOfWork], clock: FixedClock
) -> Callable[[], ExpireStaleHoldsUseCase]:
    return lambda: ExpireStaleHoldsUseCase(uow=uow_factory(), clock=clock)


class TestConfirmHold:
    async def test_seats_move_from_hold_to_issued(
        self,
        confirm: Callable,
        world: SeededWorld,
        store: InMemoryStore,
        job_publisher: AsyncMock,
    ) -> None:
        hold = seed_hold(store, world.adult_bucket, quantity=4, held_by=world.sub_agent.id)

        confirmed = await confirm().execute(identity=world.manager_identity, hold_id=hold.id)

        assert confirmed.status == HoldStatus.CONFIRMED
        assert confirmed.resolved_at == NOW
        bucket = store.buckets[world.adult_bucket.id]
        assert (bucket.seats_on_hold, bucket.seats_issued) == (0, 4)
        job_publisher.publish_hold_confirmed.assert_awaited_once()
        kwargs = job_publisher.publish_hold_confirmed.await_args.kwargs
        assert kwargs['hold'].id == hold.id
        assert kwargs['flight_group'].id == world.flight_group.id

    async def test_confirming_twice_is_a_noop(
        self,
        confirm: Callable,
        world: SeededWorld,
        store: InMemoryStore,
        job_publisher: AsyncMock,
    ) -> None:
        hold = seed_hold(store, world.adult_bucket, quantity=4, held_by=world.sub_agent.id)
        await confirm().execute(identity=world.manager_identity, hold_id=hold.id)

        again = await confirm().execute(identity=world.manager_identity, hold_id=hold.id)

        assert again.status == HoldStatus.CONFIRMED
        assert store.buckets[world.adult_bucket.id].seats_issued == 4
        job_publisher.publish_hold_confirmed.assert_awaited_once()

    async def test_released_hold_is_gone(
        self, confirm: Callable, release: Callable, world: SeededWorld, store: InMemoryStore
    ) -> None:
        hold = seed_hold(store, world.adult_bucket, quantity=4, held_by=world.sub_agent.id)
        await release().execute(identity=world.sub_agent_identity, hold_id=hold.id)

        with pytest.raises(HoldNotFoundError):
            await confirm().execute(identity=world.manager_identity, hold_id=hold.id)
        assert store.buckets[world.adult_bucket.id].seats_issued == 0

    async def test_hold_past_ttl_is_expired_and_reported_missing(
        self,
        confirm: Callable,
        world: SeededWorld,
        store: InMemoryStore,
        clock: FixedClock,
        job_publisher: AsyncMock,
    ) -> None:
        hold = seed_hold(store, world.adult_bucket, quantity=4, held_by=world.sub_agent.id)
        clock.advance(minutes=30)

        with pytest.raises(HoldNotFoundError):
            await confirm().execute(identity=world.manager_identity, hold_id=hold.id)

        assert store.holds[hold.id].status == HoldStatus.EXPIRED
        bucket = store.buckets[world.adult_bucket.id]
        assert (bucket.seats_on_hold, bucket.seats_issued) == (0, 0)
        job_publisher.publish_hold_confirmed.assert_not_awaited()

    async def test_closed_group_still_confirms(
        self, confirm: Callable, world: SeededWorld, store: InMemoryStore
    ) -> None:
        hold = seed_hold(store, world.adult_bucket, quantity=2, held_by=world.sub_agent.id)
        store.flight_groups[world.flight_group.id].status = FlightGroupStatus.CLOSED

        confirmed = await confirm().execute(identity=world.manager_identity, hold_id=hold.id)

        assert confirmed.status == HoldStatus.CONFIRMED

    async def test_cancelled_group_rejects_confirmation(
        self, confirm: Callable, world: SeededWorld, store: InMemoryStore
    ) -> None:
        hold = seed_hold(store, world.adult_bucket, quantity=2, held_by=world.sub_agent.id)
        store.flight_groups[world.flight_group.id].status = FlightGroupStatus.CANCELLED

        with pytest.raises(GroupNotOnSaleError):
            await confirm().execute(identity=world.manager_identity, hold_id=hold.id)
        assert store.holds[hold.id].status == HoldStatus.HELD

    async def test_sub_agent_cannot_confirm(
        self, confirm: Callable, world: SeededWorld, store: InMemoryStore
    ) -> None:
        hold = seed_hold(store, world.adult_bucket, quantity=2, held_by=world.sub_agent.id)

        with pytest.raises(ForbiddenError):
            await confirm().execute(identity=world.sub_agent_identity, hold_id=hold.id)

    async def test_unknown_hold(self, confirm: Callable, world: SeededWorld) -> None:
        with pytest.raises(HoldNotFoundError):
            await confirm().execute(identity=world.manager_identity, hold_id=uuid.uuid7())


class TestReleaseHold:
    async def test_seats_return_to_the_pool(
        self, release: Callable, world: SeededWorld, store: InMemoryStore
    ) -> None:
        hold = seed_hold(store, world.adult_bucket, quantity=4, held_by=world.sub_agent.id)

        released = await release().execute(identity=world.sub_agent_identity, hold_id=hold.id)

        assert released.status == HoldStatus.RELEASED
        assert store.buckets[world.adult_bucket.id].seats_on_hold == 0

    async def test_releasing_twice_is_a_noop(
        self, release: Callable, world: SeededWorld, store: InMemoryStore
    ) -> None:
        hold = seed_hold(store, world.adult_bucket, quantity=4, held_by=world.sub_agent.id)
        await release().execute(identity=world.sub_agent_identity, hold_id=hold.id)
        commits = store.commits

        again = await release().execute(identity=world.sub_agent_identity, hold_id=hold.id)

        assert again.status == HoldStatus.RELEASED
        assert store.commits == commits
        assert store.buckets[world.adult_bucket.id].seats_on_hold == 0

    async def test_confirmed_hold_keeps_its_seats(
        self, confirm: Callable, release: Callable, world: SeededWorld, store: InMemoryStore
    ) -> None:
        hold = seed_hold(store, world.adult_bucket, quantity=4, held_by=world.sub_agent.id)
        await confirm().execute(identity=world.manager_identity, hold_id=hold.id)

        result = await release().execute(identity=world.manager_identity, hold_id=hold.id)

        assert result.status == HoldStatus.CONFIRMED
        assert store.buckets[world.adult_bucket.id].seats_issued == 4

    async def test_unknown_hold(self, release: Callable, world: SeededWorld) -> None:
        with pytest.raises(HoldNotFoundError):
            await release().execute(identity=world.sub_agent_identity, hold_id=uuid.uuid7())

    async def test_other_agency_is_forbidden(
        self, release: Callable, world: SeededWorld, store: InMemoryStore
    ) -> None:
        hold = seed_hold(store, world.adult_bucket, quantity=1, held_by=world.sub_agent.id)

        with pytest.raises(ForbiddenError):
            await release().execute(identity=make_identity(UserRole.MANAGER), hold_id=hold.id)


class TestTenSeatLifecycle:
    async def test_hold_confirm_release_walkthrough(
        self,
        uow_factory: Callable[[], InMemoryUnitOfWork],
        confirm: Callable,
        release: Callable,
        clock: FixedClock,
        world: SeededWorld,
        store: InMemoryStore,
    ) -> None:
        reserve = ReserveSeatsUseCase(uow=uow_factory(), hold_ttl=TTL, clock=clock)
        request = dict(
            identity=world.sub_agent_identity,
            flight_group_id=world.flight_group.id,
            pax_type=PaxType.ADT,
        )

        first = await reserve.execute(**request, quantity=4)
        second = await reserve.execute(**request, quantity=6)
        await confirm().execute(identity=world.manager_identity, hold_id=first.id)
        await release().execute(identity=world.sub_agent_identity, hold_id=second.id)

        bucket = store.buckets[world.adult_bucket.id]
        assert (bucket.seats_on_hold, bucket.seats_issued, bucket.available_seats) == (0, 4, 6)


class TestExpireStaleHolds:
    async def test_sweeps_every_bucket_once(
        self, expire: Callable, world: SeededWorld, store: InMemoryStore, clock: FixedClock
    ) -> None:
        child_bucket = make_bucket(world.flight_group, pax_type=PaxType.CHD, total_seats=5)
        store.add(child_bucket)
        seed_hold(store, world.adult_bucket, quantity=3, held_by=world.sub_agent.id, ttl=TTL)
        seed_hold(store, child_bucket, quantity=2, held_by=world.sub_agent.id, ttl=TTL)
        fresh = seed_hold(
            store, world.adult_bucket, quantity=1, held_by=world.sub_agent.id, ttl=TTL * 4
        )
        clock.advance(minutes=31)

        assert await expire().execute() == 2
        assert await expire().execute() == 0

        assert store.buckets[world.adult_bucket.id].seats_on_hold == 1
        assert store.buckets[child_bucket.id].seats_on_hold == 0
        assert store.holds[fresh.id].status == HoldStatus.HELD

    async def test_explicit_now_overrides_clock(
        self, expire: Callable, world: SeededWorld, store: InMemoryStore
    ) -> None:
        hold = seed_hold(store, world.adult_bucket, quantity=3, held_by=world.sub_agent.id, ttl=TTL)

        assert await expire().execute() == 0
        assert await expire().execute(now=NOW + TTL) == 1
        assert store.holds[hold.id].status == HoldStatus.EXPIRED

    async def test_sweep_pages_past_one_batch(
        self,
        expire: Callable,
        world: SeededWorld,
        store: InMemoryStore,
        clock: FixedClock,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        monkeypatch.setattr(ExpireStaleHoldsUseCase, 'BATCH_SIZE', 1)
        child_bucket = make_bucket(world.flight_group, pax_type=PaxType.CHD, total_seats=5)
        infant_bucket = make_bucket(world.flight_group, pax_type=PaxType.INF, total_seats=2)
        store.add(child_bucket)
        store.add(infant_bucket)
        seed_hold(store, world.adult_bucket, quantity=3, held_by=world.sub_agent.id, ttl=TTL)
        seed_hold(store, child_bucket, quantity=2, held_by=world.sub_agent.id, ttl=TTL)
        seed_hold(store, infant_bucket, quantity=1, held_by=world.sub_agent.id, ttl=TTL)
        clock.advance(minutes=31)

        assert await expire().execute() == 3
        assert await expire().execute() == 0

        for bucket in (world.adult_bucket, child_bucket, infant_bucket):
            assert store.buckets[bucket.id].seats_on_hold == 0

    async def test_busy_bucket_is_skipped_without_stalling_the_sweep(
        self,
        expire: Callable,
        world: SeededWorld,
        store: InMemoryStore,
        clock: FixedClock,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        monkeypatch.setattr(ExpireStaleHoldsUseCase, 'BATCH_SIZE', 1)
        child_bucket = make_bucket(world.flight_group, pax_type=PaxType.CHD, total_seats=5)
        store.add(child_bucket)
        seed_hold(store, world.adult_bucket, quantity=3, held_by=world.sub_agent.id, ttl=TTL)
        seed_hold(store, child_bucket, quantity=2, held_by=world.sub_agent.id, ttl=TTL)
        busy_bucket_id = min(world.adult_bucket.id, child_bucket.id)
        free_bucket_id = max(world.adult_bucket.id, child_bucket.id)
        expire_bucket = ExpireStaleHoldsUseCase._expire_bucket

        async def locked_once(
            self: ExpireStaleHoldsUseCase, *, bucket_id: UUID, now: datetime
        ) -> int:
            if bucket_id == busy_bucket_id:
                raise LockTimeoutError()
            return await expire_bucket(self, bucket_id=bucket_id, now=now)

        monkeypatch.setattr(ExpireStaleHoldsUseCase, '_expire_bucket', locked_once)
        clock.advance(minutes=31)

        assert await expire().execute() == 1
        assert store.buckets[busy_bucket_id].seats_on_hold > 0
        assert store.buckets[free_bucket_id].seats_on_hold == 0

        monkeypatch.setattr(ExpireStaleHoldsUseCase, '_expire_bucket', expire_bucket)
        assert await expire().execute() == 1
        assert store.buckets[busy_bucket_id].seats_on_hold == 0
