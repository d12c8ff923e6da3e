from unittest.mock import AsyncMock, MagicMock

import orjson
import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from src.platform.message_queue.job_constant import JobQueues, JobTypes
from src.platform.message_queue.job_queue import queue_key
from src.platform.state.redis_client import RedisClient
from src.service.group_ticketing.domain.entity.seat_hold_entity import SeatHold
from src.service.group_ticketing.driven_adapter.message_queue.redis_job_publisher_impl import (
    RedisJobPublisherImpl,
)
from test.service.group_ticketing.builders import SeededWorld, seed_hold
from test.service.group_ticketing.in_memory_unit_of_work import InMemoryStore


@pytest.fixture
def client() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def publisher(client: AsyncMock) -> RedisJobPublisherImpl:
    redis_client = MagicMock(spec=RedisClient)
    redis_client.get_client.return_value = client
    return RedisJobPublisherImpl(redis_client=redis_client)


@pytest.fixture
def hold(world: SeededWorld, store: InMemoryStore) -> SeatHold:
    return seed_hold(store, world.adult_bucket, quantity=4, held_by=world.sub_agent.id)


class TestRedisJobPublisher:
    async def test_confirmed_hold_goes_to_pnr_sync_and_email(
        self,
        publisher: RedisJobPublisherImpl,
        client: AsyncMock,
        world: SeededWorld,
        hold: SeatHold,
    ) -> None:
        await publisher.publish_hold_confirmed(
            hold=hold, bucket=world.adult_bucket, flight_group=world.flight_group
        )

        keys = [call.args[0] for call in client.lpush.await_args_list]
        assert keys == [queue_key(JobQueues.PNR_SYNC), queue_key(JobQueues.EMAIL)]
        job = orjson.loads(client.lpush.await_args_list[0].args[1])
        assert job['type'] == JobTypes.HOLD_CONFIRMED
        assert job['payload']['hold_id'] == str(hold.id)
        assert job['payload']['flight'] == 'BR61'
        assert job['payload']['quantity'] == 4
        assert job['payload']['total_price'] == '2109.20'

    async def test_cancelled_group_goes_to_email(
        self, publisher: RedisJobPublisherImpl, client: AsyncMock, world: SeededWorld
    ) -> None:
        await publisher.publish_group_cancelled(flight_group=world.flight_group, released_holds=3)

        [call] = client.lpush.await_args_list
        job = orjson.loads(call.args[1])
        assert call.args[0] == queue_key(JobQueues.EMAIL)
        assert job['type'] == JobTypes.GROUP_CANCELLED
        assert job['payload']['released_holds'] == 3

    async def test_redis_outage_is_not_raised(
        self,
        publisher: RedisJobPublisherImpl,
        client: AsyncMock,
        world: SeededWorld,
        hold: SeatHold,
    ) -> None:
        client.lpush.side_effect = RedisConnectionError('connection refused')

        await publisher.publish_hold_confirmed(
            hold=hold, bucket=world.adult_bucket, flight_group=world.flight_group
        )

        assert client.lpush.await_count == 2

    async def test_uninitialized_client_is_not_raised(self, world: SeededWorld) -> None:
        publisher = RedisJobPublisherImpl(redis_client=RedisClient())

        await publisher.publish_group_cancelled(flight_group=world.flight_group, released_holds=0)
