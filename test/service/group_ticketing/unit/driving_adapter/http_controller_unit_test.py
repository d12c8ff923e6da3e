"""
HTTP layer tests

The real routers, auth dependencies and exception handlers run against the
in-memory unit of work: the DI container is wired as in production and its
unit_of_work / password_hasher / job_publisher providers are overridden.
"""

from collections.abc import AsyncIterator, Iterator
from contextlib import asynccontextmanager
from datetime import timedelta
from unittest.mock import AsyncMock

from dependency_injector import providers
from fastapi import FastAPI
from fastapi.testclient import TestClient
import pytest
import uuid_utils.compat as uuid

from src.platform.app_factory import create_app
from src.platform.config.core_setting import settings
from src.platform.config.di import container
from src.platform.config.wire_modules import WIRE_MODULES
from src.service.group_ticketing.app.interface.i_job_publisher import IJobPublisher
from src.service.group_ticketing.domain.clock import utc_now
from src.service.group_ticketing.domain.entity.user_entity import User
from src.service.group_ticketing.domain.enum.flight_group_status import FlightGroupStatus
from src.service.group_ticketing.domain.enum.hold_status import HoldStatus
from src.service.group_ticketing.driving_adapter.http_controller.auth.jwt_auth import JwtAuth
from test.service.group_ticketing.builders import (
    DEFAULT_PASSWORD,
    PlainPasswordHasher,
    SeededWorld,
    make_flight_group,
    seed_hold,
)
from test.service.group_ticketing.in_memory_unit_of_work import InMemoryStore, InMemoryUnitOfWork


@asynccontextmanager
async def _no_lifespan(_app: FastAPI) -> AsyncIterator[None]:
    yield


@pytest.fixture
def job_publisher() -> AsyncMock:
    return AsyncMock(spec=IJobPublisher)


@pytest.fixture
def client(
    store: InMemoryStore, world: SeededWorld, job_publisher: AsyncMock
) -> Iterator[TestClient]:
    # the routes read the wall clock; keep the seeded group on sale around it
    group = store.flight_groups[world.flight_group.id]
    group.sales_start = utc_now() - timedelta(days=1)
    group.sales_end = utc_now() + timedelta(days=1)

    container.unit_of_work.override(providers.Factory(InMemoryUnitOfWork, store=store))
    container.password_hasher.override(providers.Object(PlainPasswordHasher()))
    container.job_publisher.override(providers.Object(job_publisher))
    container.wire(modules=WIRE_MODULES)
    try:
        yield TestClient(create_app(lifespan=_no_lifespan), base_url='https://testserver')
    finally:
        container.unwire()
        container.reset_override()


def _auth(user: User) -> dict[str, str]:
    return {'Authorization': f'Bearer {JwtAuth().create_jwt_token(user)}'}


def test_health(client: TestClient) -> None:
    response = client.get('/health')

    assert response.status_code == 200
    assert response.json()['status'] == 'healthy'
    assert response.json()['job_queue'] == 'down'


class TestAuthentication:
    def test_login_sets_cookie_and_returns_token(
        self, client: TestClient, world: SeededWorld
    ) -> None:
        response = client.post(
            '/api/user/login',
            json={'agency_code': 'skytours', 'username': 'manager', 'password': DEFAULT_PASSWORD},
        )

        assert response.status_code == 200
        body = response.json()
        assert body['token_type'] == 'bearer'
        assert body['user']['role'] == 'MANAGER'
        assert settings.AUTH_COOKIE_NAME in response.cookies

        me = client.get('/api/user/me')
        assert me.status_code == 200
        assert me.json()['agency_id'] == str(world.agency.id)

    def test_bad_credentials(self, client: TestClient, world: SeededWorld) -> None:
        response = client.post(
            '/api/user/login',
            json={'agency_code': 'SKYTOURS', 'username': 'manager', 'password': 'not-it'},
        )

        assert response.status_code == 400
        assert response.json() == {'detail': 'LOGIN_BAD_CREDENTIALS'}

    def test_missing_token(self, client: TestClient) -> None:
        assert client.get('/api/groups').status_code == 401

    def test_garbage_token(self, client: TestClient) -> None:
        response = client.get('/api/groups', headers={'Authorization': 'Bearer nope'})

        assert response.status_code == 401
        assert response.json() == {'detail': 'Invalid token'}

    def test_manager_cannot_run_the_expiry_sweep(
        self, client: TestClient, world: SeededWorld
    ) -> None:
        response = client.post('/api/holds/expire', headers=_auth(world.manager))

        assert response.status_code == 403


class TestHoldEndpoints:
    def _hold_url(self, world: SeededWorld) -> str:
        return f'/api/groups/{world.flight_group.id}/seat-buckets/ADT/hold'

    def test_hold_response_uses_camel_case(self, client: TestClient, world: SeededWorld) -> None:
        response = client.post(
            self._hold_url(world), json={'quantity': 4}, headers=_auth(world.sub_agent)
        )

        assert response.status_code == 201
        body = response.json()
        assert set(body) == {
            'holdId',
            'flightGroupId',
            'seatBucketId',
            'quantity',
            'status',
            'expiresAt',
            'resolvedAt',
        }
        assert body['status'] == HoldStatus.HELD
        assert body['seatBucketId'] == str(world.adult_bucket.id)

    def test_over_capacity_is_conflict(self, client: TestClient, world: SeededWorld) -> None:
        response = client.post(
            self._hold_url(world), json={'quantity': 11}, headers=_auth(world.sub_agent)
        )

        assert response.status_code == 409

    def test_non_positive_quantity_is_bad_request(
        self, client: TestClient, world: SeededWorld
    ) -> None:
        response = client.post(
            self._hold_url(world), json={'quantity': 0}, headers=_auth(world.sub_agent)
        )

        assert response.status_code == 400

    def test_sub_agent_cannot_confirm(
        self, client: TestClient, world: SeededWorld, store: InMemoryStore
    ) -> None:
        hold = seed_hold(
            store, world.adult_bucket, quantity=2, held_by=world.sub_agent.id, now=utc_now()
        )

        response = client.post(f'/api/holds/{hold.id}/confirm', headers=_auth(world.sub_agent))

        assert response.status_code == 403
        assert store.holds[hold.id].status == HoldStatus.HELD

    def test_manager_confirms(
        self,
        client: TestClient,
        world: SeededWorld,
        store: InMemoryStore,
        job_publisher: AsyncMock,
    ) -> None:
        hold = seed_hold(
            store, world.adult_bucket, quantity=2, held_by=world.sub_agent.id, now=utc_now()
        )

        response = client.post(f'/api/holds/{hold.id}/confirm', headers=_auth(world.manager))

        assert response.status_code == 200
        assert response.json()['status'] == HoldStatus.CONFIRMED
        assert store.buckets[world.adult_bucket.id].seats_issued == 2
        job_publisher.publish_hold_confirmed.assert_awaited_once()

    def test_unknown_hold_is_not_found(self, client: TestClient, world: SeededWorld) -> None:
        response = client.post(
            f'/api/holds/{uuid.uuid7()}/release', headers=_auth(world.sub_agent)
        )

        assert response.status_code == 404


class TestFlightGroupEndpoints:
    def test_quote_amounts_are_decimal_strings(
        self, client: TestClient, world: SeededWorld
    ) -> None:
        response = client.post(
            f'/api/groups/{world.flight_group.id}/quote',
            json={'ADT': 2},
            headers=_auth(world.sub_agent),
        )

        assert response.status_code == 200
        body = response.json()
        assert body['grand_total'] == '1054.60'
        assert [line['pax_type'] for line in body['lines']] == ['ADT']

    def test_sub_agent_does_not_see_drafts(
        self, client: TestClient, world: SeededWorld, store: InMemoryStore
    ) -> None:
        draft = make_flight_group(
            agency_id=world.agency.id, created_by=world.manager.id, status=FlightGroupStatus.DRAFT
        )
        store.add(draft)

        response = client.get(f'/api/groups/{draft.id}', headers=_auth(world.sub_agent))

        assert response.status_code == 404

    def test_publish_backwards_is_conflict(self, client: TestClient, world: SeededWorld) -> None:
        response = client.patch(
            f'/api/groups/{world.flight_group.id}/status',
            json={'status': 'DRAFT'},
            headers=_auth(world.manager),
        )

        assert response.status_code == 409

    def test_list_returns_buckets(self, client: TestClient, world: SeededWorld) -> None:
        response = client.get('/api/groups', headers=_auth(world.sub_agent))

        assert response.status_code == 200
        [group] = response.json()
        assert group['id'] == str(world.flight_group.id)
        assert group['seat_buckets'][0]['available_seats'] == 10
