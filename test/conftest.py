"""
Test Configuration and Fixtures

This module provides:
- Environment setup that must run before application modules read settings
- In-memory unit of work fixtures (no PostgreSQL / Redis needed)
- A seeded agency with a manager, a sub-agent and a published flight group
"""

# =============================================================================
# CRITICAL: Environment setup MUST happen before any other imports
# Settings and the loguru sinks are built at import time
# =============================================================================
import os
from pathlib import Path


def _early_setup_test_environment() -> None:
    test_log_dir = Path(__file__).parent / 'test_log'
    test_log_dir.mkdir(exist_ok=True)
    os.environ['TEST_LOG_DIR'] = str(test_log_dir)

    os.environ.setdefault('SECRET_KEY', 'unit-test-secret-key-with-enough-length')
    os.environ.setdefault('ENABLE_BACKGROUND_JOBS', 'false')
    # retries sleep between attempts; keep them instant
    os.environ.setdefault('DB_RETRY_BACKOFF_SECONDS', '0')


_early_setup_test_environment()

from collections.abc import Callable  # noqa: E402

import pytest  # noqa: E402

from src.service.group_ticketing.domain.enum.user_role import UserRole  # noqa: E402
from test.service.group_ticketing.builders import (  # noqa: E402
    FixedClock,
    SeededWorld,
    make_agency,
    make_bucket,
    make_flight_group,
    make_user,
)
from test.service.group_ticketing.in_memory_unit_of_work import (  # noqa: E402
    InMemoryStore,
    InMemoryUnitOfWork,
)


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    # everything here runs on in-memory fakes
    for item in items:
        item.add_marker(pytest.mark.unit)


@pytest.fixture
def anyio_backend() -> str:
    return 'asyncio'


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def uow_factory(store: InMemoryStore) -> Callable[[], InMemoryUnitOfWork]:
    return lambda: InMemoryUnitOfWork(store)


@pytest.fixture
def uow(uow_factory: Callable[[], InMemoryUnitOfWork]) -> InMemoryUnitOfWork:
    return uow_factory()


@pytest.fixture
def world(store: InMemoryStore) -> SeededWorld:
    """One agency selling a PUBLISHED group with a 10-seat ADT bucket."""
    agency = make_agency()
    manager = make_user(agency, username='manager', role=UserRole.MANAGER)
    sub_agent = make_user(agency, username='counter01', role=UserRole.SUB_AGENT)
    flight_group = make_flight_group(agency_id=agency.id, created_by=manager.id)
    adult_bucket = make_bucket(flight_group, total_seats=10)
    store.add(agency, manager, sub_agent, flight_group, adult_bucket)
    return SeededWorld(
        agency=agency,
        manager=manager,
        sub_agent=sub_agent,
        flight_group=flight_group,
        adult_bucket=adult_bucket,
    )
