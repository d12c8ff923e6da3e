#!/usr/bin/env python3
"""
Database Seed Script
Populate a demo tenant for local development

Features:
1. Create Agencies - DEMO (root) and DEMO-NORTH (child)
2. Create Users - admin, manager and counter01 in DEMO
3. Create Flight Group - TPE-LHR group on sale now with ADT and CHD buckets

Notes:
- Running it twice is a no-op: the DEMO agency code is checked first
- Tables are created when missing; production runs `migrate` instead

    PYTHONPATH=$PWD uv run python script/seed_data.py
"""

from datetime import timedelta
from decimal import Decimal

import anyio

from src.platform.config.di import container
from src.platform.database.db_setting import create_db_and_tables, dispose_engine
from src.platform.logging.loguru_io import Logger
from src.service.group_ticketing.domain.clock import utc_now
from src.service.group_ticketing.domain.entity.agency_entity import Agency
from src.service.group_ticketing.domain.entity.flight_group_entity import FlightGroup
from src.service.group_ticketing.domain.entity.seat_bucket_entity import SeatBucket
from src.service.group_ticketing.domain.entity.user_entity import User
from src.service.group_ticketing.domain.enum.flight_group_status import FlightGroupStatus
from src.service.group_ticketing.domain.enum.pax_type import PaxType
from src.service.group_ticketing.domain.enum.user_role import UserRole
import src.service.group_ticketing.driven_adapter.model  # noqa: F401  registers every table


DEFAULT_PASSWORD = 'P@ssw0rd'
DEMO_AGENCY_CODE = 'DEMO'

DEMO_USERS = [
    ('admin', UserRole.ADMIN),
    ('manager', UserRole.MANAGER),
    ('counter01', UserRole.SUB_AGENT),
]


def _build_flight_group(
    *, agency: Agency, created_by: User
) -> tuple[FlightGroup, list[SeatBucket]]:
    now = utc_now()
    departure = (now + timedelta(days=45)).replace(hour=15, minute=40, second=0, microsecond=0)
    flight_group = FlightGroup.create(
        agency_id=agency.id,
        created_by=created_by.id,
        carrier_code='BR',
        flight_number='67',
        origin='TPE',
        destination='LHR',
        departure_time_utc=departure,
        arrival_time_utc=departure + timedelta(hours=14, minutes=30),
        departure_time_local=(departure + timedelta(hours=8)).replace(tzinfo=None),
        arrival_time_local=(departure + timedelta(hours=14, minutes=30)).replace(tzinfo=None),
        sales_start=now - timedelta(days=1),
        sales_end=departure - timedelta(days=7),
        baggage_rule='2PC 23KG',
    )
    buckets = [
        SeatBucket.create(
            flight_group_id=flight_group.id,
            pax_type=PaxType.ADT,
            total_seats=30,
            base_fare=Decimal('450.00'),
            tax_amount=Decimal('62.30'),
            fee_amount=Decimal('15.00'),
            currency='USD',
        ),
        SeatBucket.create(
            flight_group_id=flight_group.id,
            pax_type=PaxType.CHD,
            total_seats=10,
            base_fare=Decimal('337.50'),
            tax_amount=Decimal('31.15'),
            fee_amount=Decimal('15.00'),
            currency='USD',
        ),
    ]
    flight_group.transition_to(FlightGroupStatus.PUBLISHED, buckets=buckets)
    return flight_group, buckets


async def seed() -> None:
    password_hasher = container.password_hasher()

    async with container.unit_of_work() as uow:
        if await uow.agency_repo.get_by_code(code=DEMO_AGENCY_CODE):
            Logger.base.info(f'⏭️ [SEED] Agency {DEMO_AGENCY_CODE} exists, nothing to do')
            return

        agency = await uow.agency_repo.create(
            agency=Agency.create(name='Demo Travel', code=DEMO_AGENCY_CODE, country='TW')
        )
        await uow.agency_repo.create(
            agency=Agency.create(
                name='Demo Travel North', code='DEMO-NORTH', parent_agency_id=agency.id
            )
        )
        Logger.base.info(f'🏢 [SEED] Created agency {agency.code} ({agency.id})')

        users = []
        for username, role in DEMO_USERS:
            user = await uow.user_repo.create(
                user=User.create(
                    agency_id=agency.id,
                    username=username,
                    plain_password=DEFAULT_PASSWORD,
                    role=role,
                    password_hasher=password_hasher,
                )
            )
            users.append(user)
            Logger.base.info(f'👤 [SEED] Created {role} {username}')

        flight_group, buckets = _build_flight_group(agency=agency, created_by=users[1])
        await uow.flight_group_repo.create(flight_group=flight_group)
        for bucket in buckets:
            await uow.seat_bucket_repo.create(bucket=bucket)
        Logger.base.info(
            f'✈️ [SEED] Published {flight_group.carrier_code}{flight_group.flight_number} '
            f'{flight_group.origin}-{flight_group.destination} ({flight_group.id})'
        )

        await uow.commit()

    Logger.base.info(f'🔑 [SEED] Agency code {DEMO_AGENCY_CODE}, password {DEFAULT_PASSWORD}')


async def _main() -> None:
    try:
        await create_db_and_tables()
        await seed()
    finally:
        await dispose_engine()


if __name__ == '__main__':
    anyio.run(_main)
