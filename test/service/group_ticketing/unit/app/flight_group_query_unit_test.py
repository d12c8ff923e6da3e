from datetime import timedelta
from decimal import Decimal

import pytest
import uuid_utils.compat as uuid

from src.platform.exception.exceptions import (
    CapacityExceededError,
    DomainError,
    ForbiddenError,
    NotFoundError,
)
from src.service.group_ticketing.app.dto.flight_group_filter import FlightGroupFilter
from src.service.group_ticketing.app.query.get_flight_group_use_case import GetFlightGroupUseCase
from src.service.group_ticketing.app.query.list_flight_groups_use_case import (
    MAX_PAGE_SIZE,
    ListFlightGroupsUseCase,
)
from src.service.group_ticketing.app.query.quote_fare_use_case import QuoteFareUseCase
from src.service.group_ticketing.domain.entity.flight_group_entity import FlightGroup
from src.service.group_ticketing.domain.entity.seat_bucket_entity import SeatBucket
from src.service.group_ticketing.domain.enum.flight_group_status import FlightGroupStatus
from src.service.group_ticketing.domain.enum.pax_type import PaxType
from src.service.group_ticketing.domain.enum.user_role import UserRole
from test.service.group_ticketing.builders import (
    NOW,
    SALES_START,
    FixedClock,
    SeededWorld,
    make_agency,
    make_bucket,
    make_flight_group,
    make_identity,
    seed_hold,
)
from test.service.group_ticketing.in_memory_unit_of_work import InMemoryStore, InMemoryUnitOfWork


@pytest.fixture
def draft_group(world: SeededWorld, store: InMemoryStore) -> FlightGroup:
    draft = make_flight_group(
        agency_id=world.agency.id,
        created_by=world.manager.id,
        status=FlightGroupStatus.DRAFT,
        destination='NRT',
    )
    store.add(draft)
    return draft


@pytest.fixture
def foreign_group(store: InMemoryStore) -> FlightGroup:
    agency = make_agency('OTHERCO')
    group = make_flight_group(agency_id=agency.id, created_by=uuid.uuid7())
    store.add(agency, group)
    return group


class TestListFlightGroups:
    @pytest.fixture
    def use_case(self, uow: InMemoryUnitOfWork, clock: FixedClock) -> ListFlightGroupsUseCase:
        return ListFlightGroupsUseCase(uow=uow, clock=clock)

    async def test_manager_sees_every_status_of_own_agency(
        self,
        use_case: ListFlightGroupsUseCase,
        world: SeededWorld,
        draft_group: FlightGroup,
        foreign_group: FlightGroup,
    ) -> None:
        details = await use_case.list_groups(
            identity=world.manager_identity, filters=FlightGroupFilter()
        )

        assert {d.flight_group.id for d in details} == {world.flight_group.id, draft_group.id}
        published = next(d for d in details if d.flight_group.id == world.flight_group.id)
        assert [b.pax_type for b in published.buckets] == [PaxType.ADT]

    async def test_sub_agent_only_sees_groups_on_sale(
        self,
        use_case: ListFlightGroupsUseCase,
        world: SeededWorld,
        draft_group: FlightGroup,
        foreign_group: FlightGroup,
    ) -> None:
        details = await use_case.list_groups(
            identity=world.sub_agent_identity, filters=FlightGroupFilter()
        )

        assert [d.flight_group.id for d in details] == [world.flight_group.id]

    async def test_sub_agent_asking_for_drafts_gets_nothing(
        self, use_case: ListFlightGroupsUseCase, world: SeededWorld, draft_group: FlightGroup
    ) -> None:
        details = await use_case.list_groups(
            identity=world.sub_agent_identity,
            filters=FlightGroupFilter(status=FlightGroupStatus.DRAFT),
        )

        assert details == []

    async def test_sub_agent_outside_sales_window_sees_nothing(
        self, use_case: ListFlightGroupsUseCase, world: SeededWorld, clock: FixedClock
    ) -> None:
        clock.now = SALES_START - timedelta(days=1)

        details = await use_case.list_groups(
            identity=world.sub_agent_identity, filters=FlightGroupFilter()
        )

        assert details == []

    async def test_admin_sees_every_agency(
        self,
        use_case: ListFlightGroupsUseCase,
        world: SeededWorld,
        draft_group: FlightGroup,
        foreign_group: FlightGroup,
    ) -> None:
        details = await use_case.list_groups(
            identity=world.admin_identity, filters=FlightGroupFilter(destination='lhr')
        )

        assert {d.flight_group.id for d in details} == {world.flight_group.id, foreign_group.id}

    def test_scope_pins_agency_and_clamps_paging(
        self, use_case: ListFlightGroupsUseCase, world: SeededWorld
    ) -> None:
        scoped = use_case.scope_filters(
            identity=world.manager_identity,
            filters=FlightGroupFilter(agency_id=uuid.uuid7(), limit=10_000, offset=-5),
        )

        assert scoped.agency_id == world.agency.id
        assert (scoped.limit, scoped.offset) == (MAX_PAGE_SIZE, 0)

    def test_sub_agent_scope_is_on_sale_now(
        self, use_case: ListFlightGroupsUseCase, world: SeededWorld
    ) -> None:
        scoped = use_case.scope_filters(
            identity=world.sub_agent_identity, filters=FlightGroupFilter(origin='tpe')
        )

        assert scoped.status == FlightGroupStatus.PUBLISHED
        assert scoped.on_sale_at == NOW
        assert scoped.origin == 'TPE'


class TestGetFlightGroup:
    @pytest.fixture
    def use_case(self, uow: InMemoryUnitOfWork, clock: FixedClock) -> GetFlightGroupUseCase:
        return GetFlightGroupUseCase(uow=uow, clock=clock)

    async def test_detail_carries_buckets(
        self, use_case: GetFlightGroupUseCase, world: SeededWorld
    ) -> None:
        detail = await use_case.get_by_id(
            identity=world.sub_agent_identity, flight_group_id=world.flight_group.id
        )

        assert detail.flight_group.id == world.flight_group.id
        assert [b.id for b in detail.buckets] == [world.adult_bucket.id]

    async def test_draft_is_hidden_from_sub_agent(
        self, use_case: GetFlightGroupUseCase, world: SeededWorld, draft_group: FlightGroup
    ) -> None:
        with pytest.raises(NotFoundError):
            await use_case.get_by_id(
                identity=world.sub_agent_identity, flight_group_id=draft_group.id
            )

    async def test_draft_is_visible_to_manager(
        self, use_case: GetFlightGroupUseCase, world: SeededWorld, draft_group: FlightGroup
    ) -> None:
        detail = await use_case.get_by_id(
            identity=world.manager_identity, flight_group_id=draft_group.id
        )

        assert detail.flight_group.status == FlightGroupStatus.DRAFT

    async def test_other_agency_is_forbidden(
        self, use_case: GetFlightGroupUseCase, world: SeededWorld, foreign_group: FlightGroup
    ) -> None:
        with pytest.raises(ForbiddenError):
            await use_case.get_by_id(
                identity=world.manager_identity, flight_group_id=foreign_group.id
            )

    async def test_unknown_group(self, use_case: GetFlightGroupUseCase, world: SeededWorld) -> None:
        with pytest.raises(NotFoundError):
            await use_case.get_by_id(identity=world.admin_identity, flight_group_id=uuid.uuid7())


class TestQuoteFare:
    @pytest.fixture
    def use_case(self, uow: InMemoryUnitOfWork, clock: FixedClock) -> QuoteFareUseCase:
        return QuoteFareUseCase(uow=uow, clock=clock)

    @pytest.fixture
    def child_bucket(self, world: SeededWorld, store: InMemoryStore) -> SeatBucket:
        bucket = make_bucket(
            world.flight_group,
            pax_type=PaxType.CHD,
            total_seats=4,
            base_fare='337.50',
            tax_amount='31.15',
            fee_amount='15.00',
        )
        store.add(bucket)
        return bucket

    async def test_mixed_party_is_priced_exactly(
        self, use_case: QuoteFareUseCase, world: SeededWorld, child_bucket: SeatBucket
    ) -> None:
        quote = await use_case.quote(
            identity=world.sub_agent_identity,
            flight_group_id=world.flight_group.id,
            passengers={PaxType.ADT: 2, PaxType.CHD: 1},
        )

        assert quote.currency == 'USD'
        assert quote.passenger_count == 3
        assert [line.pax_type for line in quote.lines] == [PaxType.ADT, PaxType.CHD]
        assert quote.base_total == Decimal('1237.50')
        assert quote.tax_total == Decimal('155.75')
        assert quote.fee_total == Decimal('45.00')
        assert quote.grand_total == Decimal('1438.25')

    async def test_quote_reserves_nothing(
        self, use_case: QuoteFareUseCase, world: SeededWorld, store: InMemoryStore
    ) -> None:
        await use_case.quote(
            identity=world.sub_agent_identity,
            flight_group_id=world.flight_group.id,
            passengers={PaxType.ADT: 10},
        )

        assert store.buckets[world.adult_bucket.id].seats_on_hold == 0
        assert store.holds == {}

    async def test_more_passengers_than_available(
        self, use_case: QuoteFareUseCase, world: SeededWorld, store: InMemoryStore
    ) -> None:
        seed_hold(store, world.adult_bucket, quantity=8, held_by=world.sub_agent.id)

        with pytest.raises(CapacityExceededError):
            await use_case.quote(
                identity=world.sub_agent_identity,
                flight_group_id=world.flight_group.id,
                passengers={PaxType.ADT: 3},
            )

    async def test_missing_bucket(self, use_case: QuoteFareUseCase, world: SeededWorld) -> None:
        with pytest.raises(NotFoundError):
            await use_case.quote(
                identity=world.sub_agent_identity,
                flight_group_id=world.flight_group.id,
                passengers={PaxType.ADT: 1, PaxType.INF: 1},
            )

    async def test_unrequested_pax_types_need_no_bucket(
        self, use_case: QuoteFareUseCase, world: SeededWorld
    ) -> None:
        quote = await use_case.quote(
            identity=world.sub_agent_identity,
            flight_group_id=world.flight_group.id,
            passengers={PaxType.ADT: 1, PaxType.INF: 0},
        )

        assert quote.grand_total == Decimal('527.30')

    @pytest.mark.parametrize('passengers', [{}, {PaxType.ADT: 0}, {PaxType.ADT: -1}])
    async def test_invalid_passenger_counts(
        self, use_case: QuoteFareUseCase, world: SeededWorld, passengers: dict
    ) -> None:
        with pytest.raises(DomainError):
            await use_case.quote(
                identity=world.sub_agent_identity,
                flight_group_id=world.flight_group.id,
                passengers=passengers,
            )

    async def test_mixed_currencies_cannot_be_quoted(
        self, use_case: QuoteFareUseCase, world: SeededWorld, store: InMemoryStore
    ) -> None:
        store.add(make_bucket(world.flight_group, pax_type=PaxType.CHD, currency='EUR'))

        with pytest.raises(DomainError):
            await use_case.quote(
                identity=world.sub_agent_identity,
                flight_group_id=world.flight_group.id,
                passengers={PaxType.ADT: 1, PaxType.CHD: 1},
            )

    async def test_other_agency_cannot_quote(
        self, use_case: QuoteFareUseCase, world: SeededWorld
    ) -> None:
        with pytest.raises(ForbiddenError):
            await use_case.quote(
                identity=make_identity(UserRole.SUB_AGENT),
                flight_group_id=world.flight_group.id,
                passengers={PaxType.ADT: 1},
            )
