from datetime import timedelta

import pytest
import uuid_utils.compat as uuid

from src.platform.exception.exceptions import (
    CapacityExceededError,
    ConflictError,
    HoldNotFoundError,
)
from src.service.group_ticketing.domain import inventory_ledger
from src.service.group_ticketing.domain.entity.seat_bucket_entity import SeatBucket
from src.service.group_ticketing.domain.entity.seat_hold_entity import SeatHold
from src.service.group_ticketing.domain.enum.hold_status import HoldStatus
from test.service.group_ticketing.builders import NOW, make_bucket, make_flight_group


TTL = timedelta(minutes=30)


@pytest.fixture
def bucket() -> SeatBucket:
    group = make_flight_group(agency_id=uuid.uuid7(), created_by=uuid.uuid7())
    return make_bucket(group, total_seats=10)


def _reserve(bucket: SeatBucket, quantity: int) -> SeatHold:
    return inventory_ledger.reserve(
        bucket, quantity=quantity, held_by=uuid.uuid7(), now=NOW, ttl=TTL
    )


class TestReserve:
    def test_creates_held_hold_with_ttl(self, bucket: SeatBucket) -> None:
        hold = _reserve(bucket, 4)

        assert hold.status == HoldStatus.HELD
        assert hold.quantity == 4
        assert hold.seat_bucket_id == bucket.id
        assert hold.flight_group_id == bucket.flight_group_id
        assert hold.expires_at == NOW + TTL
        assert bucket.seats_on_hold == 4

    def test_over_capacity_creates_nothing(self, bucket: SeatBucket) -> None:
        _reserve(bucket, 8)

        with pytest.raises(CapacityExceededError):
            _reserve(bucket, 3)
        assert bucket.seats_on_hold == 8


class TestConfirm:
    def test_moves_seats_to_issued(self, bucket: SeatBucket) -> None:
        hold = _reserve(bucket, 4)

        assert inventory_ledger.confirm(bucket, hold, now=NOW) is True
        assert hold.status == HoldStatus.CONFIRMED
        assert hold.resolved_at == NOW
        assert (bucket.seats_on_hold, bucket.seats_issued) == (0, 4)

    def test_confirming_twice_is_a_noop(self, bucket: SeatBucket) -> None:
        hold = _reserve(bucket, 4)
        inventory_ledger.confirm(bucket, hold, now=NOW)

        assert inventory_ledger.confirm(bucket, hold, now=NOW) is False
        assert (bucket.seats_on_hold, bucket.seats_issued) == (0, 4)

    def test_released_hold_cannot_be_confirmed(self, bucket: SeatBucket) -> None:
        hold = _reserve(bucket, 4)
        inventory_ledger.release(bucket, hold, now=NOW)

        with pytest.raises(HoldNotFoundError):
            inventory_ledger.confirm(bucket, hold, now=NOW)
        assert (bucket.seats_on_hold, bucket.seats_issued) == (0, 0)

    def test_hold_past_ttl_cannot_be_confirmed(self, bucket: SeatBucket) -> None:
        hold = _reserve(bucket, 4)

        with pytest.raises(HoldNotFoundError):
            inventory_ledger.confirm(bucket, hold, now=NOW + TTL)
        assert bucket.seats_issued == 0

    def test_hold_of_another_bucket_is_rejected(self, bucket: SeatBucket) -> None:
        other = make_bucket(
            make_flight_group(agency_id=uuid.uuid7(), created_by=uuid.uuid7()), total_seats=5
        )
        hold = _reserve(other, 1)

        with pytest.raises(ConflictError):
            inventory_ledger.confirm(bucket, hold, now=NOW)


class TestRelease:
    def test_returns_seats_once(self, bucket: SeatBucket) -> None:
        hold = _reserve(bucket, 4)

        assert inventory_ledger.release(bucket, hold, now=NOW) == 4
        assert inventory_ledger.release(bucket, hold, now=NOW) == 0
        assert hold.status == HoldStatus.RELEASED
        assert bucket.seats_on_hold == 0

    def test_confirmed_hold_is_left_alone(self, bucket: SeatBucket) -> None:
        hold = _reserve(bucket, 4)
        inventory_ledger.confirm(bucket, hold, now=NOW)

        assert inventory_ledger.release(bucket, hold, now=NOW) == 0
        assert hold.status == HoldStatus.CONFIRMED
        assert bucket.seats_issued == 4


class TestExpire:
    def test_only_holds_past_ttl_expire(self, bucket: SeatBucket) -> None:
        old = _reserve(bucket, 3)
        fresh = inventory_ledger.reserve(
            bucket, quantity=2, held_by=uuid.uuid7(), now=NOW + timedelta(minutes=20), ttl=TTL
        )

        expired = inventory_ledger.expire(bucket, [old, fresh], now=NOW + TTL)

        assert expired == [old]
        assert old.status == HoldStatus.EXPIRED
        assert fresh.status == HoldStatus.HELD
        assert bucket.seats_on_hold == 2

    def test_expiring_twice_changes_nothing(self, bucket: SeatBucket) -> None:
        hold = _reserve(bucket, 3)
        later = NOW + TTL + timedelta(seconds=1)

        assert inventory_ledger.expire(bucket, [hold], now=later) == [hold]
        assert inventory_ledger.expire(bucket, [hold], now=later) == []
        assert bucket.seats_on_hold == 0
