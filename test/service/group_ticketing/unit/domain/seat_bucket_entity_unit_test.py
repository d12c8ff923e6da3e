"""
Unit tests for SeatBucket counters

Every mutation keeps 0 <= on_hold, 0 <= issued, on_hold + issued <= total,
and a rejected mutation leaves the counters untouched.
"""

from decimal import Decimal

import pytest
import uuid_utils.compat as uuid

from src.platform.exception.exceptions import CapacityExceededError, ConflictError, DomainError
from src.service.group_ticketing.domain.entity.seat_bucket_entity import SeatBucket
from src.service.group_ticketing.domain.enum.pax_type import PaxType


def _bucket(total_seats: int = 10) -> SeatBucket:
    return SeatBucket.create(
        flight_group_id=uuid.uuid7(),
        pax_type=PaxType.ADT,
        total_seats=total_seats,
        base_fare='450',
        tax_amount='62.3',
        fee_amount=15,
        currency='usd',
    )


def _counters(bucket: SeatBucket) -> tuple[int, int, int]:
    return bucket.total_seats, bucket.seats_on_hold, bucket.seats_issued


class TestCreate:
    def test_amounts_are_two_place_decimals(self) -> None:
        bucket = _bucket()

        assert bucket.base_fare == Decimal('450.00')
        assert bucket.tax_amount == Decimal('62.30')
        assert bucket.fee_amount == Decimal('15.00')
        assert bucket.unit_price == Decimal('527.30')
        assert bucket.currency == 'USD'

    def test_negative_capacity_is_rejected(self) -> None:
        with pytest.raises(DomainError):
            _bucket(total_seats=-1)

    @pytest.mark.parametrize('currency', ['', 'US', 'US1', 'DOLLAR'])
    def test_currency_must_be_three_letters(self, currency: str) -> None:
        with pytest.raises(DomainError):
            SeatBucket.create(
                flight_group_id=uuid.uuid7(),
                pax_type=PaxType.ADT,
                total_seats=1,
                base_fare='1',
                currency=currency,
            )

    def test_negative_fare_is_rejected(self) -> None:
        with pytest.raises(DomainError):
            SeatBucket.create(
                flight_group_id=uuid.uuid7(),
                pax_type=PaxType.CHD,
                total_seats=1,
                base_fare='-0.01',
                currency='USD',
            )


class TestLedgerCounters:
    def test_ten_seat_walkthrough(self) -> None:
        bucket = _bucket(total_seats=10)

        bucket.reserve(4)
        assert _counters(bucket) == (10, 4, 0)

        bucket.reserve(6)
        assert _counters(bucket) == (10, 10, 0)

        with pytest.raises(CapacityExceededError):
            bucket.reserve(1)
        assert _counters(bucket) == (10, 10, 0)

        bucket.issue(4)
        assert _counters(bucket) == (10, 6, 4)

        bucket.release(6)
        assert _counters(bucket) == (10, 0, 4)
        assert bucket.available_seats == 6

    @pytest.mark.parametrize('quantity', [0, -3])
    def test_reserve_needs_positive_quantity(self, quantity: int) -> None:
        bucket = _bucket()

        with pytest.raises(DomainError):
            bucket.reserve(quantity)
        assert _counters(bucket) == (10, 0, 0)

    def test_cannot_issue_more_than_on_hold(self) -> None:
        bucket = _bucket()
        bucket.reserve(2)

        with pytest.raises(ConflictError):
            bucket.issue(3)
        assert _counters(bucket) == (10, 2, 0)

    def test_cannot_release_more_than_on_hold(self) -> None:
        bucket = _bucket()
        bucket.reserve(2)

        with pytest.raises(ConflictError):
            bucket.release(5)
        assert _counters(bucket) == (10, 2, 0)


class TestConfiguration:
    def test_resize_cannot_drop_below_committed_seats(self) -> None:
        bucket = _bucket(total_seats=10)
        bucket.reserve(3)
        bucket.issue(2)
        bucket.reserve(4)

        with pytest.raises(ConflictError):
            bucket.resize(6)
        assert bucket.total_seats == 10

        bucket.resize(7)
        assert bucket.total_seats == 7
        assert bucket.available_seats == 0

    def test_has_same_fare_compares_normalized_values(self) -> None:
        bucket = _bucket()

        assert bucket.has_same_fare(
            base_fare='450.00', tax_amount='62.30', fee_amount='15', currency='usd'
        )
        assert not bucket.has_same_fare(
            base_fare='451', tax_amount='62.30', fee_amount='15', currency='USD'
        )

    def test_reprice_replaces_all_amounts(self) -> None:
        bucket = _bucket()

        bucket.reprice(base_fare='399.99', tax_amount='0', fee_amount='0', currency='eur')

        assert bucket.unit_price == Decimal('399.99')
        assert bucket.currency == 'EUR'
        assert bucket.price_for(3) == Decimal('1199.97')
