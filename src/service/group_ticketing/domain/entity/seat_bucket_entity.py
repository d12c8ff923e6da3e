from datetime import datetime
from decimal import Decimal
from typing import Any, Optional
from uuid import UUID

import attrs
import uuid_utils.compat as uuid

from src.platform.exception.exceptions import CapacityExceededError, ConflictError, DomainError
from src.service.group_ticketing.domain.enum.pax_type import PaxType
from src.service.group_ticketing.domain.value_object.money import normalize_currency, to_money


@attrs.define
class SeatBucket:
    """
    Capacity and fare for one passenger type of a flight group.

    Invariant after every mutation: 0 <= seats_on_hold, 0 <= seats_issued and
    seats_on_hold + seats_issued <= total_seats. Mutations that would break it
    raise before touching any counter.
    """

    id: UUID
    flight_group_id: UUID
    pax_type: PaxType
    total_seats: int
    base_fare: Decimal
    currency: str
    tax_amount: Decimal = Decimal('0.00')
    fee_amount: Decimal = Decimal('0.00')
    seats_on_hold: int = 0
    seats_issued: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def create(
        cls,
        *,
        flight_group_id: UUID,
        pax_type: PaxType,
        total_seats: int,
        base_fare: Any,
        currency: str,
        tax_amount: Any = 0,
        fee_amount: Any = 0,
    ) -> 'SeatBucket':
        if total_seats < 0:
            raise DomainError('total_seats must not be negative')
        return cls(
            id=uuid.uuid7(),
            flight_group_id=flight_group_id,
            pax_type=PaxType(pax_type),
            total_seats=total_seats,
            base_fare=to_money(base_fare, field='base_fare'),
            tax_amount=to_money(tax_amount, field='tax_amount'),
            fee_amount=to_money(fee_amount, field='fee_amount'),
            currency=normalize_currency(currency),
        )

    @property
    def committed_seats(self) -> int:
        return self.seats_on_hold + self.seats_issued

    @property
    def available_seats(self) -> int:
        return self.total_seats - self.committed_seats

    @property
    def unit_price(self) -> Decimal:
        return self.base_fare + self.tax_amount + self.fee_amount

    def price_for(self, quantity: int) -> Decimal:
        return self.unit_price * quantity

    # ========== Ledger ==========

    def reserve(self, quantity: int) -> None:
        if quantity <= 0:
            raise DomainError('quantity must be greater than 0')
        if self.committed_seats + quantity > self.total_seats:
            raise CapacityExceededError(
                f'Only {self.available_seats} {self.pax_type} seats left, requested {quantity}'
            )
        self.seats_on_hold += quantity

    def issue(self, quantity: int) -> None:
        """Move seats of a confirmed hold from on hold to issued."""
        if quantity <= 0 or quantity > self.seats_on_hold:
            raise ConflictError(
                f'Cannot issue {quantity} seats, only {self.seats_on_hold} are on hold'
            )
        self.seats_on_hold -= quantity
        self.seats_issued += quantity

    def release(self, quantity: int) -> None:
        if quantity <= 0 or quantity > self.seats_on_hold:
            raise ConflictError(
                f'Cannot release {quantity} seats, only {self.seats_on_hold} are on hold'
            )
        self.seats_on_hold -= quantity

    # ========== Configuration ==========

    def resize(self, total_seats: int) -> None:
        if total_seats < 0:
            raise DomainError('total_seats must not be negative')
        if total_seats < self.committed_seats:
            raise ConflictError(
                f'total_seats cannot drop below {self.committed_seats} seats already held or issued'
            )
        self.total_seats = total_seats

    def reprice(
        self, *, base_fare: Any, currency: str, tax_amount: Any = 0, fee_amount: Any = 0
    ) -> None:
        self.base_fare = to_money(base_fare, field='base_fare')
        self.tax_amount = to_money(tax_amount, field='tax_amount')
        self.fee_amount = to_money(fee_amount, field='fee_amount')
        self.currency = normalize_currency(currency)

    def has_same_fare(
        self, *, base_fare: Any, currency: str, tax_amount: Any = 0, fee_amount: Any = 0
    ) -> bool:
        return (
            self.base_fare == to_money(base_fare, field='base_fare')
            and self.tax_amount == to_money(tax_amount, field='tax_amount')
            and self.fee_amount == to_money(fee_amount, field='fee_amount')
            and self.currency == normalize_currency(currency)
        )
