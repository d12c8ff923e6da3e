from decimal import Decimal
from typing import List

import attrs

from src.service.group_ticketing.domain.enum.pax_type import PaxType


@attrs.frozen
class FareQuoteLine:
    pax_type: PaxType
    quantity: int
    unit_base_fare: Decimal
    unit_tax_amount: Decimal
    unit_fee_amount: Decimal
    seats_available: int

    @property
    def unit_price(self) -> Decimal:
        return self.unit_base_fare + self.unit_tax_amount + self.unit_fee_amount

    @property
    def base_total(self) -> Decimal:
        return self.unit_base_fare * self.quantity

    @property
    def tax_total(self) -> Decimal:
        return self.unit_tax_amount * self.quantity

    @property
    def fee_total(self) -> Decimal:
        return self.unit_fee_amount * self.quantity

    @property
    def total(self) -> Decimal:
        return self.unit_price * self.quantity


@attrs.frozen
class FareQuote:
    currency: str
    lines: List[FareQuoteLine]

    @property
    def passenger_count(self) -> int:
        return sum(line.quantity for line in self.lines)

    @property
    def base_total(self) -> Decimal:
        return sum((line.base_total for line in self.lines), Decimal('0.00'))

    @property
    def tax_total(self) -> Decimal:
        return sum((line.tax_total for line in self.lines), Decimal('0.00'))

    @property
    def fee_total(self) -> Decimal:
        return sum((line.fee_total for line in self.lines), Decimal('0.00'))

    @property
    def grand_total(self) -> Decimal:
        return sum((line.total for line in self.lines), Decimal('0.00'))
