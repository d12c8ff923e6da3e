from decimal import Decimal

import attrs

from src.service.group_ticketing.domain.enum.pax_type import PaxType


@attrs.define
class SeatBucketSpec:
    pax_type: PaxType
    total_seats: int
    base_fare: Decimal
    currency: str
    tax_amount: Decimal = Decimal('0.00')
    fee_amount: Decimal = Decimal('0.00')
