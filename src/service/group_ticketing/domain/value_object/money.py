from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

from src.platform.exception.exceptions import DomainError


# NUMERIC(10, 2)
MONEY_QUANTUM = Decimal('0.01')
MAX_AMOUNT = Decimal('99999999.99')


def to_money(value: Any, *, field: str = 'amount') -> Decimal:
    """Parse a non-negative two-place currency amount; floats go through str()."""
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, ValueError) as e:
        raise DomainError(f'{field} must be a decimal amount') from e
    if not amount.is_finite():
        raise DomainError(f'{field} must be a decimal amount')
    # bounds come before quantize, which overflows the decimal context past 28 digits
    if amount < 0:
        raise DomainError(f'{field} must not be negative')
    if amount > MAX_AMOUNT:
        raise DomainError(f'{field} must not exceed {MAX_AMOUNT}')
    return amount.quantize(MONEY_QUANTUM, rounding=ROUND_HALF_UP)


def normalize_currency(value: str) -> str:
    currency = (value or '').strip().upper()
    if len(currency) != 3 or not currency.isalpha():
        raise DomainError('currency must be a 3-letter ISO code')
    return currency
