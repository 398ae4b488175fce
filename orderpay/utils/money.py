"""Decimal money helpers shared by the pricing and payment processors."""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Iterable

ZERO = Decimal('0')
CENT = Decimal('0.01')

# Absolute tolerance for paid/total comparisons
EPSILON = Decimal('0.000001')

def to_decimal(value: Any, default: Decimal = ZERO) -> Decimal:
    """Coerce a wire value (int, str, float, Decimal, None) to Decimal.

    Floats go through ``str`` so that 0.1 becomes Decimal('0.1') rather than
    its binary expansion.

    Args:
        value: Raw value
        default: Returned for None or empty strings

    Returns:
        Decimal value

    Raises:
        ValueError: If the value cannot be read as a finite decimal
    """
    if value is None:
        return default
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, bool):
        raise ValueError(f"Not a money amount: {value!r}")
    elif isinstance(value, (int, float)):
        result = Decimal(str(value))
    else:
        text = str(value).strip()
        if not text:
            return default
        try:
            result = Decimal(text)
        except InvalidOperation:
            raise ValueError(f"Not a money amount: {value!r}")
    if not result.is_finite():
        raise ValueError(f"Not a finite money amount: {value!r}")
    return result

def round2(amount: Decimal) -> Decimal:
    """Round half-up to cents."""
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)

def format_amount(amount: Decimal) -> str:
    """Plain decimal string with no exponent and no trailing zeros."""
    text = format(amount.normalize(), 'f')
    return '0' if text in ('-0', '') else text

def sum_amounts(amounts: Iterable[Decimal]) -> Decimal:
    return sum(amounts, ZERO)

def covers(paid: Decimal, total: Decimal) -> bool:
    """True when ``paid`` reaches ``total`` within EPSILON."""
    return paid >= total - EPSILON
