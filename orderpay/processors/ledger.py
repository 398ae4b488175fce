"""Codec for the textual payment ledger stored on each order.

Wire format: ``"type:amount, type:amount"``. An empty or blank string and the
``pending`` sentinel mean that nothing has been paid yet.
"""

import logging
import re
from decimal import Decimal
from typing import Iterable, List

from ..domain.orders import PENDING, PaymentEntry
from ..utils.money import ZERO, format_amount, sum_amounts, to_decimal

logger = logging.getLogger(__name__)

_SEGMENT_SEPARATOR = re.compile(r',\s*')

def is_pending(payment_type: str) -> bool:
    return payment_type.strip().lower() == PENDING

def _parse_amount(raw: str, segment: str) -> Decimal:
    try:
        amount = to_decimal(raw)
    except ValueError:
        logger.warning(f"Invalid payment amount in ledger segment {segment!r}, counting it as 0")
        return ZERO
    if amount < 0:
        logger.warning(f"Negative payment amount in ledger segment {segment!r}, counting it as 0")
        return ZERO
    return amount

def parse_ledger(raw: str) -> List[PaymentEntry]:
    """Parse a serialized ledger.

    Malformed segments never raise: a segment whose amount cannot be read is
    kept with amount 0. ``pending`` entries are dropped.

    Args:
        raw: Ledger string as persisted on the order

    Returns:
        Payment entries in ledger order
    """
    if raw is None or not raw.strip() or is_pending(raw):
        return []

    entries = []
    for segment in _SEGMENT_SEPARATOR.split(raw.strip()):
        if not segment.strip():
            continue
        payment_type, _, amount = segment.partition(':')
        payment_type = payment_type.strip()
        if is_pending(payment_type):
            continue
        entries.append(PaymentEntry(type=payment_type, amount=_parse_amount(amount, segment)))
    return entries

def serialize_ledger(entries: Iterable[PaymentEntry]) -> str:
    """Join entries as ``type:amount`` pairs, amounts at full precision."""
    return ', '.join(f"{entry.type}:{format_amount(entry.amount)}" for entry in entries)

def merge_ledgers(existing: Iterable[PaymentEntry], incoming: Iterable[PaymentEntry]) -> List[PaymentEntry]:
    """Merge two ledgers, coalescing entries of the same type.

    Neither input is modified. Types are matched case-sensitively after
    stripping whitespace; first-seen type order is kept.
    """
    merged: List[PaymentEntry] = []
    by_type = {}
    for entry in list(existing) + list(incoming):
        payment_type = entry.type.strip()
        current = by_type.get(payment_type)
        if current is None:
            current = PaymentEntry(type=payment_type, amount=entry.amount)
            by_type[payment_type] = current
            merged.append(current)
        else:
            current.amount += entry.amount
    return merged

def ledger_total(entries: Iterable[PaymentEntry]) -> Decimal:
    return sum_amounts(entry.amount for entry in entries)

def totals_by_type(entries: Iterable[PaymentEntry]) -> dict:
    """Per-type sums, the order-insensitive view of a ledger."""
    return {entry.type: entry.amount for entry in merge_ledgers([], entries)}
