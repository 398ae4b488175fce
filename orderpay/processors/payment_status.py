"""Payment status evaluation for an order's ledger."""

from decimal import Decimal
from typing import Iterable

from ..domain.orders import Order, PaymentEntry, PaymentState, PaymentStatus
from ..utils.money import ZERO, covers
from .ledger import ledger_total, parse_ledger
from .pricing import price_order

def evaluate(ledger: Iterable[PaymentEntry], order_total: Decimal) -> PaymentState:
    """Classify a pending-filtered ledger against the order total.

    ``order_total`` must be the current total of the order's items; callers
    should not reuse a total computed before the items changed.

    Args:
        ledger: Parsed payment entries
        order_total: Current order total

    Returns:
        PaymentState with status, amount paid and amount still due
    """
    ledger = list(ledger)
    total_paid = ledger_total(ledger)
    remaining = max(ZERO, order_total - total_paid)

    if total_paid <= 0:
        status = PaymentStatus.UNPAID
    elif covers(total_paid, order_total):
        status = PaymentStatus.PAID
    else:
        status = PaymentStatus.PARTIAL

    return PaymentState(
        status=status,
        total_paid=total_paid,
        remaining_amount=remaining,
        breakdown=ledger
    )

def evaluate_order(order: Order) -> PaymentState:
    """Price the order's current items and evaluate its stored ledger."""
    return evaluate(parse_ledger(order.payment_type), price_order(order.items).order_total)
