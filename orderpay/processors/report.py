"""Payment reporting over a set of orders.

Amounts are rounded to cents here since the frames are only ever displayed
or exported.
"""

from typing import Iterable, List

import pandas as pd

from ..domain.orders import Order
from ..utils.money import round2
from .ledger import totals_by_type
from .payment_status import evaluate_order
from .pricing import price_order

SUMMARY_COLUMNS = [
    'id',
    'order_number',
    'delivery_person_id',
    'status',
    'order_total',
    'total_paid',
    'remaining',
    'payment_status'
]

def _money(value) -> float:
    return float(round2(value))

def payment_summary(orders: Iterable[Order]) -> pd.DataFrame:
    """One row per order with its totals, payment status and per-method amounts.

    Args:
        orders: Orders to report on

    Returns:
        DataFrame with SUMMARY_COLUMNS followed by one column per payment method
    """
    rows: List[dict] = []
    methods: List[str] = []
    for order in orders:
        state = evaluate_order(order)
        row = {
            'id': order.id,
            'order_number': order.order_id,
            'delivery_person_id': order.delivery_person_id,
            'status': order.status,
            'order_total': _money(price_order(order.items).order_total),
            'total_paid': _money(state.total_paid),
            'remaining': _money(state.remaining_amount),
            'payment_status': state.status.value
        }
        for method, amount in totals_by_type(state.breakdown).items():
            if method not in methods:
                methods.append(method)
            row[method] = _money(amount)
        rows.append(row)

    df = pd.DataFrame(rows, columns=SUMMARY_COLUMNS + methods)
    if methods:
        df[methods] = df[methods].fillna(0.0)
    return df

def totals_by_method(orders: Iterable[Order]) -> pd.Series:
    """Amount paid per payment method across ``orders``."""
    df = payment_summary(orders)
    methods = [column for column in df.columns if column not in SUMMARY_COLUMNS]
    if not methods:
        return pd.Series(dtype=float, name='amount')
    totals = df[methods].sum().round(2)
    totals.name = 'amount'
    return totals
