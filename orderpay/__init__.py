"""Order pricing, tax breakdown and payment reconciliation engine."""

from .domain import Order, OrderItem, MenuItem, NonMenuItem, PaymentEntry, PaymentStatus, Tender
from .exceptions import OrderPayError, PaymentValidationError
from .processors import (
    price_order,
    unit_total,
    parse_ledger,
    serialize_ledger,
    merge_ledgers,
    evaluate,
    apply_payment,
    allocate_bulk_payment,
    group_by_printer,
    bucket_tax_by_rate
)

__all__ = [
    'Order',
    'OrderItem',
    'MenuItem',
    'NonMenuItem',
    'PaymentEntry',
    'PaymentStatus',
    'Tender',
    'OrderPayError',
    'PaymentValidationError',
    'price_order',
    'unit_total',
    'parse_ledger',
    'serialize_ledger',
    'merge_ledgers',
    'evaluate',
    'apply_payment',
    'allocate_bulk_payment',
    'group_by_printer',
    'bucket_tax_by_rate'
]
