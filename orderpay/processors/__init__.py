"""
Processors package: pricing, payment ledger and payment application.
"""

from .pricing import PricedOrder, price_order, unit_total, tax_percentage
from .ledger import parse_ledger, serialize_ledger, merge_ledgers
from .payment_status import evaluate, evaluate_order
from .payment import apply_payment, PaymentApplicator, TenderDraft
from .bulk_payment import (
    allocate_bulk_payment,
    BulkPaymentAllocator,
    select_bulk_candidates,
    outstanding_total
)
from .receipt import group_by_printer, bucket_tax_by_rate, prepare_print_jobs
from .base import OrderUpdater

__all__ = [
    'PricedOrder',
    'price_order',
    'unit_total',
    'tax_percentage',
    'parse_ledger',
    'serialize_ledger',
    'merge_ledgers',
    'evaluate',
    'evaluate_order',
    'apply_payment',
    'PaymentApplicator',
    'TenderDraft',
    'allocate_bulk_payment',
    'BulkPaymentAllocator',
    'select_bulk_candidates',
    'outstanding_total',
    'group_by_printer',
    'bucket_tax_by_rate',
    'prepare_print_jobs',
    'OrderUpdater'
]
