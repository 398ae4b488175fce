"""CLI command implementations."""

from .orders import PriceOrderCommand
from .payments import PayOrderCommand, BulkPayCommand, OrderStatusCommand
from .report import PaymentReportCommand

__all__ = [
    'PriceOrderCommand',
    'PayOrderCommand',
    'BulkPayCommand',
    'OrderStatusCommand',
    'PaymentReportCommand'
]
