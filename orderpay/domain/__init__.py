"""Typed domain objects handled by the engine."""

from .items import (
    Complement,
    OrderItem,
    NonMenuItem,
    MenuItem,
    AnyOrderItem,
    MenuGroup,
    order_item_from_dict
)
from .orders import (
    PENDING,
    PaymentStatus,
    PaymentEntry,
    PaymentState,
    Order,
    Tender,
    UpdateCommand,
    CommandResult
)

__all__ = [
    'Complement',
    'OrderItem',
    'NonMenuItem',
    'MenuItem',
    'AnyOrderItem',
    'MenuGroup',
    'order_item_from_dict',
    'PENDING',
    'PaymentStatus',
    'PaymentEntry',
    'PaymentState',
    'Order',
    'Tender',
    'UpdateCommand',
    'CommandResult'
]
