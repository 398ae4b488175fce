"""Orders, payment ledger entries and the update command sent to persistence."""

import enum
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional, Union

from ..utils.money import ZERO, to_decimal
from .items import AnyOrderItem, order_item_from_dict

PENDING = 'pending'

class PaymentStatus(enum.Enum):
    """Payment status enum."""
    UNPAID = 'UNPAID'
    PARTIAL = 'PARTIAL'
    PAID = 'PAID'

@dataclass
class PaymentEntry:
    """One ``type:amount`` pair of a payment ledger."""
    type: str
    amount: Decimal = ZERO

@dataclass
class PaymentState:
    """Payment status of an order relative to a given order total."""
    status: PaymentStatus
    total_paid: Decimal
    remaining_amount: Decimal
    breakdown: List[PaymentEntry] = field(default_factory=list)

@dataclass
class Order:
    """An order as handed to the engine by the host application.

    ``payment_type`` is the serialized ledger exactly as persisted. A numeric
    ``created_at`` is epoch milliseconds.
    """
    id: str
    order_id: Optional[int] = None
    items: List[AnyOrderItem] = field(default_factory=list)
    payment_type: str = PENDING
    status: str = 'pending'
    order_type: Optional[str] = None
    created_at: Optional[Union[datetime, str, int, float]] = None
    delivery_person_id: Optional[str] = None
    is_paid: bool = False

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Order':
        delivery_person = data.get('deliveryPerson')
        delivery_person_id = data.get('deliveryPersonId', data.get('delivery_person_id'))
        if delivery_person_id is None and isinstance(delivery_person, dict):
            delivery_person_id = delivery_person.get('id')
        return cls(
            id=str(data['id']),
            order_id=data.get('orderId', data.get('order_id')),
            items=[order_item_from_dict(item) for item in data.get('items') or []],
            payment_type=data.get('paymentType', data.get('payment_type')) or PENDING,
            status=data.get('status') or 'pending',
            order_type=data.get('orderType', data.get('order_type')),
            created_at=data.get('createdAt', data.get('created_at')),
            delivery_person_id=delivery_person_id,
            is_paid=bool(data.get('isPaid', data.get('is_paid', False)))
        )

@dataclass
class Tender:
    """Money handed over for one payment method."""
    method: str
    tendered_amount: Decimal

    @classmethod
    def parse(cls, text: str) -> 'Tender':
        """Read a ``method:amount`` command-line token."""
        method, sep, amount = text.partition(':')
        if not sep or not method.strip():
            raise ValueError(f"Expected METHOD:AMOUNT, got {text!r}")
        return cls(method=method.strip(), tendered_amount=to_decimal(amount))

@dataclass
class UpdateCommand:
    """Order update handed to the persistence collaborator."""
    order_id: str
    payment_type: str
    is_paid: bool

    def to_dict(self) -> Dict[str, Any]:
        return {'paymentType': self.payment_type, 'isPaid': self.is_paid}

@dataclass
class CommandResult:
    """Outcome reported by the persistence collaborator."""
    success: bool
    error: Optional[str] = None
