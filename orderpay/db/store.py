"""SQLAlchemy-backed order store, the persistence collaborator of the engine."""

import logging
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError

from ..domain.items import AnyOrderItem, MenuItem, order_item_from_dict
from ..domain.orders import CommandResult, Order, UpdateCommand
from ..processors.base import OrderUpdater
from ..utils import generate_uuid
from .models import Order as OrderRow, OrderItem as OrderItemRow
from .session import SessionManager

ITEM_COLUMNS = [
    'productId', 'productName', 'productPrice', 'productTax', 'productDiscount',
    'productPriority', 'variantId', 'variantName', 'variantPrice', 'complements',
    'printers', 'quantity', 'totalPrice', 'menuId', 'menuSecondaryId', 'menuName',
    'menuPrice', 'menuTax', 'supplement', 'menuPageId', 'menuPageName'
]

def _parse_created_at(value) -> Optional[datetime]:
    """Naive UTC datetime from a datetime, ISO string or epoch milliseconds; None if unreadable."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value / 1000, tz=timezone.utc).replace(tzinfo=None)
        except (OverflowError, OSError, ValueError):
            return None
    if not isinstance(value, datetime):
        try:
            value = datetime.fromisoformat(str(value).replace('Z', '+00:00'))
        except ValueError:
            return None
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value

def _item_to_row(item: AnyOrderItem, index: int) -> OrderItemRow:
    row = OrderItemRow(
        id=item.id or generate_uuid(),
        lineIndex=index,
        productId=item.product_id,
        productName=item.product_name,
        productPrice=item.product_price,
        productTax=item.product_tax,
        productDiscount=item.product_discount,
        productPriority=item.product_priority,
        variantId=item.variant_id,
        variantName=item.variant_name,
        variantPrice=item.variant_price,
        complements=[c.to_dict() for c in item.complements],
        printers=list(item.printers),
        quantity=item.quantity,
        totalPrice=item.total_price
    )
    if isinstance(item, MenuItem):
        row.menuId = item.menu_id
        row.menuSecondaryId = item.menu_secondary_id
        row.menuName = item.menu_name
        row.menuPrice = item.menu_price
        row.menuTax = item.menu_tax
        row.supplement = item.supplement
        row.menuPageId = item.menu_page_id
        row.menuPageName = item.menu_page_name
    return row

def _row_to_item(row: OrderItemRow) -> AnyOrderItem:
    data = {column: getattr(row, column) for column in ITEM_COLUMNS}
    data['id'] = row.id
    return order_item_from_dict(data)

def _row_to_order(row: OrderRow) -> Order:
    return Order(
        id=row.id,
        order_id=row.orderId,
        items=[_row_to_item(item) for item in row.items],
        payment_type=row.paymentType,
        status=row.status,
        order_type=row.orderType,
        created_at=row.createdAt,
        delivery_person_id=row.deliveryPersonId,
        is_paid=bool(row.isPaid)
    )

class OrderStore(OrderUpdater):
    """Load orders and persist payment updates through SQLAlchemy."""
    
    def __init__(self, session_manager: SessionManager):
        self.session_manager = session_manager
        self.logger = logging.getLogger(self.__class__.__name__)
    
    def save_order(self, order: Order) -> str:
        """Insert an order with its items.
        
        Args:
            order: Order to store; an empty id gets a generated one
            
        Returns:
            Stored order id
        """
        order_id = order.id or generate_uuid()
        with self.session_manager as session:
            row = OrderRow(
                id=order_id,
                orderId=order.order_id,
                status=order.status,
                orderType=order.order_type,
                paymentType=order.payment_type,
                isPaid=order.is_paid,
                deliveryPersonId=order.delivery_person_id,
                createdAt=_parse_created_at(order.created_at) or datetime.utcnow()
            )
            row.items = [_item_to_row(item, index) for index, item in enumerate(order.items)]
            session.add(row)
        self.logger.debug(f"Saved order {order_id} with {len(order.items)} items")
        return order_id
    
    def get_order(self, order_id: str) -> Optional[Order]:
        """Load one order, or None if it does not exist."""
        with self.session_manager as session:
            row = session.get(OrderRow, order_id)
            return _row_to_order(row) if row is not None else None
    
    def list_orders(self, status: Optional[str] = None, delivery_person_id: Optional[str] = None) -> List[Order]:
        """Load orders oldest first, optionally filtered by status and delivery person."""
        with self.session_manager as session:
            query = session.query(OrderRow)
            if status is not None:
                query = query.filter(OrderRow.status == status)
            if delivery_person_id is not None:
                query = query.filter(OrderRow.deliveryPersonId == delivery_person_id)
            return [_row_to_order(row) for row in query.order_by(OrderRow.createdAt).all()]
    
    def submit_order_update(self, order_id: str, command: UpdateCommand) -> CommandResult:
        """Write the ledger and paid flag of one order.
        
        Returns:
            CommandResult; failures are reported, never raised
        """
        try:
            with self.session_manager as session:
                row = session.get(OrderRow, order_id)
                if row is None:
                    return CommandResult(success=False, error=f"Order {order_id} not found")
                row.paymentType = command.payment_type
                row.isPaid = command.is_paid
                row.updatedAt = datetime.utcnow()
        except SQLAlchemyError as e:
            self.logger.error(f"Failed to update order {order_id}: {str(e)}")
            return CommandResult(success=False, error=str(e))
        return CommandResult(success=True)
