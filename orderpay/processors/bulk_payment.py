"""Allocation of one aggregate payment across several outstanding orders.

Orders are paid oldest first. Each order receives ``min(remaining, left)``
and that amount is split across the payment methods in proportion to their
share of the whole payment, so a "mostly cash, some card" settlement keeps its
mix on every order it touches. Updates are submitted one order at a time
because the money left for the next order depends on whether the previous
update was stored.
"""

import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from typing import Iterable, List, Optional, Sequence

from ..domain.orders import PENDING, Order, PaymentEntry, PaymentStatus, UpdateCommand
from ..exceptions import PaymentValidationError
from ..utils.money import ZERO, covers, format_amount, round2, to_decimal
from .base import BaseProcessor, OrderUpdater
from .ledger import ledger_total, merge_ledgers, parse_ledger, serialize_ledger
from .payment import validate_method
from .payment_status import evaluate, evaluate_order
from .pricing import price_order

DELIVERED = 'delivered'

@dataclass
class OrderAllocation:
    """What one order received during a bulk allocation."""
    order_id: str
    applied: Decimal
    payments: List[PaymentEntry]
    command: UpdateCommand
    success: bool
    error: Optional[str] = None

@dataclass
class BulkAllocationResult:
    """Summary of a bulk allocation run."""
    applied_count: int = 0
    attempted_count: int = 0
    total_bulk: Decimal = ZERO
    remaining_bulk: Decimal = ZERO
    per_order_results: List[OrderAllocation] = field(default_factory=list)

    @property
    def full_success(self) -> bool:
        return self.applied_count == self.attempted_count

    @property
    def allocated(self) -> Decimal:
        return sum((r.applied for r in self.per_order_results if r.success), ZERO)

    @property
    def failures(self) -> List[OrderAllocation]:
        return [r for r in self.per_order_results if not r.success]

def created_timestamp(order: Order) -> float:
    """Sort key for oldest-first ordering, in seconds.

    Numbers are epoch milliseconds. Missing or unreadable dates count as 0.
    """
    created_at = order.created_at
    if isinstance(created_at, (int, float)) and not isinstance(created_at, bool):
        return created_at / 1000 if math.isfinite(created_at) else 0.0
    if isinstance(created_at, str):
        text = created_at.strip()
        if text.endswith('Z'):
            text = text[:-1] + '+00:00'
        try:
            created_at = datetime.fromisoformat(text)
        except ValueError:
            return 0.0
    if not isinstance(created_at, datetime):
        return 0.0
    if created_at.tzinfo is None:
        created_at = created_at.replace(tzinfo=timezone.utc)
    return created_at.timestamp()

def split_proportionally(methods: Sequence[PaymentEntry], total_bulk: Decimal, amount: Decimal) -> List[PaymentEntry]:
    """Split ``amount`` across ``methods`` by each method's share of ``total_bulk``.

    Shares are rounded to cents; methods whose share rounds to zero are dropped.
    """
    shares = []
    for method in methods:
        share = round2(method.amount / total_bulk * amount)
        if share > 0:
            shares.append(PaymentEntry(type=method.type, amount=share))
    return shares

def validate_methods(payment_methods: Iterable[PaymentEntry]) -> List[PaymentEntry]:
    """Coalesce methods by type and reject negative amounts.

    Raises:
        PaymentValidationError: On a missing method or negative amount
    """
    validated = []
    for method in payment_methods:
        payment_type = validate_method(method.type)
        try:
            amount = to_decimal(method.amount)
        except ValueError as e:
            raise PaymentValidationError(str(e))
        if amount < 0:
            raise PaymentValidationError(f"Payment amount for {payment_type} cannot be negative, got {amount}")
        validated.append(PaymentEntry(type=payment_type, amount=amount))
    return merge_ledgers([], validated)

def select_bulk_candidates(orders: Iterable[Order], delivery_person_id: str) -> List[Order]:
    """Delivered orders of one delivery person that still owe money."""
    candidates = []
    for order in orders:
        if order.delivery_person_id != delivery_person_id or order.status != DELIVERED:
            continue
        if evaluate_order(order).status in (PaymentStatus.UNPAID, PaymentStatus.PARTIAL):
            candidates.append(order)
    return candidates

def outstanding_total(orders: Iterable[Order]) -> Decimal:
    """Sum of the amounts still due on ``orders``."""
    return sum((evaluate_order(order).remaining_amount for order in orders), ZERO)

class BulkPaymentAllocator(BaseProcessor):
    """Distribute one aggregate payment over several orders."""
    
    def __init__(self, updater: OrderUpdater, debug: bool = False):
        super().__init__(updater, debug)
    
    def allocate(self, candidate_orders: Sequence[Order], payment_methods: Sequence[PaymentEntry]) -> BulkAllocationResult:
        """Allocate ``payment_methods`` over ``candidate_orders``, oldest first.
        
        The candidates are used as given; filtering them is up to the caller
        (see ``select_bulk_candidates``). A failed update is recorded and the
        loop moves on without spending money on that order. Already stored
        updates are never rolled back.
        
        Args:
            candidate_orders: Orders eligible for this payment
            payment_methods: Aggregate payment, one entry per method
            
        Returns:
            BulkAllocationResult with applied and attempted counts
            
        Raises:
            PaymentValidationError: If a payment method is invalid
        """
        methods = validate_methods(payment_methods)
        total_bulk = ledger_total(methods)
        result = BulkAllocationResult(total_bulk=total_bulk, remaining_bulk=total_bulk)

        if not candidate_orders or total_bulk <= 0:
            self.logger.info("Nothing to allocate: no eligible orders or no payment")
            return result

        result.attempted_count = len(candidate_orders)
        self.stats.attempted += len(candidate_orders)

        remaining_bulk = total_bulk
        for order in sorted(candidate_orders, key=created_timestamp):
            if remaining_bulk <= 0:
                break
            
            order_total = price_order(order.items).order_total
            existing = parse_ledger(order.payment_type)
            state = evaluate(existing, order_total)
            if state.remaining_amount <= 0:
                self.stats.skipped += 1
                if self.debug:
                    self.logger.debug(f"Order {order.id} already paid, skipping")
                continue
            
            to_apply = min(state.remaining_amount, remaining_bulk)
            payments = split_proportionally(methods, total_bulk, to_apply)
            new_ledger = merge_ledgers(existing, payments)
            command = UpdateCommand(
                order_id=order.id,
                payment_type=serialize_ledger(new_ledger) or PENDING,
                is_paid=covers(ledger_total(new_ledger), order_total)
            )
            
            outcome = self.submit(command)
            if outcome.success:
                result.applied_count += 1
                remaining_bulk -= to_apply
                self.stats.applied += 1
            else:
                self.stats.failed += 1
                self.error_tracker.add_error(
                    'ORDER_UPDATE_FAILED',
                    f"Order {order.id}: {outcome.error or 'update failed'}",
                    {'order_id': order.id, 'amount': format_amount(to_apply)}
                )
            result.per_order_results.append(OrderAllocation(
                order_id=order.id,
                applied=to_apply,
                payments=payments,
                command=command,
                success=outcome.success,
                error=outcome.error
            ))
        
        result.remaining_bulk = remaining_bulk
        if result.full_success:
            self.logger.info(
                f"Bulk payment of {format_amount(total_bulk)} applied to {result.applied_count} orders"
            )
        else:
            self.logger.warning(
                f"Bulk payment processed for {result.applied_count} out of {result.attempted_count} orders"
            )
            self.error_tracker.log_summary(self.logger)
        return result

def allocate_bulk_payment(
    candidate_orders: Sequence[Order],
    payment_methods: Sequence[PaymentEntry],
    updater: OrderUpdater
) -> BulkAllocationResult:
    """Functional entry point around ``BulkPaymentAllocator.allocate``."""
    return BulkPaymentAllocator(updater).allocate(candidate_orders, payment_methods)
