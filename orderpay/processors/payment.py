"""Single-order payment application.

``apply_payment`` is pure: it clamps the tendered amounts to what the order
still owes, merges them into the stored ledger and returns the update command
together with the change due. ``PaymentApplicator`` sends that command to the
persistence collaborator and reports the outcome.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import List, Optional, Sequence

from ..domain.orders import (
    PENDING,
    CommandResult,
    Order,
    PaymentEntry,
    PaymentState,
    Tender,
    UpdateCommand
)
from ..exceptions import PaymentValidationError
from ..utils.money import ZERO, covers, format_amount, sum_amounts, to_decimal
from .base import BaseProcessor, OrderUpdater
from .ledger import is_pending, ledger_total, merge_ledgers, parse_ledger, serialize_ledger
from .payment_status import evaluate
from .pricing import price_order

@dataclass
class PaymentApplication:
    """Everything ``apply_payment`` derives for one order."""
    update_command: UpdateCommand
    change_due: Decimal
    order_total: Decimal
    applied: List[PaymentEntry]
    state: PaymentState

@dataclass
class PaymentResult:
    """Outcome of applying a payment through the persistence collaborator."""
    success: bool
    order_id: str
    change_due: Decimal = ZERO
    command: Optional[UpdateCommand] = None
    state: Optional[PaymentState] = None
    error: Optional[str] = None

def validate_method(method: str) -> str:
    method = (method or '').strip()
    if not method:
        raise PaymentValidationError("Payment method is required")
    if is_pending(method):
        raise PaymentValidationError(f"'{PENDING}' is not a payment method")
    return method

def validate_tenders(tenders: Sequence[Tender]) -> List[Tender]:
    """Check tendered amounts before anything is merged.

    Raises:
        PaymentValidationError: On an empty tender list, a missing or
            sentinel method, or a non-positive amount
    """
    if not tenders:
        raise PaymentValidationError("At least one payment method is required")
    validated = []
    for tender in tenders:
        method = validate_method(tender.method)
        try:
            amount = to_decimal(tender.tendered_amount)
        except ValueError as e:
            raise PaymentValidationError(str(e))
        if amount <= 0:
            raise PaymentValidationError(f"Tendered amount for {method} must be positive, got {amount}")
        validated.append(Tender(method=method, tendered_amount=amount))
    return validated

def apply_payment(order: Order, tenders: Sequence[Tender]) -> PaymentApplication:
    """Apply newly tendered money to one order.

    Each tender is clamped so that the applied amounts never exceed what the
    order still owes; whatever is tendered beyond that is change due. The
    change only covers this transaction's over-tender.

    Args:
        order: Order with its current items and stored ledger
        tenders: Money handed over, one entry per method

    Returns:
        PaymentApplication with the update command and change due

    Raises:
        PaymentValidationError: If the tenders or the order total are invalid
    """
    tenders = validate_tenders(tenders)
    total = price_order(order.items).order_total
    if total <= 0:
        raise PaymentValidationError(f"Order {order.id} has a non-positive total ({total})")

    existing = parse_ledger(order.payment_type)
    outstanding = max(ZERO, total - ledger_total(existing))

    applied: List[PaymentEntry] = []
    applied_so_far = ZERO
    for tender in tenders:
        amount = min(tender.tendered_amount, max(ZERO, outstanding - applied_so_far))
        if amount > 0:
            applied.append(PaymentEntry(type=tender.method, amount=amount))
            applied_so_far += amount

    tendered = sum_amounts(tender.tendered_amount for tender in tenders)
    change_due = max(ZERO, tendered - outstanding)

    new_ledger = merge_ledgers(existing, applied)
    command = UpdateCommand(
        order_id=order.id,
        payment_type=serialize_ledger(new_ledger) or PENDING,
        is_paid=covers(ledger_total(new_ledger), total)
    )
    return PaymentApplication(
        update_command=command,
        change_due=change_due,
        order_total=total,
        applied=applied,
        state=evaluate(new_ledger, total)
    )

class TenderDraft:
    """Tenders collected before a payment is submitted.

    Same-method tenders are coalesced and the draft total can never exceed
    ``limit`` (the order total, or the outstanding total for a bulk payment).
    """
    
    def __init__(self, limit: Decimal):
        self.limit = to_decimal(limit)
        self.entries: List[PaymentEntry] = []
    
    @property
    def total(self) -> Decimal:
        return ledger_total(self.entries)
    
    def add(self, method: str, amount) -> None:
        """Add a tender.
        
        Raises:
            PaymentValidationError: For a non-positive amount or when the
                draft total would exceed the limit
        """
        method = validate_method(method)
        try:
            amount = to_decimal(amount)
        except ValueError as e:
            raise PaymentValidationError(str(e))
        if amount <= 0:
            raise PaymentValidationError("Please enter a valid amount")
        if self.total + amount > self.limit:
            raise PaymentValidationError(
                f"Total payment cannot exceed remaining amount ({format_amount(self.limit)})"
            )
        self.entries = merge_ledgers(self.entries, [PaymentEntry(type=method, amount=amount)])
    
    def remove(self, index: int) -> PaymentEntry:
        return self.entries.pop(index)
    
    def to_tenders(self) -> List[Tender]:
        return [Tender(method=e.type, tendered_amount=e.amount) for e in self.entries]

class PaymentApplicator(BaseProcessor):
    """Apply a payment to one order and persist it."""
    
    def __init__(self, updater: OrderUpdater, debug: bool = False):
        super().__init__(updater, debug)
        self.stats.update({'rejected': 0, 'change_due_total': ZERO})
    
    def process(self, order: Order, tenders: Sequence[Tender]) -> PaymentResult:
        """Apply ``tenders`` to ``order`` and submit the update.
        
        Nothing is kept when the collaborator fails: the caller still holds the
        original order and may retry.
        
        Args:
            order: Order to pay
            tenders: Money handed over per method
            
        Returns:
            PaymentResult; ``success`` is False on invalid input or a failed update
        """
        self.stats.attempted += 1
        try:
            application = apply_payment(order, tenders)
        except PaymentValidationError as e:
            self.logger.warning(f"Payment for order {order.id} rejected: {str(e)}")
            self.stats.rejected += 1
            return PaymentResult(success=False, order_id=order.id, error=str(e))
        
        result: CommandResult = self.submit(application.update_command)
        if not result.success:
            self.stats.failed += 1
            self.error_tracker.add_error(
                'ORDER_UPDATE_FAILED',
                f"Order {order.id}: {result.error or 'update failed'}",
                {'order_id': order.id, 'payment_type': application.update_command.payment_type}
            )
            return PaymentResult(
                success=False,
                order_id=order.id,
                command=application.update_command,
                error=result.error or 'Failed to update payment'
            )
        
        self.stats.applied += 1
        self.stats.change_due_total += application.change_due
        self.logger.info(
            f"Order {order.id}: recorded {application.update_command.payment_type} "
            f"({application.state.status.value}), change due {format_amount(application.change_due)}"
        )
        return PaymentResult(
            success=True,
            order_id=order.id,
            change_due=application.change_due,
            command=application.update_command,
            state=application.state
        )
