"""Payment commands: single-order payment and bulk settlement per delivery person."""

from typing import List, Optional

import click

from ..cli.base import BaseCommand, command_error_handler
from ..cli.config import Config
from ..domain.orders import PaymentStatus, Tender
from ..exceptions import PaymentValidationError
from ..processors.bulk_payment import BulkPaymentAllocator, outstanding_total, select_bulk_candidates
from ..processors.payment import PaymentApplicator, TenderDraft
from ..processors.payment_status import evaluate_order

class PayOrderCommand(BaseCommand):
    """Record a payment against one order."""

    name = 'pay'
    help = 'Record a payment against one order'

    def __init__(self, config: Config, order_id: str, tenders: List[Tender]):
        """Initialize command.

        Args:
            config: Application configuration
            order_id: Order to pay
            tenders: Money handed over per method
        """
        super().__init__(config)
        self.order_id = order_id
        self.tenders = tenders

    @command_error_handler
    def execute(self) -> Optional[int]:
        order = self.store.get_order(self.order_id)
        if order is None:
            click.secho(f"Order {self.order_id} not found", fg='red')
            return 1

        applicator = PaymentApplicator(self.store, debug=self.debug)
        result = applicator.process(order, self.tenders)
        if not result.success:
            click.secho(f"Payment not recorded: {result.error}", fg='red')
            return 1

        state = result.state
        if state.status == PaymentStatus.PAID:
            click.secho(f"Payment completed: {result.command.payment_type}", fg='green')
        else:
            click.secho(
                f"Partial payment recorded: {result.command.payment_type}. "
                f"Remaining: {self.money(state.remaining_amount)}",
                fg='yellow'
            )
        if result.change_due > 0:
            click.echo(f"Change to return: {self.money(result.change_due)}")
        return 0

class BulkPayCommand(BaseCommand):
    """Settle the delivered, unpaid orders of one delivery person."""

    name = 'bulk-pay'
    help = 'Spread one payment over a delivery person\'s outstanding orders'

    def __init__(self, config: Config, delivery_person_id: str, tenders: List[Tender]):
        super().__init__(config)
        self.delivery_person_id = delivery_person_id
        self.tenders = tenders

    @command_error_handler
    def execute(self) -> Optional[int]:
        orders = self.store.list_orders(delivery_person_id=self.delivery_person_id)
        candidates = select_bulk_candidates(orders, self.delivery_person_id)
        if not candidates:
            click.secho("No orders found for this delivery person", fg='yellow')
            return 0

        due = outstanding_total(candidates)
        draft = TenderDraft(due)
        try:
            for tender in self.tenders:
                draft.add(tender.method, tender.tendered_amount)
        except PaymentValidationError as e:
            click.secho(str(e), fg='red')
            return 1

        self.logger.info(
            f"Applying {self.money(draft.total)} to {len(candidates)} orders "
            f"(outstanding {self.money(due)})"
        )
        allocator = BulkPaymentAllocator(self.store, debug=self.debug)
        result = allocator.allocate(candidates, draft.entries)

        for allocation in result.per_order_results:
            order_status = 'ok' if allocation.success else f"FAILED ({allocation.error})"
            click.echo(f"  {allocation.order_id}: {self.money(allocation.applied)} -> {allocation.command.payment_type} [{order_status}]")

        if result.full_success:
            click.secho(f"Bulk payment processed successfully for {result.applied_count} orders", fg='green')
            return 0
        click.secho(
            f"Payment processed for {result.applied_count} out of {result.attempted_count} orders",
            fg='yellow'
        )
        return 1

class OrderStatusCommand(BaseCommand):
    """Show the payment status of one order."""

    name = 'status'
    help = 'Show the payment status of one order'

    def __init__(self, config: Config, order_id: str):
        super().__init__(config)
        self.order_id = order_id

    @command_error_handler
    def execute(self) -> Optional[int]:
        order = self.store.get_order(self.order_id)
        if order is None:
            click.secho(f"Order {self.order_id} not found", fg='red')
            return 1

        state = evaluate_order(order)
        click.echo(f"Order {order.order_id or order.id}: {state.status.value}")
        click.echo(f"  Paid: {self.money(state.total_paid)}")
        click.echo(f"  Remaining: {self.money(state.remaining_amount)}")
        for entry in state.breakdown:
            click.echo(f"    {entry.type}: {self.money(entry.amount)}")
        return 0
