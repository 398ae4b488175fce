"""Payment report command."""

from pathlib import Path
from typing import Optional

import click

from ..cli.base import BaseCommand, command_error_handler
from ..cli.config import Config
from ..processors.report import payment_summary, totals_by_method

class PaymentReportCommand(BaseCommand):
    """Summarise payments per order and per method."""

    name = 'report'
    help = 'Summarise payments per order and per payment method'

    def __init__(self, config: Config, delivery_person_id: Optional[str] = None,
                 status: Optional[str] = None, output_file: Optional[Path] = None):
        super().__init__(config)
        self.delivery_person_id = delivery_person_id
        self.status = status
        self.output_file = output_file

    @command_error_handler
    def execute(self) -> Optional[int]:
        orders = self.store.list_orders(status=self.status, delivery_person_id=self.delivery_person_id)
        df = payment_summary(orders)
        self.logger.info(f"Reporting on {len(df)} orders")

        output_format = self.config.output_format
        if self.output_file:
            if output_format == 'json':
                df.to_json(self.output_file, orient='records', indent=2)
            else:
                df.to_csv(self.output_file, index=False)
            click.echo(f"Report written to {self.output_file}")
            return 0

        if output_format == 'json':
            click.echo(df.to_json(orient='records', indent=2))
        elif output_format == 'csv':
            click.echo(df.to_csv(index=False), nl=False)
        else:
            click.echo(df.to_string(index=False) if not df.empty else "No orders found")
            totals = totals_by_method(orders)
            if not totals.empty:
                click.echo("\nTotals by payment method:")
                for method, amount in totals.items():
                    click.echo(f"  {method}: {self.money(amount)}")
        return 0
