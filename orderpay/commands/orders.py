"""Order pricing command."""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

import click

from ..cli.base import FileInputCommand, command_error_handler
from ..cli.config import Config
from ..domain.items import AnyOrderItem, order_item_from_dict
from ..processors.pricing import price_order, unit_total
from ..processors.receipt import bucket_tax_by_rate
from ..utils.money import format_amount

def load_items(input_file: Path) -> List[AnyOrderItem]:
    """Read items from a JSON file holding either an item list or an order with ``items``."""
    with open(input_file, 'r') as f:
        data = json.load(f)
    if isinstance(data, dict):
        data = data.get('items') or []
    return [order_item_from_dict(item) for item in data]

class PriceOrderCommand(FileInputCommand):
    """Price the items of an order file."""

    name = 'price'
    help = 'Price an order file and show its tax breakdown'

    def __init__(self, config: Config, input_file: Path, output_file: Optional[Path] = None):
        super().__init__(config, input_file, output_file)

    def build_summary(self, items: List[AnyOrderItem]) -> Dict[str, Any]:
        priced = price_order(items)
        buckets = bucket_tax_by_rate(items, priced.order_total, self.config.default_tax_rate)
        return {
            'order_total': format_amount(priced.order_total),
            'non_menu_items': len(priced.non_menu_items),
            'menu_groups': [
                {
                    'key': group.key,
                    'menu_name': group.menu_name,
                    'quantity': group.quantity,
                    'items': len(group.items),
                    'total': format_amount(group.total)
                }
                for group in priced.menu_groups
            ],
            'tax': {
                f"{rate}%": {'base': format_amount(b.base), 'tax': format_amount(b.tax)}
                for rate, b in buckets.items()
            }
        }

    @command_error_handler
    def execute(self) -> Optional[int]:
        if not self.validate():
            return 1

        items = load_items(self.input_file)
        summary = self.build_summary(items)

        if self.output_file or self.config.output_format == 'json':
            text = json.dumps(summary, indent=2)
            if self.output_file:
                self.output_file.write_text(text)
            else:
                click.echo(text)
            return 0

        priced = price_order(items)
        for group in priced.menu_groups:
            click.echo(f"{group.quantity} x {group.menu_name}  {self.money(group.total)}")
        for item in priced.non_menu_items:
            click.echo(f"{item.quantity} x {item.product_name}  {self.money(unit_total(item))}")
        click.echo(f"Total: {self.money(priced.order_total)}")
        for rate, bucket in bucket_tax_by_rate(items, priced.order_total, self.config.default_tax_rate).items():
            click.echo(f"  VAT {rate}%: base {self.money(bucket.base)}, tax {self.money(bucket.tax)}")
        return 0
