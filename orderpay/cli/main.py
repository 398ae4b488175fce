"""
Core CLI implementation for the orderpay package.
"""

import click
from pathlib import Path
from typing import List, Tuple

from .config import Config
from .logging import setup_logging, get_logger
from ..domain.orders import Tender
from ..commands import (
    PriceOrderCommand,
    PayOrderCommand,
    BulkPayCommand,
    OrderStatusCommand,
    PaymentReportCommand
)

def parse_tenders(ctx, param, values: Tuple[str, ...]) -> List[Tender]:
    """Click callback turning repeated METHOD:AMOUNT options into tenders."""
    try:
        return [Tender.parse(value) for value in values]
    except ValueError as e:
        raise click.BadParameter(str(e))

def load_config(require_database: bool = True) -> Config:
    """Load and validate configuration, then apply its log level."""
    config = Config.from_env(require_database=require_database)
    config.validate()
    ctx = click.get_current_context(silent=True)
    debug = bool(ctx and ctx.obj and ctx.obj.get('debug'))
    setup_logging(debug=debug, level=config.log_level)
    return config

def run(command) -> None:
    """Execute a command and turn a non-zero result into the process exit code."""
    code = command.execute()
    if code:
        click.get_current_context().exit(code)

@click.group()
@click.option('--debug', is_flag=True, help='Enable detailed debug output')
@click.pass_context
def cli(ctx, debug: bool):
    """Order pricing and payment reconciliation tool"""
    ctx.ensure_object(dict)
    ctx.obj['debug'] = debug
    
    setup_logging(debug=debug)
    logger = get_logger('cli')
    if debug:
        logger.debug("Debug mode enabled")

@cli.command()
@click.argument('file', type=click.Path(exists=True, file_okay=True, dir_okay=False, path_type=Path))
@click.option('--output', type=click.Path(file_okay=True, dir_okay=False, path_type=Path), help='Save the price summary as JSON')
def price(file: Path, output: Path | None):
    """Price an order JSON file and show its tax breakdown."""
    try:
        config = load_config(require_database=False)
    except Exception as e:
        click.secho(f"Error: {str(e)}", fg='red')
        raise click.Abort()
    run(PriceOrderCommand(config, file, output))

@cli.command()
@click.argument('order_id')
@click.option('-p', '--payment', 'tenders', multiple=True, required=True, callback=parse_tenders,
              help='Tendered amount as METHOD:AMOUNT, e.g. cash:20 (repeatable)')
def pay(order_id: str, tenders: List[Tender]):
    """Record a payment against one order."""
    try:
        config = load_config()
    except Exception as e:
        click.secho(f"Error: {str(e)}", fg='red')
        raise click.Abort()
    run(PayOrderCommand(config, order_id, tenders))

@cli.command('bulk-pay')
@click.argument('delivery_person_id')
@click.option('-p', '--payment', 'tenders', multiple=True, required=True, callback=parse_tenders,
              help='Payment as METHOD:AMOUNT, e.g. cash:40 (repeatable)')
def bulk_pay(delivery_person_id: str, tenders: List[Tender]):
    """Spread one payment over a delivery person's delivered, unpaid orders."""
    try:
        config = load_config()
    except Exception as e:
        click.secho(f"Error: {str(e)}", fg='red')
        raise click.Abort()
    run(BulkPayCommand(config, delivery_person_id, tenders))

@cli.command()
@click.argument('order_id')
def status(order_id: str):
    """Show the payment status of one order."""
    try:
        config = load_config()
    except Exception as e:
        click.secho(f"Error: {str(e)}", fg='red')
        raise click.Abort()
    run(OrderStatusCommand(config, order_id))

@cli.command()
@click.option('--delivery-person', 'delivery_person_id', help='Only orders of this delivery person')
@click.option('--status', 'order_status', help='Only orders with this status')
@click.option('--output', type=click.Path(file_okay=True, dir_okay=False, path_type=Path), help='Save the report to file')
def report(delivery_person_id: str | None, order_status: str | None, output: Path | None):
    """Summarise payments per order and per payment method."""
    try:
        config = load_config()
    except Exception as e:
        click.secho(f"Error: {str(e)}", fg='red')
        raise click.Abort()
    run(PaymentReportCommand(config, delivery_person_id, order_status, output))

if __name__ == '__main__':
    cli()
