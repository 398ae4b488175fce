"""Receipt inputs: printer fan-out and per-rate tax breakdown.

Every item carries routing tags ``"printerId|printerName|isMain"``. The main
printer prints the customer receipt with prices, totals and tax breakdown;
every other printer gets a kitchen ticket listing items and add-ons only.
Turning these structures into printable markup is left to the host.
"""

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Tuple

from ..domain.items import AnyOrderItem, MenuGroup, MenuItem, NonMenuItem
from ..utils.money import ZERO
from .pricing import price_order, tax_percentage

logger = logging.getLogger(__name__)

DEFAULT_TAX_RATE = 10

PrinterKey = Tuple[str, bool]

@dataclass(frozen=True)
class PrinterRoute:
    """A parsed routing tag."""
    printer_id: str
    printer_name: str
    is_main: bool

    @property
    def key(self) -> PrinterKey:
        return (self.printer_name, self.is_main)

@dataclass
class TaxBucket:
    """Accumulated base and tax for one whole-number rate."""
    base: Decimal = ZERO
    tax: Decimal = ZERO

@dataclass
class PrintJob:
    """Everything one printer needs for this order."""
    printer_name: str
    is_main: bool
    items: List[AnyOrderItem] = field(default_factory=list)
    non_menu_items: List[NonMenuItem] = field(default_factory=list)
    menu_groups: List[MenuGroup] = field(default_factory=list)
    tax_buckets: Optional[Dict[int, TaxBucket]] = None
    order_total: Optional[Decimal] = None

def parse_printer_tag(tag: str) -> Optional[PrinterRoute]:
    """Parse ``"printerId|printerName|isMain"``; None for a malformed tag."""
    parts = tag.split('|')
    if len(parts) < 3:
        logger.warning(f"Ignoring malformed printer tag {tag!r}")
        return None
    return PrinterRoute(printer_id=parts[0], printer_name=parts[1], is_main=parts[2] == 'true')

def group_by_printer(items: Iterable[AnyOrderItem]) -> Dict[PrinterKey, List[AnyOrderItem]]:
    """Fan items out to the printers named in their routing tags.

    An item tagged for several printers appears in each of their groups.
    Groups are keyed by ``(printer_name, is_main)`` in first-seen order.
    """
    groups: Dict[PrinterKey, List[AnyOrderItem]] = {}
    for item in items:
        for tag in item.printers:
            route = parse_printer_tag(tag)
            if route is None:
                continue
            group = groups.setdefault(route.key, [])
            if not any(existing is item for existing in group):
                group.append(item)
    return groups

def _bucket_source(item: AnyOrderItem) -> Tuple[Decimal, Decimal]:
    if isinstance(item, MenuItem):
        return item.menu_price, item.menu_tax
    return item.product_price, item.product_tax

def bucket_tax_by_rate(
    items: Iterable[AnyOrderItem],
    order_total: Optional[Decimal] = None,
    default_rate: int = DEFAULT_TAX_RATE
) -> Dict[int, TaxBucket]:
    """Accumulate base and tax amounts per rounded tax rate.

    Menu items contribute their menu price and menu tax, other items their
    product price and product tax, each times the item quantity. An order
    without items gets a single synthetic bucket at ``default_rate`` carved
    out of ``order_total``.

    Args:
        items: Order lines
        order_total: Total used for the synthetic bucket; priced from
            ``items`` when omitted
        default_rate: Rate of the synthetic bucket, in percent

    Returns:
        Buckets keyed by integer rate percent
    """
    items = list(items)
    buckets: Dict[int, TaxBucket] = {}
    for item in items:
        base, tax = _bucket_source(item)
        bucket = buckets.setdefault(tax_percentage(base, tax), TaxBucket())
        bucket.base += base * item.quantity
        bucket.tax += tax * item.quantity

    if not buckets:
        if order_total is None:
            order_total = price_order(items).order_total
        divisor = Decimal(100 + default_rate)
        buckets[default_rate] = TaxBucket(
            base=order_total * 100 / divisor,
            tax=order_total * default_rate / divisor
        )
    return buckets

def _priority(item: AnyOrderItem) -> int:
    return item.product_priority or 0

def prepare_print_jobs(items: Iterable[AnyOrderItem], default_tax_rate: int = DEFAULT_TAX_RATE) -> List[PrintJob]:
    """Build one print job per routed printer.

    Items are ordered by product priority (stable for ties) before grouping,
    so menu members come out in priority order too. Only the main printer's
    job carries tax buckets and the order total.
    """
    jobs = []
    for (printer_name, is_main), routed in group_by_printer(items).items():
        ordered = sorted(routed, key=_priority)
        priced = price_order(ordered)
        job = PrintJob(
            printer_name=printer_name,
            is_main=is_main,
            items=ordered,
            non_menu_items=priced.non_menu_items,
            menu_groups=priced.menu_groups
        )
        if is_main:
            job.order_total = priced.order_total
            job.tax_buckets = bucket_tax_by_rate(ordered, priced.order_total, default_tax_rate)
        jobs.append(job)
    return jobs
