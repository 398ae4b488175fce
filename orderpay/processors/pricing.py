"""Order pricing: line contributions, menu-instance grouping and order totals.

Amounts stay at full Decimal precision here; rounding to cents happens only
where a value is displayed or split between payment methods.
"""

import logging
from dataclasses import dataclass, field
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Iterable, List

from ..domain.items import AnyOrderItem, MenuGroup, MenuItem, NonMenuItem
from ..utils.money import ZERO

logger = logging.getLogger(__name__)

@dataclass
class PricedOrder:
    """Result of pricing a list of order items."""
    order_total: Decimal = ZERO
    non_menu_items: List[NonMenuItem] = field(default_factory=list)
    menu_groups: List[MenuGroup] = field(default_factory=list)

def non_menu_unit_price(item: AnyOrderItem) -> Decimal:
    """Per-unit price of a standalone product, tax included, discount applied."""
    return (
        item.product_price
        + item.product_tax
        - item.product_discount
        + item.variant_price
        + item.complements_total
    )

def unit_total(item: AnyOrderItem) -> Decimal:
    """Line total of a single item, without any order context.

    For a standalone product this is its unit price times quantity. For a menu
    item it is ``(menu_price + menu_tax + supplement) * quantity``: the menu
    price is attributed to every member line and variants/add-ons are left
    out. Receipts already rely on that figure, so it is kept as is even though
    it does not add up to the group total.

    Args:
        item: Order line

    Returns:
        Line total
    """
    if isinstance(item, MenuItem):
        return (item.menu_price + item.menu_tax + item.supplement) * item.quantity
    return non_menu_unit_price(item) * item.quantity

def group_menu_items(items: Iterable[AnyOrderItem]) -> List[MenuGroup]:
    """Fold menu items into menu instances keyed by ``(menu_id, menu_secondary_id)``.

    Groups come out in first-seen order and members keep input order. Menu
    price and tax come from the first member of each group.
    """
    groups: Dict[str, MenuGroup] = {}
    for item in items:
        if not isinstance(item, MenuItem):
            continue
        group = groups.get(item.group_key)
        if group is None:
            group = MenuGroup(
                key=item.group_key,
                menu_id=item.menu_id,
                menu_name=item.menu_name,
                secondary_id=item.menu_secondary_id,
                base_price=item.menu_price,
                tax_per_unit=item.menu_tax
            )
            groups[item.group_key] = group
        elif item.quantity != group.quantity:
            logger.warning(
                f"Menu group {group.key} has mixed quantities "
                f"({group.quantity} and {item.quantity}); using {group.quantity}"
            )
        group.supplement_total += item.supplement
        group.items.append(item)
    return list(groups.values())

def price_order(items: Iterable[AnyOrderItem]) -> PricedOrder:
    """Price an order.

    Args:
        items: Order lines, menu and non-menu mixed in any order

    Returns:
        PricedOrder with the order total, the standalone items and the menu
        groups
    """
    items = list(items)
    non_menu_items = [item for item in items if not isinstance(item, MenuItem)]
    menu_groups = group_menu_items(items)

    non_menu_total = sum((unit_total(item) for item in non_menu_items), ZERO)
    menu_total = sum((group.total for group in menu_groups), ZERO)

    return PricedOrder(
        order_total=non_menu_total + menu_total,
        non_menu_items=non_menu_items,
        menu_groups=menu_groups
    )

def tax_percentage(base: Decimal, tax: Decimal) -> int:
    """Whole-number tax rate implied by a base/tax pair; 0 for a non-positive base."""
    if base <= 0:
        return 0
    return int((tax / base * 100).quantize(Decimal('1'), rounding=ROUND_HALF_UP))
