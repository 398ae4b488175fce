"""Order line item variants and derived menu groups.

An order line is either a plain product (``NonMenuItem``) or a product picked
as part of a fixed-price menu instance (``MenuItem``). Both share the product,
variant, add-on and routing facets; only menu items carry the menu facet.
Wire dicts use the host's camelCase keys; snake_case keys are accepted too.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, List, Optional, Union

from ..exceptions import PaymentValidationError
from ..utils.money import ZERO, to_decimal

@dataclass
class Complement:
    """A flat per-unit add-on chosen for an item."""
    group_id: str = ''
    group_name: str = ''
    item_id: str = ''
    item_name: str = ''
    price: Decimal = ZERO
    priority: int = 0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Complement':
        return cls(
            group_id=str(_pick(data, 'groupId', 'group_id') or ''),
            group_name=_pick(data, 'groupName', 'group_name') or '',
            item_id=str(_pick(data, 'itemId', 'item_id') or ''),
            item_name=_pick(data, 'itemName', 'item_name') or '',
            price=to_decimal(data.get('price')),
            priority=int(data.get('priority') or 0)
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'groupId': self.group_id,
            'groupName': self.group_name,
            'itemId': self.item_id,
            'itemName': self.item_name,
            'price': str(self.price),
            'priority': self.priority
        }

@dataclass
class OrderItem:
    """Fields common to every order line."""
    id: Optional[str] = None
    product_id: str = ''
    product_name: str = ''
    product_price: Decimal = ZERO
    product_tax: Decimal = ZERO
    product_discount: Decimal = ZERO
    product_priority: int = 0
    variant_id: Optional[str] = None
    variant_name: Optional[str] = None
    variant_price: Decimal = ZERO
    complements: List[Complement] = field(default_factory=list)
    printers: List[str] = field(default_factory=list)
    quantity: int = 1
    total_price: Decimal = ZERO

    def __post_init__(self):
        if self.quantity < 1:
            raise PaymentValidationError(
                f"Item {self.product_name or self.product_id!r} has quantity {self.quantity}, expected >= 1"
            )

    @property
    def complements_total(self) -> Decimal:
        return sum((c.price for c in self.complements), ZERO)

    @property
    def extras_per_unit(self) -> Decimal:
        """Variant surcharge plus add-ons, charged per unit for every item kind."""
        return self.variant_price + self.complements_total

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'productId': self.product_id,
            'productName': self.product_name,
            'productPrice': str(self.product_price),
            'productTax': str(self.product_tax),
            'productDiscount': str(self.product_discount),
            'productPriority': self.product_priority,
            'variantId': self.variant_id,
            'variantName': self.variant_name,
            'variantPrice': str(self.variant_price),
            'complements': [c.to_dict() for c in self.complements],
            'printers': list(self.printers),
            'quantity': self.quantity,
            'totalPrice': str(self.total_price)
        }

@dataclass
class NonMenuItem(OrderItem):
    """A product ordered on its own."""

@dataclass
class MenuItem(OrderItem):
    """A product chosen inside a menu instance.

    Items sharing ``(menu_id, menu_secondary_id)`` form one menu instance and
    carry the same quantity, menu price and menu tax.
    """
    menu_id: str = ''
    menu_secondary_id: int = 0
    menu_name: str = ''
    menu_price: Decimal = ZERO
    menu_tax: Decimal = ZERO
    supplement: Decimal = ZERO
    menu_page_id: Optional[str] = None
    menu_page_name: Optional[str] = None

    def __post_init__(self):
        super().__post_init__()
        if not self.menu_id:
            raise PaymentValidationError("MenuItem requires a menu_id")

    @property
    def group_key(self) -> str:
        return f"{self.menu_id}-{self.menu_secondary_id}"

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data.update({
            'menuId': self.menu_id,
            'menuSecondaryId': self.menu_secondary_id,
            'menuName': self.menu_name,
            'menuPrice': str(self.menu_price),
            'menuTax': str(self.menu_tax),
            'supplement': str(self.supplement),
            'menuPageId': self.menu_page_id,
            'menuPageName': self.menu_page_name
        })
        return data

AnyOrderItem = Union[NonMenuItem, MenuItem]

@dataclass
class MenuGroup:
    """One physical menu instance inside an order (derived, never stored)."""
    key: str
    menu_id: str
    menu_name: str
    secondary_id: int
    base_price: Decimal
    tax_per_unit: Decimal
    supplement_total: Decimal = ZERO
    items: List[MenuItem] = field(default_factory=list)

    @property
    def quantity(self) -> int:
        return self.items[0].quantity if self.items else 1

    @property
    def base_total(self) -> Decimal:
        """Menu price, menu tax and every member supplement, times the group quantity."""
        return (self.base_price + self.tax_per_unit + self.supplement_total) * self.quantity

    @property
    def extras_total(self) -> Decimal:
        return sum((item.extras_per_unit * item.quantity for item in self.items), ZERO)

    @property
    def total(self) -> Decimal:
        return self.base_total + self.extras_total

def _pick(data: Dict[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return None

def order_item_from_dict(data: Dict[str, Any]) -> AnyOrderItem:
    """Build the right item variant from a wire dict.

    Args:
        data: Item dict as stored by the host application

    Returns:
        MenuItem when a menu id is present, NonMenuItem otherwise
    """
    complements = [
        c if isinstance(c, Complement) else Complement.from_dict(c)
        for c in (data.get('complements') or [])
    ]
    common = dict(
        id=_pick(data, 'id'),
        product_id=str(_pick(data, 'productId', 'product_id') or ''),
        product_name=_pick(data, 'productName', 'product_name') or '',
        product_price=to_decimal(_pick(data, 'productPrice', 'product_price')),
        product_tax=to_decimal(_pick(data, 'productTax', 'product_tax')),
        product_discount=to_decimal(_pick(data, 'productDiscount', 'product_discount')),
        product_priority=int(_pick(data, 'productPriority', 'product_priority') or 0),
        variant_id=_pick(data, 'variantId', 'variant_id'),
        variant_name=_pick(data, 'variantName', 'variant_name'),
        variant_price=to_decimal(_pick(data, 'variantPrice', 'variant_price')),
        complements=complements,
        printers=list(data.get('printers') or []),
        quantity=int(data['quantity']) if data.get('quantity') is not None else 1,
        total_price=to_decimal(_pick(data, 'totalPrice', 'total_price'))
    )

    menu_id = _pick(data, 'menuId', 'menu_id')
    if not menu_id:
        return NonMenuItem(**common)

    return MenuItem(
        menu_id=str(menu_id),
        menu_secondary_id=int(_pick(data, 'menuSecondaryId', 'menu_secondary_id') or 0),
        menu_name=_pick(data, 'menuName', 'menu_name') or '',
        menu_price=to_decimal(_pick(data, 'menuPrice', 'menu_price')),
        menu_tax=to_decimal(_pick(data, 'menuTax', 'menu_tax')),
        supplement=to_decimal(_pick(data, 'supplement')),
        menu_page_id=_pick(data, 'menuPageId', 'menu_page_id'),
        menu_page_name=_pick(data, 'menuPageName', 'menu_page_name'),
        **common
    )
