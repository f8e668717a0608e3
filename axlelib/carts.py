from decimal import Decimal
from typing import Dict, List, Optional

from axlelib.constants import db_structure
from axlelib.menu_items import MenuItem
from axlelib.utils import exceptions
from axlelib.utils.logger import logger


class CartItem(MenuItem):
    record_template = db_structure.CART_ITEM

    required_mutable_fields_validation = {
        **MenuItem.required_mutable_fields_validation,
        'quantity': lambda x: isinstance(x, int) and not isinstance(x, bool) and x > 0
    }

    def __init__(self, id_, restaurant_id, quantity=1, **kwargs):
        MenuItem.__init__(self, id_, restaurant_id, **kwargs)
        self.quantity: int = int(quantity) if isinstance(quantity, Decimal) else quantity
        self.record_type = 'cart_item'

    @classmethod
    def from_menu_item(cls, menu_item: MenuItem, quantity: int = 1) -> 'CartItem':
        return cls(quantity=quantity, **MenuItem._to_dict(menu_item.copy()))

    @property
    def subtotal(self) -> Decimal:
        return self.price * self.quantity

    def _to_dict(self) -> Dict:
        return {
            **MenuItem._to_dict(self),
            'quantity': self.quantity
        }


class Cart:
    """
    Session cart: item id -> CartItem, items of a single restaurant.
    Adding an item of another restaurant starts a fresh cart.
    """

    def __init__(self):
        self.restaurant_id: Optional[str] = None
        self.menu_items: Dict[str, CartItem] = {}

    def add_item(self, menu_item: MenuItem, quantity: int = 1) -> CartItem:
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
            raise exceptions.ValidationException(f'quantity must be a positive integer, got {quantity!r}')
        if menu_item.restaurant_id != self.restaurant_id:
            if self.menu_items:
                logger.info(f"add_item ::: switching cart from restaurant {self.restaurant_id} "
                            f"to {menu_item.restaurant_id}, dropping {len(self.menu_items)} items")
            self.clear()
            self.restaurant_id = menu_item.restaurant_id
        if menu_item.id_ in self.menu_items:
            self.menu_items[menu_item.id_].quantity += quantity
        else:
            self.menu_items[menu_item.id_] = CartItem.from_menu_item(menu_item, quantity)
        return self.menu_items[menu_item.id_]

    def remove_item(self, menu_item_id: str) -> None:
        if menu_item_id not in self.menu_items:
            raise exceptions.MenuItemNotFound(f'menu item {menu_item_id} is not in the cart')
        self.menu_items.pop(menu_item_id)
        if not self.menu_items:
            self.restaurant_id = None

    def clear(self) -> None:
        self.menu_items = {}
        self.restaurant_id = None

    @property
    def items(self) -> List[CartItem]:
        return list(self.menu_items.values())

    @property
    def item_total(self) -> Decimal:
        return sum((item.subtotal for item in self.menu_items.values()), Decimal('0.00'))

    def is_empty(self) -> bool:
        return not self.menu_items

    def to_ui(self) -> Dict:
        return {
            'restaurant_id': self.restaurant_id,
            'items': [item.to_ui() for item in self.items],
            'item_total': self.item_total
        }
