from decimal import Decimal
from typing import List, Dict, Optional

from axlelib.base_class_entity import EntityBase, now_iso
from axlelib.constants import db_structure
from axlelib.menu_items import MenuItem
from axlelib.utils import exceptions
from axlelib.utils.logger import logger


class VerificationStatus:
    PENDING = 'PENDING'
    APPROVED = 'APPROVED'
    REJECTED = 'REJECTED'

    VALID_STATUSES = [PENDING, APPROVED, REJECTED]


class Restaurant(EntityBase):
    record_template = db_structure.RESTAURANT

    required_immutable_fields_validation = {
        'id_': lambda x: isinstance(x, str) and len(x) > 0,
        'date_created': lambda x: isinstance(x, str)
    }

    required_mutable_fields_validation = {
        'name_': lambda x: isinstance(x, str) and len(x) > 0,
        'menu': lambda x: isinstance(x, list),
        'categories': lambda x: isinstance(x, list),
        'is_verified': lambda x: x in VerificationStatus.VALID_STATUSES,
        'date_updated': lambda x: isinstance(x, str)
    }

    optional_fields_validation = {
        'image': lambda x: isinstance(x, str),
        'rating': lambda x: isinstance(x, (int, Decimal)),
        'delivery_time': lambda x: isinstance(x, str),
        'owner_name': lambda x: isinstance(x, str),
        'email': lambda x: isinstance(x, str),
        'phone': lambda x: isinstance(x, str),
        'address': lambda x: isinstance(x, str),
        'location': lambda x: isinstance(x, dict) and {'lat', 'lng'} <= x.keys()
    }

    def __init__(self, id_, **kwargs):
        EntityBase.__init__(self, id_)

        self.name_: str = kwargs.get('name_')
        self.image: str = kwargs.get('image')
        self.rating: Optional[Decimal] = kwargs.get('rating')
        self.delivery_time: str = kwargs.get('delivery_time')
        self.categories: list = kwargs.get('categories') or []
        self.menu: List[MenuItem] = [
            item if isinstance(item, MenuItem) else MenuItem.init_by_record({'restaurant_id': id_, **item})
            for item in kwargs.get('menu') or []
        ]
        self.owner_name: str = kwargs.get('owner_name')
        self.email: str = kwargs.get('email')
        self.phone: str = kwargs.get('phone')
        self.address: str = kwargs.get('address')
        self.location: Dict = kwargs.get('location')
        self.is_verified: str = kwargs.get('is_verified') or VerificationStatus.PENDING
        self.date_created: str = kwargs.get('date_created') or now_iso()
        self.date_updated: str = kwargs.get('date_updated') or now_iso()
        self.record_type = 'restaurant'

    @property
    def is_approved(self) -> bool:
        return self.is_verified == VerificationStatus.APPROVED

    def get_menu_item(self, menu_item_id) -> MenuItem:
        for item in self.menu:
            if item.id_ == menu_item_id:
                return item
        raise exceptions.MenuItemNotFound(f'menu item {menu_item_id} not found in restaurant {self.id_}')

    def with_menu_item(self, menu_item: MenuItem) -> 'Restaurant':
        """ Copy of the restaurant with menu_item added or replaced, menu order is kept """
        restaurant = self.copy()
        for index, item in enumerate(restaurant.menu):
            if item.id_ == menu_item.id_:
                restaurant.menu[index] = menu_item
                break
        else:
            restaurant.menu.append(menu_item)
        restaurant.date_updated = now_iso()
        return restaurant

    def with_verification(self, status: str) -> 'Restaurant':
        if status not in VerificationStatus.VALID_STATUSES:
            raise exceptions.ValidationException(f'Unknown verification status {status}')
        restaurant = self.copy()
        restaurant.is_verified = status
        restaurant.date_updated = now_iso()
        logger.info(f"with_verification ::: restaurant {self.id_} {self.is_verified} -> {status}")
        return restaurant

    def _to_dict(self):
        return {
            'id_': self.id_,
            'name_': self.name_,
            'image': self.image,
            'rating': self.rating,
            'delivery_time': self.delivery_time,
            'categories': self.categories,
            'menu': [item._to_dict() for item in self.menu],
            'owner_name': self.owner_name,
            'email': self.email,
            'phone': self.phone,
            'address': self.address,
            'location': self.location,
            'is_verified': self.is_verified,
            'date_created': self.date_created,
            'date_updated': self.date_updated
        }

    def _to_ui(self):
        item = super()._to_ui()
        item['menu'] = [menu_item.to_ui() for menu_item in self.menu]
        return item
