from decimal import Decimal
from typing import Dict, Optional

from axlelib.base_class_entity import EntityBase, now_iso
from axlelib.constants import db_structure
from axlelib.restaurants import Restaurant
from axlelib.utils.data import to_money


class UserRole:
    NONE = 'NONE'
    CUSTOMER = 'CUSTOMER'
    RESTAURANT = 'RESTAURANT'
    RIDER = 'RIDER'
    ADMIN = 'ADMIN'

    VALID_ROLES = [NONE, CUSTOMER, RESTAURANT, RIDER, ADMIN]


class User(EntityBase):
    record_template = db_structure.USER

    required_immutable_fields_validation = {
        'id_': lambda x: isinstance(x, str) and len(x) > 0,
        'role': lambda x: x in UserRole.VALID_ROLES,
        'date_created': lambda x: isinstance(x, str)
    }

    required_mutable_fields_validation = {
        'date_updated': lambda x: isinstance(x, str)
    }

    optional_fields_validation = {
        'name_': lambda x: isinstance(x, str),
        'phone': lambda x: isinstance(x, str),
        'email': lambda x: isinstance(x, str),
        'address': lambda x: isinstance(x, str),
        'location': lambda x: isinstance(x, dict) and {'lat', 'lng'} <= x.keys(),
        'amount_owed': lambda x: isinstance(x, Decimal) and x >= 0,
        'is_suspended': lambda x: isinstance(x, bool),
        'restaurant_details': lambda x: isinstance(x, dict)
    }

    def __init__(self, id_, role=UserRole.NONE, **kwargs):
        EntityBase.__init__(self, id_)

        self.role: str = role
        self.name_: str = kwargs.get('name_')
        self.phone: str = kwargs.get('phone')
        self.email: str = kwargs.get('email')
        # customer
        self.address: str = kwargs.get('address')
        self.location: Dict = kwargs.get('location')
        # rider
        self.amount_owed: Optional[Decimal] = None
        self.is_suspended: Optional[bool] = None
        if role == UserRole.RIDER:
            self.amount_owed = to_money(kwargs.get('amount_owed') or 0)
            self.is_suspended = bool(kwargs.get('is_suspended', False))
        # restaurant owner
        self.restaurant_details: Optional[Restaurant] = None
        if kwargs.get('restaurant_details') is not None:
            details = kwargs['restaurant_details']
            self.restaurant_details = details if isinstance(details, Restaurant) else \
                Restaurant.init_by_record(details)
        self.date_created: str = kwargs.get('date_created') or now_iso()
        self.date_updated: str = kwargs.get('date_updated') or now_iso()
        self.record_type = 'user'

    @property
    def is_rider(self) -> bool:
        return self.role == UserRole.RIDER

    def _to_dict(self):
        return {
            'id_': self.id_,
            'role': self.role,
            'name_': self.name_,
            'phone': self.phone,
            'email': self.email,
            'address': self.address,
            'location': self.location,
            'amount_owed': self.amount_owed,
            'is_suspended': self.is_suspended,
            'restaurant_details': self.restaurant_details._to_dict() if self.restaurant_details else None,
            'date_created': self.date_created,
            'date_updated': self.date_updated
        }

    def _to_ui(self):
        item = super()._to_ui()
        if self.restaurant_details is not None:
            item['restaurant_details'] = self.restaurant_details.to_ui()
        return item
