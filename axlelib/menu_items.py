from decimal import Decimal
from typing import Dict

from axlelib.base_class_entity import EntityBase
from axlelib.constants import db_structure
from axlelib.utils.data import to_money


class MenuItem(EntityBase):
    record_template = db_structure.MENU_ITEM

    required_immutable_fields_validation = {
        'id_': lambda x: isinstance(x, str) and len(x) > 0,
        'restaurant_id': lambda x: isinstance(x, str)
    }

    required_mutable_fields_validation = {
        'name_': lambda x: isinstance(x, str) and len(x) > 0,
        'price': lambda x: isinstance(x, Decimal) and x > 0,
        'category': lambda x: isinstance(x, str)
    }

    optional_fields_validation = {
        'description': lambda x: isinstance(x, str),
        'image': lambda x: isinstance(x, str)
    }

    def __init__(self, id_, restaurant_id, **kwargs):
        EntityBase.__init__(self, id_)

        self.restaurant_id: str = restaurant_id
        self.name_: str = kwargs.get('name_')
        self.description: str = kwargs.get('description')
        self.price: Decimal = to_money(kwargs.get('price')) if \
            type(kwargs.get('price')) in [int, float, Decimal] else None
        self.image: str = kwargs.get('image')
        self.category: str = kwargs.get('category') or 'General'
        self.record_type = 'menu_item'

    def _to_dict(self) -> Dict:
        return {
            'id_': self.id_,
            'restaurant_id': self.restaurant_id,
            'name_': self.name_,
            'description': self.description,
            'price': self.price,
            'image': self.image,
            'category': self.category
        }
