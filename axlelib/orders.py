from decimal import Decimal
from typing import List, Dict, Optional, NamedTuple

from axlelib.base_class_entity import EntityBase, now_iso
from axlelib.carts import CartItem
from axlelib.constants import db_structure
from axlelib.constants.constants import PAYMENT_METHOD_COD
from axlelib.utils import exceptions
from axlelib.utils.data import to_money


class OrderStatus:
    """
    Order statuses and the transitions allowed between them.

    Status Flow:
        PENDING -> PREPARING -> READY_FOR_PICKUP -> OUT_FOR_DELIVERY -> DELIVERED
        any non-terminal status -> CANCELLED
    """

    PENDING = 'PENDING'
    PREPARING = 'PREPARING'
    READY_FOR_PICKUP = 'READY_FOR_PICKUP'
    OUT_FOR_DELIVERY = 'OUT_FOR_DELIVERY'
    DELIVERED = 'DELIVERED'
    CANCELLED = 'CANCELLED'

    VALID_STATUSES = [PENDING, PREPARING, READY_FOR_PICKUP, OUT_FOR_DELIVERY, DELIVERED, CANCELLED]
    TERMINAL_STATUSES = [DELIVERED, CANCELLED]

    TRANSITIONS = {
        PENDING: [PREPARING, CANCELLED],
        PREPARING: [READY_FOR_PICKUP, CANCELLED],
        READY_FOR_PICKUP: [OUT_FOR_DELIVERY, CANCELLED],
        OUT_FOR_DELIVERY: [DELIVERED, CANCELLED],
        DELIVERED: [],
        CANCELLED: []
    }

    @classmethod
    def is_valid_status(cls, status) -> bool:
        return status in cls.VALID_STATUSES

    @classmethod
    def is_terminal(cls, status) -> bool:
        return status in cls.TERMINAL_STATUSES

    @classmethod
    def is_valid_transition(cls, current_status, new_status) -> bool:
        if current_status not in cls.TRANSITIONS:
            return False
        return new_status in cls.TRANSITIONS[current_status]


class RiderAssignment(NamedTuple):
    rider_id: str
    rider_name: str
    rider_phone: str


class Feedback:
    MIN_RATING = 1
    MAX_RATING = 5

    def __init__(self, rating, comment_='', timestamp_=None):
        if isinstance(rating, bool) or not isinstance(rating, (int, Decimal)) or \
                int(rating) != rating or not self.MIN_RATING <= rating <= self.MAX_RATING:
            raise exceptions.ValidationException(
                f'rating must be an integer between {self.MIN_RATING} and {self.MAX_RATING}, got {rating!r}')
        self.rating: int = int(rating)
        self.comment_: str = comment_ or ''
        self.timestamp_: str = timestamp_ or now_iso()

    @classmethod
    def init_by_record(cls, record: Dict) -> 'Feedback':
        return cls(**{**db_structure.FEEDBACK, **record})

    def _to_dict(self) -> Dict:
        return {
            'rating': self.rating,
            'comment_': self.comment_,
            'timestamp_': self.timestamp_
        }


class Order(EntityBase):
    record_template = db_structure.ORDER

    required_immutable_fields_validation = {
        'id_': lambda x: isinstance(x, str) and len(x) > 0,
        'customer_id': lambda x: isinstance(x, str),
        'restaurant_id': lambda x: isinstance(x, str),
        'restaurant_name': lambda x: isinstance(x, str),
        'items': lambda x: isinstance(x, list) and len(x) > 0,
        'item_total': lambda x: isinstance(x, Decimal),
        'delivery_fee': lambda x: isinstance(x, Decimal),
        'platform_fee': lambda x: isinstance(x, Decimal),
        'total': lambda x: isinstance(x, Decimal),
        'date_created': lambda x: isinstance(x, str),
        'delivery_address': lambda x: isinstance(x, str),
        'payment_method': lambda x: x == PAYMENT_METHOD_COD
    }

    required_mutable_fields_validation = {
        'status_': lambda x: OrderStatus.is_valid_status(x),
        'rider_arrived': lambda x: isinstance(x, bool),
        'date_updated': lambda x: isinstance(x, str),
        'history': lambda x: isinstance(x, list)
    }

    optional_fields_validation = {
        'delivery_location': lambda x: isinstance(x, dict) and {'lat', 'lng'} <= x.keys(),
        'rider_id': lambda x: isinstance(x, str),
        'rider_name': lambda x: isinstance(x, str),
        'rider_phone': lambda x: isinstance(x, str),
        'estimated_time': lambda x: isinstance(x, str),
        'feedback': lambda x: isinstance(x, dict),
        'settlement': lambda x: isinstance(x, dict)
    }

    def __init__(self, id_, customer_id, restaurant_id, **kwargs):
        EntityBase.__init__(self, id_)

        self.customer_id: str = customer_id
        self.restaurant_id: str = restaurant_id
        self.restaurant_name: str = kwargs.get('restaurant_name')
        self.items: List[CartItem] = [
            item if isinstance(item, CartItem) else CartItem.init_by_record(item)
            for item in kwargs.get('items') or []
        ]
        self.item_total: Decimal = to_money(kwargs.get('item_total') or 0)
        self.delivery_fee: Decimal = to_money(kwargs.get('delivery_fee') or 0)
        self.platform_fee: Decimal = to_money(kwargs.get('platform_fee') or 0)
        self.total: Decimal = to_money(kwargs.get('total') or 0)
        self.status_: str = kwargs.get('status_') or OrderStatus.PENDING
        self.date_created: str = kwargs.get('date_created') or now_iso()
        self.date_updated: str = kwargs.get('date_updated') or self.date_created
        self.delivery_address: str = kwargs.get('delivery_address')
        self.delivery_location: Dict = kwargs.get('delivery_location')
        self.payment_method: str = kwargs.get('payment_method') or PAYMENT_METHOD_COD
        self.rider_id: str = kwargs.get('rider_id')
        self.rider_name: str = kwargs.get('rider_name')
        self.rider_phone: str = kwargs.get('rider_phone')
        self.rider_arrived: bool = bool(kwargs.get('rider_arrived', False))
        self.estimated_time: str = kwargs.get('estimated_time')
        feedback = kwargs.get('feedback')
        self.feedback: Optional[Feedback] = feedback if feedback is None or isinstance(feedback, Feedback) \
            else Feedback.init_by_record(feedback)
        self.settlement: Optional[Dict] = kwargs.get('settlement')
        self.history: List[Dict] = kwargs.get('history') or [{'status_': self.status_, 'date': self.date_created}]
        self.record_type = 'order'

    @property
    def is_terminal(self) -> bool:
        return OrderStatus.is_terminal(self.status_)

    @property
    def has_rider(self) -> bool:
        return bool(self.rider_id)

    def _to_dict(self):
        return {
            'id_': self.id_,
            'customer_id': self.customer_id,
            'restaurant_id': self.restaurant_id,
            'restaurant_name': self.restaurant_name,
            'items': [item._to_dict() for item in self.items],
            'item_total': self.item_total,
            'delivery_fee': self.delivery_fee,
            'platform_fee': self.platform_fee,
            'total': self.total,
            'status_': self.status_,
            'date_created': self.date_created,
            'date_updated': self.date_updated,
            'delivery_address': self.delivery_address,
            'delivery_location': self.delivery_location,
            'payment_method': self.payment_method,
            'rider_id': self.rider_id,
            'rider_name': self.rider_name,
            'rider_phone': self.rider_phone,
            'rider_arrived': self.rider_arrived,
            'estimated_time': self.estimated_time,
            'feedback': self.feedback._to_dict() if self.feedback else None,
            'settlement': self.settlement,
            'history': self.history
        }

    def _validate_mandatory_fields(self, record: Dict):
        super()._validate_mandatory_fields(record)
        if record['total'] != record['item_total'] + record['delivery_fee'] + record['platform_fee']:
            self.raise_validation_error('total')

    def _to_ui(self):
        item = super()._to_ui()
        item['items'] = [cart_item.to_ui() for cart_item in self.items]
        if self.feedback is not None:
            item['feedback'] = {'rating': self.feedback.rating, 'comment': self.feedback.comment_,
                                'timestamp': self.feedback.timestamp_}
        return item
