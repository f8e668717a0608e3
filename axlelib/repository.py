from typing import List, Dict, Optional, Iterable

from axlelib.constants import keys_structure
from axlelib.constants.default_catalog import DEFAULT_RESTAURANTS
from axlelib.orders import Order
from axlelib.restaurants import Restaurant
from axlelib.storage import StorageAdapter
from axlelib.triggers import ChangeFeed
from axlelib.users import User
from axlelib.utils import exceptions
from axlelib.utils.data import upsert_record
from axlelib.utils.logger import logger, log_exception


class DeliveryRepository:
    """
    Storage boundary of the delivery core.
    Every write is "read full collection, replace records, write full collection back".
    Last write wins, records are replaced in full, there is no merge and no versioning.
    """

    def __init__(self, storage: StorageAdapter, change_feed: ChangeFeed = None):
        self.storage = storage
        self.change_feed = change_feed or ChangeFeed()

    def initialize(self, default_restaurants: List[Dict] = None) -> None:
        self.storage.initialize_if_empty(
            keys_structure.restaurants_key,
            DEFAULT_RESTAURANTS if default_restaurants is None else default_restaurants)
        for key in (keys_structure.orders_key, keys_structure.users_key):
            if not self.storage.load_all(key):
                self.storage.save_all(key, [])

    # READ
    def _load_entities(self, key, entity_cls) -> List:
        entities = []
        for record in self.storage.load_all(key):
            try:
                entities.append(entity_cls.init_by_record(record))
            except Exception as error:
                log_exception(error, msg=f'_load_entities ::: skipping malformed {key} record {record.get("id_")}')
        return entities

    def list_users(self) -> List[User]:
        return self._load_entities(keys_structure.users_key, User)

    def list_orders(self) -> List[Order]:
        return self._load_entities(keys_structure.orders_key, Order)

    def list_restaurants(self) -> List[Restaurant]:
        return self._load_entities(keys_structure.restaurants_key, Restaurant)

    def get_user(self, user_id) -> User:
        for user in self.list_users():
            if user.id_ == user_id:
                return user
        raise exceptions.UserNotFound(f'user {user_id} not found')

    def get_order(self, order_id) -> Order:
        for order in self.list_orders():
            if order.id_ == order_id:
                return order
        raise exceptions.OrderNotFound(f'order {order_id} not found')

    def get_restaurant(self, restaurant_id) -> Restaurant:
        for restaurant in self.list_restaurants():
            if restaurant.id_ == restaurant_id:
                return restaurant
        raise exceptions.RestaurantNotFound(f'restaurant {restaurant_id} not found')

    def find_restaurant(self, restaurant_id) -> Optional[Restaurant]:
        try:
            return self.get_restaurant(restaurant_id)
        except exceptions.RestaurantNotFound:
            return None

    def get_current_user(self) -> Optional[User]:
        records = self.storage.load_all(keys_structure.current_user_key)
        if not records:
            return None
        try:
            return User.init_by_record(records[0])
        except Exception as error:
            log_exception(error, msg='get_current_user ::: stored session user is malformed')
            return None

    # WRITE
    def set_current_user(self, user: Optional[User]) -> None:
        self.storage.save_all(keys_structure.current_user_key, [user.to_record()] if user else [])

    def commit(self, orders: Iterable[Order] = (), users: Iterable[User] = (),
               restaurants: Iterable[Restaurant] = ()) -> None:
        """
        Writes all given entities as one unit.
        Records are validated before anything is written, if a later collection
        fails to save the collections already written are restored.
        """
        changes = [
            (keys_structure.users_key, [user.to_record() for user in users], False),
            (keys_structure.restaurants_key, [restaurant.to_record() for restaurant in restaurants], False),
            (keys_structure.orders_key, [order.to_record() for order in orders], True)
        ]
        changes = [change for change in changes if change[1]]

        written = []
        try:
            for key, records, newest_first in changes:
                previous = self.storage.load_all(key)
                updated = previous
                for record in records:
                    updated = upsert_record(updated, record, newest_first=newest_first)
                self.storage.save_all(key, updated)
                written.append((key, previous, updated))
        except exceptions.StorageUnavailable:
            for key, previous, _ in reversed(written):
                logger.warning(f"commit ::: restoring {key=} after failed commit")
                self.storage.save_all(key, previous)
            raise

        for key, _, updated in written:
            self.change_feed.publish(key, updated)
        logger.info(f"commit ::: {[(key, len(records)) for key, records, _ in changes]} committed")
