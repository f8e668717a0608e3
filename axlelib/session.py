import time
from decimal import Decimal
from typing import Callable, List, Optional
from uuid import uuid4

from axlelib import ledger
from axlelib.assistant import recommend_from_query
from axlelib.base_class_entity import now_iso
from axlelib.carts import Cart
from axlelib.constants import keys_structure
from axlelib.constants.constants import POLL_INTERVAL_SECONDS
from axlelib.delivery import DeliveryService
from axlelib.locations import LocationPicker, normalize_location
from axlelib.orders import Order, OrderStatus, Feedback
from axlelib.restaurants import Restaurant, VerificationStatus
from axlelib.users import User, UserRole
from axlelib.utils import exceptions
from axlelib.utils.app import operation_exception_handler, log_start_finish, success_response
from axlelib.utils.auth import authenticate_class
from axlelib.utils.data import cleanup_dict
from axlelib.utils.logger import logger, log_exception

# restaurant fields an owner may change by logging in again
RESTAURANT_PROFILE_FIELDS = ['name_', 'image', 'delivery_time', 'categories', 'owner_name',
                             'email', 'phone', 'address', 'location']
USER_PROFILE_FIELDS = ['name_', 'phone', 'email', 'address', 'location']


class SessionContext:
    """
    Active identity of one UI plus the view state it renders.
    Every public operation returns an Outcome, rejected operations leave
    the stored state untouched.
    """

    def __init__(self, service: DeliveryService, session_id: str = None,
                 poll_interval: float = POLL_INTERVAL_SECONDS):
        self.service = service
        self.repository = service.repository
        self.session_id: str = session_id or str(uuid4()).split('-')[0]
        self.poll_interval = poll_interval

        self.current_user: Optional[User] = None
        self.users: List[User] = []
        self.orders: List[Order] = []
        self.restaurants: List[Restaurant] = []
        self.cart = Cart()
        self.listeners: List[Callable] = []

    # SESSION
    @operation_exception_handler
    @log_start_finish
    def login(self, user: User):
        logger.current_session_id = self.session_id
        if user.role not in UserRole.VALID_ROLES or user.role == UserRole.NONE:
            raise exceptions.ValidationException(f'can not log in with role {user.role}')

        existing = self.service.find_user(user.id_)
        session_user = self._merge_login(existing, user)
        restaurants = []
        if session_user.restaurant_details is not None:
            restaurant = self._merge_restaurant(existing, session_user)
            session_user.restaurant_details = restaurant
            restaurants.append(restaurant)

        self.repository.commit(users=[session_user], restaurants=restaurants)
        self.repository.set_current_user(session_user)
        self.current_user = session_user
        self.cart.clear()
        self._refresh()
        logger.info(f"login ::: user {session_user.id_} logged in as {session_user.role}")
        return success_response(session_user.to_ui())

    @operation_exception_handler
    @log_start_finish
    def logout(self):
        logger.current_session_id = self.session_id
        user_id = self.current_user.id_ if self.current_user else None
        self.current_user = None
        self.cart.clear()
        self.repository.set_current_user(None)
        logger.info(f"logout ::: user {user_id} logged out")
        return success_response({'user_id': user_id})

    @operation_exception_handler
    def restore_session(self):
        logger.current_session_id = self.session_id
        self.current_user = self.repository.get_current_user()
        self._refresh()
        return success_response(self.current_user.to_ui() if self.current_user else None)

    @operation_exception_handler
    def refresh_data(self):
        self._refresh()
        return success_response({
            'users': len(self.users),
            'orders': len(self.orders),
            'restaurants': len(self.restaurants)
        })

    def _refresh(self) -> None:
        self.users = self.repository.list_users()
        self.orders = self.repository.list_orders()
        self.restaurants = self.repository.list_restaurants()
        if self.current_user is not None:
            for user in self.users:
                if user.id_ == self.current_user.id_:
                    self.current_user = user
                    break
        for listener in list(self.listeners):
            try:
                listener(self)
            except Exception as e:
                log_exception(e, msg=f'_refresh ::: listener {getattr(listener, "__name__", listener)} failed')

    def _merge_login(self, existing: Optional[User], user: User) -> User:
        if existing is None:
            session_user = user.copy()
            if session_user.is_rider:
                # ledger fields only change through deliveries and settlements
                session_user.amount_owed = Decimal('0.00')
                session_user.is_suspended = False
            return session_user
        if existing.role != user.role:
            raise exceptions.ValidationException(f'user {user.id_} is registered as {existing.role}')
        session_user = existing.copy()
        profile = cleanup_dict({field: getattr(user, field) for field in USER_PROFILE_FIELDS}, [None])
        for field, value in profile.items():
            setattr(session_user, field, value)
        if user.restaurant_details is not None:
            session_user.restaurant_details = user.restaurant_details
        session_user.date_updated = now_iso()
        return session_user

    def _merge_restaurant(self, existing: Optional[User], session_user: User) -> Restaurant:
        """ A new owner only ever registers a fresh restaurant, which starts PENDING """
        details = session_user.restaurant_details
        owners = [user.id_ for user in self._users_of_restaurant(details.id_) if user.id_ != session_user.id_]
        if owners:
            raise exceptions.AccessDenied(f'restaurant {details.id_} is owned by {owners}')
        stored = self.repository.find_restaurant(details.id_)
        if stored is not None and (existing is None or existing.restaurant_details is None
                                   or existing.restaurant_details.id_ != details.id_):
            raise exceptions.AccessDenied(f'restaurant {details.id_} is already registered')
        if stored is None:
            restaurant = details.copy()
            restaurant.is_verified = VerificationStatus.PENDING
            return restaurant
        restaurant = stored.copy()
        for field in RESTAURANT_PROFILE_FIELDS:
            value = getattr(details, field)
            if value not in (None, []):
                setattr(restaurant, field, value)
        restaurant.date_updated = now_iso()
        return restaurant

    def _users_of_restaurant(self, restaurant_id: str) -> List[User]:
        return [user for user in self.repository.list_users()
                if user.restaurant_details is not None and user.restaurant_details.id_ == restaurant_id]

    # POLLING
    def subscribe(self, listener: Callable) -> Callable:
        """ listener(session) is called after every refresh """
        self.listeners.append(listener)

        def unsubscribe():
            if listener in self.listeners:
                self.listeners.remove(listener)
        return unsubscribe

    def follow_changes(self) -> Callable:
        """ Refresh on every commit instead of waiting for the next poll """
        def on_change(key, records):
            self._refresh()

        unsubscribers = [self.repository.change_feed.subscribe(key, on_change) for key in (
            keys_structure.users_key, keys_structure.orders_key, keys_structure.restaurants_key)]

        def unsubscribe():
            for unsubscribe_key in unsubscribers:
                unsubscribe_key()
        return unsubscribe

    def poll(self, ticks: Optional[int] = None, sleep: Callable = time.sleep) -> int:
        """ Re-reads the storage every poll_interval seconds, forever when ticks is None """
        done = 0
        while ticks is None or done < ticks:
            sleep(self.poll_interval)
            self.refresh_data()
            done += 1
        return done

    # CUSTOMER
    @operation_exception_handler
    @authenticate_class
    def set_delivery_location(self, picker: LocationPicker):
        picked = normalize_location(picker.pick_location())
        user = self.current_user.copy()
        user.address = picked['address']
        user.location = {'lat': picked['lat'], 'lng': picked['lng']}
        user.date_updated = now_iso()
        self.repository.commit(users=[user])
        self.repository.set_current_user(user)
        self.current_user = user
        return success_response(user.to_ui())

    @operation_exception_handler
    @authenticate_class
    def add_to_cart(self, restaurant_id: str, menu_item_id: str, quantity: int = 1):
        restaurant = self.repository.get_restaurant(restaurant_id)
        self.cart.add_item(restaurant.get_menu_item(menu_item_id), quantity)
        return success_response(self.cart.to_ui())

    @operation_exception_handler
    @authenticate_class
    def remove_from_cart(self, menu_item_id: str):
        self.cart.remove_item(menu_item_id)
        return success_response(self.cart.to_ui())

    @operation_exception_handler
    @authenticate_class
    def clear_cart(self):
        self.cart.clear()
        return success_response(self.cart.to_ui())

    @operation_exception_handler
    @log_start_finish
    @authenticate_class
    def place_order(self):
        if self.cart.is_empty():
            raise exceptions.MandatoryFieldsAreNotFilled('cart is empty')
        order = self.service.create_order(self.current_user.id_, self.cart.restaurant_id, self.cart.items)
        self.cart.clear()
        self._refresh()
        return success_response(order.to_ui())

    @operation_exception_handler
    @authenticate_class
    def my_orders(self):
        return success_response([order.to_ui() for order in self.service.orders_for_customer(self.current_user.id_)])

    @operation_exception_handler
    @log_start_finish
    @authenticate_class
    def leave_feedback(self, order_id: str, rating, comment: str = ''):
        order = self.repository.get_order(order_id)
        if order.customer_id != self.current_user.id_:
            raise exceptions.AccessDenied(f'order {order_id} belongs to another customer')
        order = self.service.attach_feedback(order_id, Feedback(rating=rating, comment_=comment))
        self._refresh()
        return success_response(order.to_ui())

    @operation_exception_handler
    @authenticate_class
    def ask_for_recommendation(self, query: str, restaurant_id: str = None):
        restaurants = [self.repository.get_restaurant(restaurant_id)] if restaurant_id else \
            self.repository.list_restaurants()
        menu_context = '; '.join(
            f'{item.name_} ({restaurant.name_}, {item.price}): {item.description}'
            for restaurant in restaurants for item in restaurant.menu)
        return success_response({'recommendation': recommend_from_query(query, menu_context)})

    # RESTAURANT
    def _owned_restaurant(self) -> Restaurant:
        details = self.current_user.restaurant_details
        if details is None:
            raise exceptions.AccessDenied(f'user {self.current_user.id_} has no restaurant')
        restaurant = self.repository.get_restaurant(details.id_)
        if not restaurant.is_approved:
            raise exceptions.AccessDenied(f'restaurant {restaurant.id_} is {restaurant.is_verified}, '
                                          f'order management needs approval')
        return restaurant

    def _restaurant_order(self, order_id: str) -> Order:
        restaurant = self._owned_restaurant()
        order = self.repository.get_order(order_id)
        if order.restaurant_id != restaurant.id_:
            raise exceptions.AccessDenied(f'order {order_id} belongs to another restaurant')
        return order

    @operation_exception_handler
    @authenticate_class
    def restaurant_orders(self):
        restaurant = self._owned_restaurant()
        return success_response([order.to_ui() for order in self.service.orders_for_restaurant(restaurant.id_)])

    @operation_exception_handler
    @log_start_finish
    @authenticate_class
    def accept_order(self, order_id: str):
        self._restaurant_order(order_id)
        return self._advance(order_id, OrderStatus.PREPARING)

    @operation_exception_handler
    @log_start_finish
    @authenticate_class
    def mark_ready(self, order_id: str):
        self._restaurant_order(order_id)
        return self._advance(order_id, OrderStatus.READY_FOR_PICKUP)

    @operation_exception_handler
    @log_start_finish
    @authenticate_class
    def cancel_order(self, order_id: str):
        if self.current_user.role == UserRole.RESTAURANT:
            self._restaurant_order(order_id)
        return self._advance(order_id, OrderStatus.CANCELLED)

    @operation_exception_handler
    @log_start_finish
    @authenticate_class
    def add_menu_item(self, name: str, price, category: str = None, description: str = None,
                      ingredients: str = '', image: str = ''):
        restaurant = self._owned_restaurant()
        menu_item = self.service.save_menu_item(restaurant.id_, name, price, category=category,
                                                description=description, ingredients=ingredients, image=image)
        self._refresh()
        return success_response(menu_item.to_ui())

    @operation_exception_handler
    @log_start_finish
    @authenticate_class
    def update_menu_item(self, menu_item_id: str, **fields):
        restaurant = self._owned_restaurant()
        current = restaurant.get_menu_item(menu_item_id)
        menu_item = self.service.save_menu_item(
            restaurant.id_,
            name=fields.get('name', current.name_),
            price=fields.get('price', current.price),
            category=fields.get('category', current.category),
            description=fields.get('description', current.description),
            image=fields.get('image', current.image),
            menu_item_id=menu_item_id)
        self._refresh()
        return success_response(menu_item.to_ui())

    # RIDER
    def _rider_order(self, order_id: str) -> Order:
        order = self.repository.get_order(order_id)
        if order.rider_id != self.current_user.id_:
            raise exceptions.AccessDenied(f'order {order_id} is not assigned to rider {self.current_user.id_}')
        return order

    @operation_exception_handler
    @authenticate_class
    def available_jobs(self):
        rider = self.repository.get_user(self.current_user.id_)
        return success_response({
            'restriction': ledger.restriction_reason(rider),
            'amount_owed': rider.amount_owed,
            'orders': [order.to_ui() for order in self.service.available_jobs()]
        })

    @operation_exception_handler
    @authenticate_class
    def active_deliveries(self):
        return success_response([order.to_ui() for order in self.service.active_deliveries(self.current_user.id_)])

    @operation_exception_handler
    @log_start_finish
    @authenticate_class
    def accept_job(self, order_id: str):
        order = self.service.assign_rider(order_id, self.current_user.id_)
        self._refresh()
        return success_response(order.to_ui())

    @operation_exception_handler
    @log_start_finish
    @authenticate_class
    def mark_arrived(self, order_id: str):
        self._rider_order(order_id)
        order = self.service.mark_arrived(order_id)
        self._refresh()
        return success_response(order.to_ui())

    @operation_exception_handler
    @log_start_finish
    @authenticate_class
    def pick_up_order(self, order_id: str):
        self._rider_order(order_id)
        return self._advance(order_id, OrderStatus.OUT_FOR_DELIVERY)

    @operation_exception_handler
    @log_start_finish
    @authenticate_class
    def complete_delivery(self, order_id: str):
        self._rider_order(order_id)
        return self._advance(order_id, OrderStatus.DELIVERED)

    # ADMIN
    @operation_exception_handler
    @authenticate_class
    def overview(self):
        return success_response(self.service.admin_overview())

    @operation_exception_handler
    @authenticate_class
    def all_orders(self):
        return success_response([order.to_ui() for order in self.repository.list_orders()])

    @operation_exception_handler
    @log_start_finish
    @authenticate_class
    def settle_rider_debt(self, rider_id: str):
        rider = self.service.settle_debt(rider_id)
        self._refresh()
        return success_response(rider.to_ui())

    @operation_exception_handler
    @log_start_finish
    @authenticate_class
    def set_rider_suspension(self, rider_id: str, suspended: bool):
        rider = self.service.set_rider_suspension(rider_id, suspended)
        self._refresh()
        return success_response(rider.to_ui())

    @operation_exception_handler
    @log_start_finish
    @authenticate_class
    def verify_restaurant(self, restaurant_id: str, status: str):
        restaurant = self.service.verify_restaurant(restaurant_id, status)
        self._refresh()
        return success_response(restaurant.to_ui())

    def _advance(self, order_id: str, status: str):
        order = self.service.advance_status(order_id, status)
        self._refresh()
        return success_response(order.to_ui())
