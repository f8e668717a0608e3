from decimal import Decimal
from typing import List, Dict, Optional
from uuid import uuid4

from axlelib import lifecycle, ledger
from axlelib.assistant import suggest_menu_description
from axlelib.carts import CartItem
from axlelib.menu_items import MenuItem
from axlelib.orders import Order, OrderStatus, Feedback
from axlelib.repository import DeliveryRepository
from axlelib.restaurants import Restaurant, VerificationStatus
from axlelib.users import User, UserRole
from axlelib.utils import exceptions
from axlelib.utils.logger import logger


class DeliveryService:
    """
    Runs the lifecycle engine and the rider ledger against the repository:
    load the records, compute the new state, commit it as one unit
    """

    def __init__(self, repository: DeliveryRepository):
        self.repository = repository

    # ORDERS
    def create_order(self, customer_id: str, restaurant_id: str, cart_items: List[CartItem]) -> Order:
        customer = self.repository.get_user(customer_id)
        restaurant = self.repository.get_restaurant(restaurant_id)
        order = lifecycle.create_order(customer, restaurant, cart_items)
        self.repository.commit(orders=[order])
        return order

    def advance_status(self, order_id: str, target_status: str) -> Order:
        order = self.repository.get_order(order_id)
        rider = None
        if target_status == OrderStatus.DELIVERED and order.has_rider:
            rider = self.repository.get_user(order.rider_id)
        transition = lifecycle.advance_status(order, target_status, rider)
        self.repository.commit(orders=[transition.order], users=[transition.rider] if transition.rider else [])
        return transition.order

    def cancel_order(self, order_id: str) -> Order:
        return self.advance_status(order_id, OrderStatus.CANCELLED)

    def assign_rider(self, order_id: str, rider_id: str) -> Order:
        order = self.repository.get_order(order_id)
        rider = self.repository.get_user(rider_id)
        restaurant = self.repository.find_restaurant(order.restaurant_id)
        estimated_time = restaurant.delivery_time if restaurant else None
        updated_order = lifecycle.assign_rider(order, rider, estimated_time=estimated_time)
        self.repository.commit(orders=[updated_order])
        return updated_order

    def mark_arrived(self, order_id: str) -> Order:
        updated_order = lifecycle.mark_arrived(self.repository.get_order(order_id))
        self.repository.commit(orders=[updated_order])
        return updated_order

    def attach_feedback(self, order_id: str, feedback: Feedback) -> Order:
        updated_order = lifecycle.attach_feedback(self.repository.get_order(order_id), feedback)
        self.repository.commit(orders=[updated_order])
        return updated_order

    # RIDER LEDGER
    def settle_debt(self, rider_id: str) -> User:
        rider = ledger.settle_debt(self.repository.get_user(rider_id))
        self.repository.commit(users=[rider])
        return rider

    def set_rider_suspension(self, rider_id: str, suspended: bool) -> User:
        rider = ledger.set_suspension(self.repository.get_user(rider_id), suspended)
        self.repository.commit(users=[rider])
        return rider

    # RESTAURANTS
    def verify_restaurant(self, restaurant_id: str, status: str) -> Restaurant:
        restaurant = self.repository.get_restaurant(restaurant_id).with_verification(status)
        users = [user for user in self.repository.list_users()
                 if user.restaurant_details is not None and user.restaurant_details.id_ == restaurant_id]
        for owner in users:
            owner.restaurant_details = restaurant.copy()
        self.repository.commit(restaurants=[restaurant], users=users)
        return restaurant

    def save_menu_item(self, restaurant_id: str, name: str, price, category: str = None,
                       description: str = None, ingredients: str = '', image: str = '',
                       menu_item_id: str = None) -> MenuItem:
        restaurant = self.repository.get_restaurant(restaurant_id)
        if menu_item_id is not None:
            restaurant.get_menu_item(menu_item_id)
        if not description:
            description = suggest_menu_description(name, ingredients)
        menu_item = MenuItem(
            id_=menu_item_id or f"m-{str(uuid4()).split('-')[0]}",
            restaurant_id=restaurant_id,
            name_=name,
            price=price,
            category=category,
            description=description,
            image=image
        )
        menu_item.to_record()
        self.repository.commit(restaurants=[restaurant.with_menu_item(menu_item)])
        logger.info(f"save_menu_item ::: restaurant {restaurant_id} menu item {menu_item.id_} saved")
        return menu_item

    # QUERIES
    def orders_for_customer(self, customer_id: str) -> List[Order]:
        return [order for order in self.repository.list_orders() if order.customer_id == customer_id]

    def orders_for_restaurant(self, restaurant_id: str) -> List[Order]:
        return [order for order in self.repository.list_orders() if order.restaurant_id == restaurant_id]

    def available_jobs(self) -> List[Order]:
        return [order for order in self.repository.list_orders() if not order.is_terminal and not order.has_rider]

    def active_deliveries(self, rider_id: str) -> List[Order]:
        return [order for order in self.repository.list_orders()
                if order.rider_id == rider_id and not order.is_terminal]

    def admin_overview(self) -> Dict:
        orders = self.repository.list_orders()
        riders = [user for user in self.repository.list_users() if user.role == UserRole.RIDER]
        restaurants = self.repository.list_restaurants()
        return {
            'total_orders': len(orders),
            'active_orders': len([order for order in orders if not order.is_terminal]),
            'total_revenue': sum((order.total for order in orders if order.status_ == OrderStatus.DELIVERED),
                                 Decimal('0.00')),
            'outstanding_rider_debt': sum((rider.amount_owed for rider in riders), Decimal('0.00')),
            'riders': [
                {'id': rider.id_, 'name': rider.name_, 'amount_owed': rider.amount_owed,
                 'is_suspended': rider.is_suspended, 'restriction': ledger.restriction_reason(rider)}
                for rider in riders
            ],
            'pending_restaurants': [restaurant.id_ for restaurant in restaurants
                                    if restaurant.is_verified == VerificationStatus.PENDING]
        }

    def find_user(self, user_id: str) -> Optional[User]:
        try:
            return self.repository.get_user(user_id)
        except exceptions.UserNotFound:
            return None

    def save_user(self, user: User) -> None:
        self.repository.commit(users=[user])
