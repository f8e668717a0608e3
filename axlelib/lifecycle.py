"""
Order lifecycle engine.

Pure functions: an order (and the rider involved, when there is one) goes in,
updated copies come out. Nothing is written here, storage is handled by
DeliveryService which commits a Transition as one unit.
"""
from typing import List, NamedTuple, Optional
from uuid import uuid4

from axlelib import ledger
from axlelib.base_class_entity import now_iso
from axlelib.carts import CartItem
from axlelib.constants.constants import DELIVERY_FEE, PLATFORM_FEE, PAYMENT_METHOD_COD
from axlelib.orders import Order, OrderStatus, RiderAssignment, Feedback
from axlelib.restaurants import Restaurant
from axlelib.users import User, UserRole
from axlelib.utils import exceptions
from axlelib.utils.logger import logger


class Transition(NamedTuple):
    order: Order
    rider: Optional[User] = None


def new_order_id() -> str:
    return f"ord-{str(uuid4()).split('-')[0]}"


def _touch(order: Order, status: Optional[str] = None) -> None:
    order.date_updated = now_iso()
    if status is not None:
        order.status_ = status
        order.history = [*order.history, {'status_': status, 'date': order.date_updated}]


def create_order(customer: User, restaurant: Restaurant, cart_items: List[CartItem],
                 order_id: Optional[str] = None) -> Order:
    if customer is None or restaurant is None:
        raise exceptions.MandatoryFieldsAreNotFilled('customer and restaurant must be provided')
    if not cart_items:
        raise exceptions.MandatoryFieldsAreNotFilled('cart is empty')
    if customer.role != UserRole.CUSTOMER:
        raise exceptions.ValidationException(f'user {customer.id_} with role {customer.role} can not place orders')
    if not customer.address:
        raise exceptions.MandatoryFieldsAreNotFilled(f'customer {customer.id_} has no delivery address')
    foreign_items = [item.id_ for item in cart_items if item.restaurant_id != restaurant.id_]
    if foreign_items:
        raise exceptions.ValidationException(f'items {foreign_items} do not belong to restaurant {restaurant.id_}')

    # snapshot, later menu edits must not change the order
    items = [item.copy() for item in cart_items]
    item_total = sum(item.subtotal for item in items)

    order = Order(
        id_=order_id or new_order_id(),
        customer_id=customer.id_,
        restaurant_id=restaurant.id_,
        restaurant_name=restaurant.name_,
        items=items,
        item_total=item_total,
        delivery_fee=DELIVERY_FEE,
        platform_fee=PLATFORM_FEE,
        total=item_total + DELIVERY_FEE + PLATFORM_FEE,
        status_=OrderStatus.PENDING,
        delivery_address=customer.address,
        delivery_location=dict(customer.location) if customer.location else None,
        payment_method=PAYMENT_METHOD_COD
    )
    # validates field types and the total invariant
    order.to_record()
    logger.info(f"create_order ::: order {order.id_} customer {customer.id_} restaurant {restaurant.id_} "
                f"item_total={order.item_total} total={order.total}")
    return order


def advance_status(order: Order, target_status: str, rider: Optional[User] = None) -> Transition:
    """
    Moves the order to target_status if the transition table allows it.
    Reaching DELIVERED with a bound rider settles the cash with the rider
    in the same Transition, rider must be the bound rider then.
    """
    if not OrderStatus.is_valid_status(target_status):
        raise exceptions.ValidationException(f'Unknown order status {target_status}')
    if not OrderStatus.is_valid_transition(order.status_, target_status):
        raise exceptions.InvalidStatusTransition(
            f'order {order.id_} can not move from {order.status_} to {target_status}')

    updated_order = order.copy()
    _touch(updated_order, target_status)
    logger.info(f"advance_status ::: order {order.id_} {order.status_} -> {target_status}")

    if target_status != OrderStatus.DELIVERED or not order.has_rider:
        return Transition(order=updated_order)

    if rider is None or rider.id_ != order.rider_id:
        raise exceptions.ValidationException(
            f'order {order.id_} is bound to rider {order.rider_id}, settlement needs that rider')
    updated_rider, updated_order = ledger.apply_settlement(rider, updated_order)
    return Transition(order=updated_order, rider=updated_rider)


def assign_rider(order: Order, rider: User, estimated_time: Optional[str] = None) -> Order:
    if order.is_terminal:
        raise exceptions.OrderIsTerminal(f'order {order.id_} is {order.status_}')
    if order.has_rider:
        raise exceptions.RiderAlreadyAssigned(f'order {order.id_} is already taken by rider {order.rider_id}')
    ledger.ensure_can_accept_jobs(rider)

    assignment = RiderAssignment(rider_id=rider.id_, rider_name=rider.name_ or '', rider_phone=rider.phone or '')
    updated_order = order.copy()
    updated_order.rider_id = assignment.rider_id
    updated_order.rider_name = assignment.rider_name
    updated_order.rider_phone = assignment.rider_phone
    updated_order.rider_arrived = False
    if estimated_time:
        updated_order.estimated_time = estimated_time
    _touch(updated_order)
    logger.info(f"assign_rider ::: order {order.id_} assigned to rider {rider.id_}")
    return updated_order


def mark_arrived(order: Order) -> Order:
    if order.is_terminal:
        raise exceptions.OrderIsTerminal(f'order {order.id_} is {order.status_}')
    if not order.has_rider:
        raise exceptions.RiderNotAssigned(f'order {order.id_} has no rider')
    updated_order = order.copy()
    updated_order.rider_arrived = True
    _touch(updated_order)
    logger.info(f"mark_arrived ::: rider {order.rider_id} arrived for order {order.id_}")
    return updated_order


def attach_feedback(order: Order, feedback: Feedback) -> Order:
    if order.status_ != OrderStatus.DELIVERED:
        raise exceptions.FeedbackNotAllowed(f'order {order.id_} is {order.status_}, feedback needs DELIVERED')
    if order.feedback is not None:
        raise exceptions.FeedbackAlreadyAttached(f'order {order.id_} already has feedback')
    if not isinstance(feedback, Feedback):
        raise exceptions.ValidationException('feedback must be a Feedback')
    updated_order = order.copy()
    updated_order.feedback = feedback
    _touch(updated_order)
    logger.info(f"attach_feedback ::: order {order.id_} rated {feedback.rating}")
    return updated_order
