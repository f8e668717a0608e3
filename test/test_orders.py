from decimal import Decimal

import pytest

from axlelib import lifecycle
from axlelib.orders import Order, OrderStatus, Feedback
from axlelib.utils import exceptions
from test.utils.delivery_test_data import get_customer, get_rider, get_cart_items, create_test_order

from test.utils.fixtures import storage, repository, service, offline_assistant


def test_status_transitions():
    assert OrderStatus.is_valid_transition(OrderStatus.PENDING, OrderStatus.PREPARING)
    assert OrderStatus.is_valid_transition(OrderStatus.OUT_FOR_DELIVERY, OrderStatus.DELIVERED)
    assert OrderStatus.is_valid_transition(OrderStatus.READY_FOR_PICKUP, OrderStatus.CANCELLED)
    assert not OrderStatus.is_valid_transition(OrderStatus.PENDING, OrderStatus.DELIVERED)
    assert not OrderStatus.is_valid_transition(OrderStatus.PREPARING, OrderStatus.PENDING)
    assert not OrderStatus.is_valid_transition(OrderStatus.DELIVERED, OrderStatus.CANCELLED)
    assert not OrderStatus.is_valid_transition('UNKNOWN', OrderStatus.PREPARING)


def test_create_order(repository):
    customer = get_customer()
    restaurant = repository.get_restaurant('rest-1')
    order = lifecycle.create_order(customer, restaurant, get_cart_items(repository, quantities={'item-1': 2}))

    assert order.status_ == OrderStatus.PENDING
    assert order.item_total == Decimal('1000.00')
    assert order.delivery_fee == Decimal('150.00')
    assert order.platform_fee == Decimal('150.00')
    assert order.total == Decimal('1300.00')
    assert order.payment_method == 'COD'
    assert order.delivery_address == '12 Test Street'
    assert order.restaurant_name == 'Test Kitchen'
    assert order.rider_id is None
    assert order.settlement is None
    assert [entry['status_'] for entry in order.history] == [OrderStatus.PENDING]
    assert order.id_.startswith('ord-')


def test_create_order_rejects_bad_input(repository):
    restaurant = repository.get_restaurant('rest-1')
    items = get_cart_items(repository)

    with pytest.raises(exceptions.MandatoryFieldsAreNotFilled):
        lifecycle.create_order(get_customer(), restaurant, [])
    with pytest.raises(exceptions.MandatoryFieldsAreNotFilled):
        lifecycle.create_order(get_customer(address=None), restaurant, items)
    with pytest.raises(exceptions.ValidationException):
        lifecycle.create_order(get_rider(), restaurant, items)
    with pytest.raises(exceptions.ValidationException):
        lifecycle.create_order(get_customer(), repository.get_restaurant('rest-2'), items)


def test_order_total_must_match_parts():
    order = Order('ord-1', 'customer-1', 'rest-1', restaurant_name='Test Kitchen', delivery_address='12 Test Street',
                  items=[{'id_': 'item-1', 'restaurant_id': 'rest-1', 'name_': 'Plain Burger', 'price': 500,
                          'quantity': 2}],
                  item_total=1000, delivery_fee=150, platform_fee=150, total=1300)
    order.to_record()

    order.total = Decimal('1200.00')
    with pytest.raises(exceptions.ValidationException):
        order.to_record()


def test_advance_status_returns_copy(repository):
    order = lifecycle.create_order(get_customer(), repository.get_restaurant('rest-1'), get_cart_items(repository))

    transition = lifecycle.advance_status(order, OrderStatus.PREPARING)

    assert transition.order.status_ == OrderStatus.PREPARING
    assert transition.rider is None
    assert order.status_ == OrderStatus.PENDING
    assert [entry['status_'] for entry in transition.order.history] == [OrderStatus.PENDING, OrderStatus.PREPARING]


def test_advance_status_rejects_skipping(repository):
    order = lifecycle.create_order(get_customer(), repository.get_restaurant('rest-1'), get_cart_items(repository))

    with pytest.raises(exceptions.InvalidStatusTransition):
        lifecycle.advance_status(order, OrderStatus.DELIVERED)
    with pytest.raises(exceptions.ValidationException):
        lifecycle.advance_status(order, 'ON_THE_MOON')


def test_delivered_without_rider_has_no_settlement(service):
    order = create_test_order(service)
    for status in (OrderStatus.PREPARING, OrderStatus.READY_FOR_PICKUP,
                   OrderStatus.OUT_FOR_DELIVERY, OrderStatus.DELIVERED):
        order = service.advance_status(order.id_, status)

    assert order.status_ == OrderStatus.DELIVERED
    assert order.settlement is None


def test_cancel_order(service):
    order = create_test_order(service)
    cancelled = service.cancel_order(order.id_)

    assert cancelled.status_ == OrderStatus.CANCELLED
    with pytest.raises(exceptions.InvalidStatusTransition):
        service.advance_status(order.id_, OrderStatus.PREPARING)


def test_assign_rider(service):
    rider = get_rider()
    service.save_user(rider)
    order = create_test_order(service)

    assigned = service.assign_rider(order.id_, rider.id_)

    assert assigned.rider_id == rider.id_
    assert assigned.rider_name == 'Test Rider'
    assert assigned.rider_phone == '0311111111'
    assert assigned.rider_arrived is False
    assert assigned.estimated_time == '20-30 min'
    assert assigned.status_ == OrderStatus.PENDING


def test_assign_rider_twice_is_unavailable(service):
    first, second = get_rider('rider-1'), get_rider('rider-2')
    service.save_user(first)
    service.save_user(second)
    order = create_test_order(service)
    service.assign_rider(order.id_, first.id_)

    with pytest.raises(exceptions.RiderAlreadyAssigned) as error:
        service.assign_rider(order.id_, second.id_)
    assert error.value.REASON == 'order_unavailable'
    assert service.repository.get_order(order.id_).rider_id == first.id_


def test_assign_rider_to_terminal_order(service):
    rider = get_rider()
    service.save_user(rider)
    order = create_test_order(service)
    service.cancel_order(order.id_)

    with pytest.raises(exceptions.OrderIsTerminal):
        service.assign_rider(order.id_, rider.id_)


def test_mark_arrived(service):
    rider = get_rider()
    service.save_user(rider)
    order = create_test_order(service)

    with pytest.raises(exceptions.RiderNotAssigned):
        service.mark_arrived(order.id_)

    service.assign_rider(order.id_, rider.id_)
    arrived = service.mark_arrived(order.id_)
    assert arrived.rider_arrived is True
    assert arrived.status_ == OrderStatus.PENDING


def test_feedback_rules(service):
    order = create_test_order(service)

    with pytest.raises(exceptions.FeedbackNotAllowed):
        service.attach_feedback(order.id_, Feedback(rating=5))

    for status in (OrderStatus.PREPARING, OrderStatus.READY_FOR_PICKUP,
                   OrderStatus.OUT_FOR_DELIVERY, OrderStatus.DELIVERED):
        service.advance_status(order.id_, status)

    rated = service.attach_feedback(order.id_, Feedback(rating=4, comment_='Hot and fast'))
    assert rated.feedback.rating == 4
    assert rated.feedback.comment_ == 'Hot and fast'
    assert service.repository.get_order(order.id_).feedback.rating == 4

    with pytest.raises(exceptions.FeedbackAlreadyAttached):
        service.attach_feedback(order.id_, Feedback(rating=1))


@pytest.mark.parametrize('rating', [0, 6, 3.5, True, 'five', None])
def test_feedback_rating_bounds(rating):
    with pytest.raises(exceptions.ValidationException):
        Feedback(rating=rating)


def test_order_to_ui(service):
    order = create_test_order(service)
    item = order.to_ui()

    assert item['id'] == order.id_
    assert item['status'] == OrderStatus.PENDING
    assert item['items'][0]['name'] == 'Plain Burger'
    assert item['items'][0]['quantity'] == 2
    assert 'id_' not in item
