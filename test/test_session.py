from decimal import Decimal

from axlelib.assistant import RECOMMENDATION_FALLBACK
from axlelib.locations import StaticLocationPicker
from axlelib.orders import OrderStatus
from axlelib.restaurants import VerificationStatus
from axlelib.session import SessionContext
from axlelib.users import User
from test.utils.delivery_test_data import get_customer, get_rider, get_admin, get_restaurant_owner, \
    seed_restaurant_owner

from test.utils.fixtures import storage, repository, service, session, offline_assistant


def login(service, user, session_id=None) -> SessionContext:
    session = SessionContext(service, session_id=session_id or user.id_)
    outcome = session.login(user)
    assert outcome.ok, outcome.body
    return session


def place_test_order(service, quantities=None) -> str:
    customer = login(service, get_customer())
    for menu_item_id, quantity in (quantities or {'item-1': 2}).items():
        assert customer.add_to_cart('rest-1', menu_item_id, quantity).ok
    outcome = customer.place_order()
    assert outcome.ok, outcome.body
    return outcome.body['id']


def test_operation_without_login(session):
    outcome = session.my_orders()

    assert not outcome
    assert outcome.reason == 'not_authenticated'
    assert outcome.body['exception'] == 'NotAuthorizedException'


def test_operation_of_another_role(service):
    customer = login(service, get_customer())

    outcome = customer.settle_rider_debt('rider-1')
    assert outcome.reason == 'access_denied'
    assert customer.accept_order('ord-1').reason == 'access_denied'
    assert customer.cancel_order('ord-1').reason == 'access_denied'


def test_login_rejects_roleless_user(session):
    assert session.login(User('nobody')).reason == 'validation_error'
    assert session.current_user is None


def test_login_rejects_role_change(service):
    login(service, get_customer('user-1'))

    outcome = SessionContext(service).login(get_rider('user-1'))
    assert outcome.reason == 'validation_error'
    assert service.repository.get_user('user-1').role == 'CUSTOMER'


def test_customer_places_order(service):
    customer = login(service, get_customer())
    assert customer.add_to_cart('rest-1', 'item-1', 2).body['item_total'] == Decimal('1000.00')

    outcome = customer.place_order()

    assert outcome.ok
    assert outcome.body['status'] == OrderStatus.PENDING
    assert outcome.body['total'] == Decimal('1300')
    assert customer.cart.is_empty()
    assert [order['id'] for order in customer.my_orders().body] == [outcome.body['id']]
    assert [order.id_ for order in customer.orders] == [outcome.body['id']]


def test_place_order_with_empty_cart(service):
    customer = login(service, get_customer())

    assert customer.place_order().reason == 'validation_error'
    assert service.repository.list_orders() == []


def test_add_unknown_menu_item(service):
    customer = login(service, get_customer())

    assert customer.add_to_cart('rest-1', 'item-missing').reason == 'not_found'
    assert customer.add_to_cart('rest-1', 'item-1', 0).reason == 'validation_error'
    assert customer.cart.is_empty()


def test_set_delivery_location(service):
    customer = login(service, get_customer(address=None))
    assert customer.add_to_cart('rest-1', 'item-1').ok
    assert customer.place_order().reason == 'validation_error'

    outcome = customer.set_delivery_location(StaticLocationPicker(' 5 Pin Road ', 24.86, 67.01))
    assert outcome.ok
    assert service.repository.get_user('customer-1').address == '5 Pin Road'

    order = customer.place_order()
    assert order.ok
    assert order.body['delivery_address'] == '5 Pin Road'
    assert order.body['delivery_location']['lat'] == Decimal('24.86')


def test_set_delivery_location_rejects_bad_pin(service):
    customer = login(service, get_customer())

    assert customer.set_delivery_location(StaticLocationPicker('Nowhere', 200, 0)).reason == 'validation_error'
    assert customer.set_delivery_location(StaticLocationPicker('', 10, 10)).reason == 'validation_error'
    assert customer.set_delivery_location(StaticLocationPicker('Somewhere', 'north', 0)).reason == 'validation_error'
    assert service.repository.get_user('customer-1').address == '12 Test Street'


def test_restaurant_flow(service):
    order_id = place_test_order(service)
    owner = login(service, seed_restaurant_owner(service))

    assert [order['id'] for order in owner.restaurant_orders().body] == [order_id]
    assert owner.accept_order(order_id).body['status'] == OrderStatus.PREPARING
    assert owner.mark_ready(order_id).body['status'] == OrderStatus.READY_FOR_PICKUP
    assert owner.mark_ready(order_id).reason == 'invalid_transition'


def test_restaurant_can_not_touch_other_orders(service):
    order_id = place_test_order(service)
    owner = login(service, seed_restaurant_owner(service, 'owner-2', 'rest-2', 'Second Kitchen'))

    assert owner.accept_order(order_id).reason == 'access_denied'
    assert service.repository.get_order(order_id).status_ == OrderStatus.PENDING


def test_pending_restaurant_needs_approval(service):
    owner = login(service, get_restaurant_owner('owner-new', 'rest-new', 'New Place'))
    assert service.repository.get_restaurant('rest-new').is_verified == VerificationStatus.PENDING
    assert owner.restaurant_orders().reason == 'access_denied'
    assert owner.add_menu_item('Soup', 300).reason == 'access_denied'

    admin = login(service, get_admin())
    assert admin.overview().body['pending_restaurants'] == ['rest-pending', 'rest-new']
    assert admin.verify_restaurant('rest-new', VerificationStatus.APPROVED).ok

    assert owner.restaurant_orders().body == []
    assert owner.add_menu_item('Soup', 300).ok

    # logging in again never resets the verification
    login(service, get_restaurant_owner('owner-new', 'rest-new', 'New Place Renamed'))
    restaurant = service.repository.get_restaurant('rest-new')
    assert restaurant.is_approved
    assert restaurant.name_ == 'New Place Renamed'
    assert [item.name_ for item in restaurant.menu] == ['Soup']


def test_restaurant_menu_management(service):
    owner = login(service, seed_restaurant_owner(service))

    added = owner.add_menu_item('Soup', 350, category='Starters')
    assert added.ok
    assert added.body['description'] == 'A tasty Soup prepared with fresh ingredients.'

    updated = owner.update_menu_item(added.body['id'], price=400)
    assert updated.ok
    assert updated.body['price'] == Decimal('400')
    assert updated.body['name'] == 'Soup'
    assert owner.update_menu_item('item-missing', price=1).reason == 'not_found'


def test_rider_flow(service):
    order_id = place_test_order(service)
    owner = login(service, seed_restaurant_owner(service))
    rider = login(service, get_rider())

    jobs = rider.available_jobs().body
    assert jobs['restriction'] is None
    assert [order['id'] for order in jobs['orders']] == [order_id]

    assert rider.accept_job(order_id).body['rider_id'] == 'rider-1'
    assert rider.available_jobs().body['orders'] == []
    assert rider.mark_arrived(order_id).body['rider_arrived'] is True
    assert rider.pick_up_order(order_id).reason == 'invalid_transition'

    owner.accept_order(order_id)
    owner.mark_ready(order_id)
    assert rider.pick_up_order(order_id).body['status'] == OrderStatus.OUT_FOR_DELIVERY
    assert [order['id'] for order in rider.active_deliveries().body] == [order_id]
    assert rider.complete_delivery(order_id).body['status'] == OrderStatus.DELIVERED

    assert rider.current_user.amount_owed == Decimal('1150.00')
    assert rider.active_deliveries().body == []


def test_rider_can_not_act_on_foreign_order(service):
    order_id = place_test_order(service)
    first = login(service, get_rider('rider-1'))
    second = login(service, get_rider('rider-2'))
    assert first.accept_job(order_id).ok

    assert second.accept_job(order_id).reason == 'order_unavailable'
    assert second.mark_arrived(order_id).reason == 'access_denied'
    assert second.complete_delivery(order_id).reason == 'access_denied'


def test_rider_relogin_keeps_ledger(service):
    service.save_user(get_rider(amount_owed=6000))
    order_id = place_test_order(service)

    rider = login(service, get_rider())
    assert rider.current_user.amount_owed == Decimal('6000.00')
    assert rider.available_jobs().body['restriction'] == 'debt_limit_exceeded'
    assert rider.accept_job(order_id).reason == 'rider_restricted'


def test_new_rider_starts_without_debt(service):
    rider = login(service, get_rider(amount_owed=300, is_suspended=True))

    assert rider.current_user.amount_owed == Decimal('0.00')
    assert rider.current_user.is_suspended is False


def test_feedback_only_by_order_customer(service):
    order_id = place_test_order(service)
    other = login(service, get_customer('customer-2'))

    assert other.leave_feedback(order_id, 5).reason == 'access_denied'

    customer = login(service, get_customer())
    assert customer.leave_feedback(order_id, 5).reason == 'precondition_failed'


def test_admin_operations(service):
    order_id = place_test_order(service)
    owner = login(service, seed_restaurant_owner(service))
    rider = login(service, get_rider())
    rider.accept_job(order_id)
    owner.accept_order(order_id)
    owner.mark_ready(order_id)
    rider.pick_up_order(order_id)
    rider.complete_delivery(order_id)

    admin = login(service, get_admin())
    overview = admin.overview().body
    assert overview['total_orders'] == 1
    assert overview['active_orders'] == 0
    assert overview['total_revenue'] == Decimal('1300.00')
    assert overview['outstanding_rider_debt'] == Decimal('1150.00')
    assert overview['riders'][0]['id'] == 'rider-1'
    assert [order['id'] for order in admin.all_orders().body] == [order_id]

    assert admin.set_rider_suspension('rider-1', True).body['is_suspended'] is True
    assert admin.settle_rider_debt('rider-1').body['amount_owed'] == Decimal('0')
    assert service.repository.get_user('rider-1').is_suspended is False
    assert admin.settle_rider_debt('customer-1').reason == 'validation_error'


def test_admin_cancels_order(service):
    order_id = place_test_order(service)
    admin = login(service, get_admin())

    assert admin.cancel_order(order_id).body['status'] == OrderStatus.CANCELLED
    assert admin.cancel_order(order_id).reason == 'invalid_transition'


def test_recommendation_falls_back(service):
    customer = login(service, get_customer())

    assert customer.ask_for_recommendation('something spicy').body == {'recommendation': RECOMMENDATION_FALLBACK}
    assert customer.ask_for_recommendation('anything', restaurant_id='rest-missing').reason == 'not_found'


def test_logout_and_restore(service):
    customer = login(service, get_customer())
    customer.add_to_cart('rest-1', 'item-1')

    restored = SessionContext(service)
    assert restored.restore_session().body['id'] == 'customer-1'
    assert restored.current_user.id_ == 'customer-1'

    assert customer.logout().ok
    assert customer.cart.is_empty()
    assert customer.my_orders().reason == 'not_authenticated'
    assert SessionContext(service).restore_session().body is None


def test_poll_refreshes_views(service):
    session = SessionContext(service, poll_interval=0.5)
    seen, sleeps = [], []
    session.subscribe(lambda current: seen.append(len(current.orders)))

    place_test_order(service)
    assert session.poll(ticks=2, sleep=sleeps.append) == 2

    assert sleeps == [0.5, 0.5]
    assert seen == [1, 1]


def test_unsubscribed_view_is_not_refreshed(session):
    seen = []
    unsubscribe = session.subscribe(lambda current: seen.append(current.session_id))

    session.refresh_data()
    unsubscribe()
    session.refresh_data()

    assert seen == ['test-session']


def test_follow_changes(service):
    rider = login(service, get_rider())
    stop = rider.follow_changes()

    order_id = place_test_order(service)
    assert [order.id_ for order in rider.orders] == [order_id]

    stop()
    place_test_order(service)
    assert len(rider.orders) == 1


def test_new_owner_can_not_claim_registered_restaurant(service):
    outcome = SessionContext(service).login(get_restaurant_owner('intruder', 'rest-1', 'Mine now'))

    assert outcome.reason == 'access_denied'
    restaurant = service.repository.get_restaurant('rest-1')
    assert restaurant.name_ == 'Test Kitchen'
    assert restaurant.is_approved
    assert service.find_user('intruder') is None


def test_owner_can_not_switch_to_another_owners_restaurant(service):
    login(service, get_restaurant_owner('owner-new', 'rest-new', 'New Place'))
    seed_restaurant_owner(service)

    assert SessionContext(service).login(
        get_restaurant_owner('owner-new', 'rest-1', 'Taken over')).reason == 'access_denied'
    assert SessionContext(service).login(
        get_restaurant_owner('owner-other', 'rest-new', 'Also mine')).reason == 'access_denied'
    assert service.repository.get_restaurant('rest-1').name_ == 'Test Kitchen'
    assert service.repository.get_user('owner-new').restaurant_details.id_ == 'rest-new'


def test_failing_view_does_not_fail_applied_operation(service):
    customer = login(service, get_customer())

    def broken_view(current):
        raise RuntimeError('view crashed')

    customer.subscribe(broken_view)
    assert customer.add_to_cart('rest-1', 'item-1', 2).ok

    outcome = customer.place_order()

    assert outcome.ok
    assert [order.id_ for order in service.repository.list_orders()] == [outcome.body['id']]
    assert customer.refresh_data().ok
