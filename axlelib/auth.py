from typing import List

from axlelib.users import UserRole

CUSTOMER_OPERATIONS = [
    'add_to_cart', 'remove_from_cart', 'clear_cart', 'place_order', 'my_orders',
    'leave_feedback', 'set_delivery_location', 'ask_for_recommendation'
]

RESTAURANT_OPERATIONS = [
    'restaurant_orders', 'accept_order', 'mark_ready', 'cancel_order', 'add_menu_item', 'update_menu_item'
]

RIDER_OPERATIONS = [
    'available_jobs', 'active_deliveries', 'accept_job', 'mark_arrived', 'pick_up_order', 'complete_delivery'
]

ADMIN_OPERATIONS = [
    'overview', 'all_orders', 'settle_rider_debt', 'set_rider_suspension', 'verify_restaurant', 'cancel_order'
]

role_operations = {
    UserRole.CUSTOMER: CUSTOMER_OPERATIONS,
    UserRole.RESTAURANT: RESTAURANT_OPERATIONS,
    UserRole.RIDER: RIDER_OPERATIONS,
    UserRole.ADMIN: ADMIN_OPERATIONS,
    UserRole.NONE: []
}


def role_permissions(role: str) -> List[str]:
    return role_operations.get(role, [])


def is_allowed(role: str, operation: str) -> bool:
    return operation in role_permissions(role)
