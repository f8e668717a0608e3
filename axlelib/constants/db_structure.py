USER = {
    'id_': None,
    'role': None,
    'name_': None,
    'phone': None,
    'email': None,
    'address': None,
    'location': None,
    'amount_owed': None,
    'is_suspended': None,
    'restaurant_details': None,
    'date_created': None,
    'date_updated': None
}

RESTAURANT = {
    'id_': None,
    'name_': None,
    'image': None,
    'rating': None,
    'delivery_time': None,
    'categories': None,
    'menu': None,
    'owner_name': None,
    'email': None,
    'phone': None,
    'address': None,
    'location': None,
    'is_verified': None,
    'date_created': None,
    'date_updated': None
}

MENU_ITEM = {
    'id_': None,
    'restaurant_id': None,
    'name_': None,
    'description': None,
    'price': None,
    'image': None,
    'category': None
}

CART_ITEM = {
    **MENU_ITEM,
    'quantity': None
}

FEEDBACK = {
    'rating': None,
    'comment_': None,
    'timestamp_': None
}

ORDER = {
    'id_': None,
    'customer_id': None,
    'restaurant_id': None,
    'restaurant_name': None,
    'items': None,
    'item_total': None,
    'delivery_fee': None,
    'platform_fee': None,
    'total': None,
    'status_': None,
    'date_created': None,
    'date_updated': None,
    'delivery_address': None,
    'delivery_location': None,
    'payment_method': None,
    'rider_id': None,
    'rider_name': None,
    'rider_phone': None,
    'rider_arrived': None,
    'estimated_time': None,
    'feedback': None,
    'settlement': None,
    'history': None
}
