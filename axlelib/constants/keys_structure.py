from axlelib.constants.constants import STORAGE_NAMESPACE

users_key = f'{STORAGE_NAMESPACE}_users'
orders_key = f'{STORAGE_NAMESPACE}_orders'
restaurants_key = f'{STORAGE_NAMESPACE}_restaurants'
current_user_key = f'{STORAGE_NAMESPACE}_current_user'

collections_pk = 'collections_{namespace}'
collections_sk = '{collection}'
