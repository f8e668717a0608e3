# DynamoDB reserved words are stored with a trailing underscore
to_db = {
    'id': 'id_',
    'name': 'name_',
    'status': 'status_',
    'comment': 'comment_',
    'timestamp': 'timestamp_'
}

from_db = {value: key for key, value in to_db.items()}
