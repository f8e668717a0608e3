import os
from decimal import Decimal

DELIVERY_FEE = Decimal(os.environ.get('DELIVERY_FEE', '150')).quantize(Decimal('1.00'))
PLATFORM_FEE = Decimal(os.environ.get('PLATFORM_FEE', '150')).quantize(Decimal('1.00'))

# riders owing more than this can't accept new jobs
RIDER_DEBT_LIMIT = Decimal(os.environ.get('RIDER_DEBT_LIMIT', '5000')).quantize(Decimal('1.00'))

PAYMENT_METHOD_COD = 'COD'

POLL_INTERVAL_SECONDS = float(os.environ.get('POLL_INTERVAL_SECONDS', '4'))

STORAGE_NAMESPACE = os.environ.get('STORAGE_NAMESPACE', 'axle')

ASSISTANT_MODEL = os.environ.get('ASSISTANT_MODEL', 'gpt-4o-mini')
ASSISTANT_MAX_TOKENS = 120

ANONYMOUS_SESSION = 'anonymous'
