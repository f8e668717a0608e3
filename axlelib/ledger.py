"""
Rider ledger rules.

A rider collects the order total in cash, keeps the delivery fee and owes the
platform the rest. Riders owing more than RIDER_DEBT_LIMIT, or suspended by an
admin, can't accept new jobs. Every function here is pure: it returns updated
copies and never touches storage.
"""
from decimal import Decimal
from typing import Tuple, Optional

from axlelib.base_class_entity import now_iso
from axlelib.constants.constants import RIDER_DEBT_LIMIT
from axlelib.orders import Order
from axlelib.users import User
from axlelib.utils import exceptions
from axlelib.utils.logger import logger

RESTRICTION_DEBT_LIMIT = 'debt_limit_exceeded'
RESTRICTION_SUSPENDED = 'suspended'


def _check_rider(rider: User) -> None:
    if not rider.is_rider:
        raise exceptions.ValidationException(f'user {rider.id_} with role {rider.role} is not a rider')


def settlement_amount(order: Order) -> Decimal:
    return order.total - order.delivery_fee


def restriction_reason(rider: User, debt_limit: Decimal = RIDER_DEBT_LIMIT) -> Optional[str]:
    _check_rider(rider)
    if rider.is_suspended:
        return RESTRICTION_SUSPENDED
    if rider.amount_owed > debt_limit:
        return RESTRICTION_DEBT_LIMIT
    return None


def is_restricted(rider: User, debt_limit: Decimal = RIDER_DEBT_LIMIT) -> bool:
    return restriction_reason(rider, debt_limit) is not None


def ensure_can_accept_jobs(rider: User, debt_limit: Decimal = RIDER_DEBT_LIMIT) -> None:
    reason = restriction_reason(rider, debt_limit)
    if reason is not None:
        logger.info(f"ensure_can_accept_jobs ::: rider {rider.id_} restricted, {reason=}, "
                    f"amount_owed={rider.amount_owed}")
        raise exceptions.RiderRestricted(
            f'rider {rider.id_} is restricted from accepting orders ({reason}), '
            f'amount owed {rider.amount_owed}, limit {debt_limit}')


def apply_settlement(rider: User, order: Order) -> Tuple[User, Order]:
    """
    Books the cash collected for a delivered order as rider debt
    :return:
    updated copies of the rider and of the order carrying the settlement record
    """
    _check_rider(rider)
    if order.settlement is not None:
        raise exceptions.SettlementAlreadyRecorded(
            f'order {order.id_} was already settled for rider {order.settlement.get("rider_id")}')
    if order.rider_id != rider.id_:
        raise exceptions.ValidationException(f'rider {rider.id_} is not assigned to order {order.id_}')

    amount = settlement_amount(order)
    settled_at = now_iso()

    updated_rider = rider.copy()
    updated_rider.amount_owed = rider.amount_owed + amount
    updated_rider.date_updated = settled_at

    updated_order = order.copy()
    updated_order.settlement = {'rider_id': rider.id_, 'amount': amount, 'date_settled': settled_at}

    logger.info(f"apply_settlement ::: order {order.id_} rider {rider.id_} "
                f"amount_owed {rider.amount_owed} -> {updated_rider.amount_owed}")
    return updated_rider, updated_order


def settle_debt(rider: User) -> User:
    """ Clears the debt and lifts the suspension, not incremental """
    _check_rider(rider)
    updated_rider = rider.copy()
    updated_rider.amount_owed = Decimal('0.00')
    updated_rider.is_suspended = False
    updated_rider.date_updated = now_iso()
    logger.info(f"settle_debt ::: rider {rider.id_} amount_owed {rider.amount_owed} -> 0")
    return updated_rider


def set_suspension(rider: User, suspended: bool) -> User:
    _check_rider(rider)
    updated_rider = rider.copy()
    updated_rider.is_suspended = bool(suspended)
    updated_rider.date_updated = now_iso()
    logger.info(f"set_suspension ::: rider {rider.id_} is_suspended={updated_rider.is_suspended}")
    return updated_rider
