__all__ = ["NotAuthorizedException", "AccessDenied", "RecordNotFound", "NumberOfRetriesExceeded",
           "MandatoryFieldsAreNotFilled", "ValidationException", "OrderNotFound", "UserNotFound",
           "RestaurantNotFound", "MenuItemNotFound", "InvalidStatusTransition", "OrderIsTerminal",
           "RiderAlreadyAssigned", "RiderNotAssigned", "RiderRestricted", "FeedbackNotAllowed",
           "FeedbackAlreadyAttached", "SettlementAlreadyRecorded", "StorageUnavailable"]


class AxleException(Exception):
    REASON = 'error'


class NotAuthorizedException(AxleException):
    REASON = 'not_authenticated'
    LEVEL = 'warning'


# Generic Exceptions
class AccessDenied(AxleException):
    REASON = 'access_denied'
    LEVEL = 'warning'


class MandatoryFieldsAreNotFilled(AxleException):
    REASON = 'validation_error'
    LEVEL = 'warning'


# Validations exceptions
class ValidationException(AxleException):
    REASON = 'validation_error'
    LEVEL = 'warning'


# Storage exceptions
class RecordNotFound(AxleException):
    REASON = 'not_found'
    LEVEL = 'warning'


class OrderNotFound(RecordNotFound):
    pass


class UserNotFound(RecordNotFound):
    pass


class RestaurantNotFound(RecordNotFound):
    pass


class MenuItemNotFound(RecordNotFound):
    pass


class StorageUnavailable(AxleException):
    REASON = 'storage_unavailable'


# DB Performance Exception
class NumberOfRetriesExceeded(StorageUnavailable):
    pass


# Order lifecycle exceptions
class InvalidStatusTransition(AxleException):
    REASON = 'invalid_transition'
    LEVEL = 'info'


class PreconditionViolation(AxleException):
    REASON = 'precondition_failed'
    LEVEL = 'info'


class OrderIsTerminal(PreconditionViolation):
    REASON = 'order_terminal'


class RiderAlreadyAssigned(PreconditionViolation):
    REASON = 'order_unavailable'


class RiderNotAssigned(PreconditionViolation):
    pass


class FeedbackNotAllowed(PreconditionViolation):
    pass


class FeedbackAlreadyAttached(PreconditionViolation):
    pass


class SettlementAlreadyRecorded(PreconditionViolation):
    LEVEL = 'error'


# Ledger exceptions
class RiderRestricted(AxleException):
    REASON = 'rider_restricted'
    LEVEL = 'info'
