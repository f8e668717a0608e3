import functools

from axlelib.auth import is_allowed
from axlelib.utils import exceptions
from axlelib.utils.logger import logger


def authenticate_class(func):
    """
    Wrapper for session methods which require an active user
    allowed to run the operation
    """

    @functools.wraps(func)
    def result_auth(*args, **kwargs):
        session = args[0]
        user = session.current_user
        if user is None:
            raise exceptions.NotAuthorizedException(f'{func.__name__} requires an active session')
        if not is_allowed(user.role, func.__name__):
            logger.warning(f"authenticate_class ::: role {user.role} is not allowed to {func.__name__}")
            raise exceptions.AccessDenied(f'role {user.role} is not allowed to {func.__name__}')
        logger.info(f'authenticate_class ::: SUCCESS, user {user.id_} {user.role} {func.__name__}')
        return func(*args, **kwargs)

    return result_auth
