import functools
from typing import Callable, Any, Dict

from axlelib.utils.exceptions import AxleException
from axlelib.utils.logger import logger, log_exception


class Outcome:
    """
    Result of a session operation handed back to a view.
    ok is False when the operation was rejected, body then describes the error
    """

    def __init__(self, ok: bool, body: Any = None):
        self.ok = ok
        self.body = body

    @property
    def reason(self):
        if self.ok or not isinstance(self.body, dict):
            return None
        return self.body.get('reason')

    def __bool__(self):
        return self.ok

    def __repr__(self):
        return f'Outcome(ok={self.ok}, body={self.body!r})'


def success_response(body: Any = None) -> Outcome:
    return Outcome(ok=True, body=body)


def error_response(error: Exception, msg: str = "", *args, **kwargs) -> Outcome:
    log_exception(error, msg, *args, **kwargs)
    body: Dict = {
        'error': str(error),
        'exception': error.__class__.__name__,
        'reason': getattr(error, 'REASON', 'error'),
        'message': str(msg),
        'error_id': getattr(logger, 'current_session_id', None),
        'level': getattr(error, 'LEVEL', 'exception')
    }
    return Outcome(ok=False, body=body)


def operation_exception_handler(func: Callable):
    @functools.wraps(func)
    def result(*args, **kwargs):
        try:
            logger.info(f'Calling function {func.__name__}')
            return func(*args, **kwargs)
        except AxleException as axle_error:
            return error_response(
                error=axle_error,
                msg=f'function = {func.__name__} , error = {axle_error}')
        except Exception as exception:
            return error_response(
                error=exception,
                msg=f'function = {func.__name__}, error = {exception}')
    return result


def log_start_finish(func: Callable):
    @functools.wraps(func)
    def result(*args, **kwargs):
        logger.info(f'{func.__name__} ::: started')
        response = func(*args, **kwargs)
        logger.info(f'{func.__name__} ::: finished')
        return response
    return result
