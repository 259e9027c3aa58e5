"""
Error Handling

Fail-soft helpers shared by classifiers, stages and storage adapters.
A failure is logged once, where it is absorbed, and turned into a
neutral value (None, [] or False) for the caller.
"""

from typing import Any, Callable, Optional, TypeVar
from functools import wraps
import logging

from ..domain.exceptions import DomainException


logger = logging.getLogger(__name__)

T = TypeVar("T")


def _describe(exc: BaseException) -> str:
    if isinstance(exc, DomainException) and exc.details:
        return f"{exc} {exc.details}"
    return f"{type(exc).__name__}: {exc}"


def handle_exception(
    default_return: T,
    log_level: int = logging.ERROR,
    reraise: bool = False
) -> Callable:
    """
    Decorator returning ``default_return`` when the wrapped call raises.

    Domain errors are logged with their details; anything else also gets
    a traceback at DEBUG.
    """
    def decorator(func: Callable) -> Callable:
        @wraps(func)
        def wrapper(*args, **kwargs) -> T:
            try:
                return func(*args, **kwargs)
            except Exception as e:
                logger.log(log_level, f"{func.__qualname__}: {_describe(e)}")
                if not isinstance(e, DomainException):
                    logger.debug("Traceback", exc_info=True)
                if reraise:
                    raise
                return default_return
        return wrapper
    return decorator


class ErrorHandler:
    """
    Context manager that records (and optionally absorbs) one failure.

    Storage adapters wrap each query in it so that a failed call falls
    through to the method's neutral return value:

        with ErrorHandler(self.logger, "get_medication", suppress=True):
            return ...
        return None
    """

    def __init__(self, logger: logging.Logger, context: str = "", suppress: bool = False):
        self.logger = logger
        self.context = context
        self.suppress = suppress
        self.error: Optional[BaseException] = None

    def __enter__(self) -> "ErrorHandler":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        if exc_val is None:
            return False

        self.error = exc_val
        prefix = f"[{self.context}] " if self.context else ""
        self.logger.error(f"{prefix}{_describe(exc_val)}")
        if not isinstance(exc_val, DomainException):
            self.logger.debug("Traceback", exc_info=(exc_type, exc_val, exc_tb))

        return self.suppress

    @property
    def has_error(self) -> bool:
        return self.error is not None

    @property
    def error_message(self) -> Optional[str]:
        return str(self.error) if self.error is not None else None

    @property
    def is_recoverable(self) -> bool:
        if isinstance(self.error, DomainException):
            return self.error.is_recoverable
        return self.error is None


def safe_call(
    func: Callable,
    *args,
    default: Any = None,
    logger: Optional[logging.Logger] = None,
    **kwargs
) -> Any:
    """Call ``func``; on any exception log a warning and return ``default``."""
    try:
        return func(*args, **kwargs)
    except Exception as e:
        if logger:
            logger.warning(f"{getattr(func, '__name__', func)} failed: {_describe(e)}")
        return default
