"""Retry helpers for extraction and copy steps"""

import logging
import time
from typing import Any, Callable, Tuple, Type, TypeVar

from ..constants import DEFAULT_RETRY_COUNT, DEFAULT_RETRY_DELAY

T = TypeVar('T')

logger = logging.getLogger(__name__)


def retry_call(func: Callable[..., T],
               *args,
               retries: int = DEFAULT_RETRY_COUNT,
               delay: float = DEFAULT_RETRY_DELAY,
               backoff: float = 2.0,
               exceptions: Tuple[Type[BaseException], ...] = (Exception,),
               no_retry: Tuple[Type[BaseException], ...] = (PermissionError,),
               description: str = "operation",
               **kwargs: Any) -> T:
    """
    Call a function, retrying on failure with exponential backoff

    Args:
        func: Function to call
        *args: Function arguments
        retries: Additional attempts after the first one
        delay: Initial delay between attempts
        backoff: Delay multiplier
        exceptions: Exceptions that trigger a retry
        no_retry: Exceptions raised on the first failure, even if listed in `exceptions`
        description: Name used in log messages
        **kwargs: Function keyword arguments

    Returns:
        Function result

    Raises:
        Last exception if all attempts fail
    """
    current_delay = delay
    attempts = retries + 1

    for attempt in range(1, attempts + 1):
        try:
            return func(*args, **kwargs)
        except no_retry:
            raise
        except exceptions as e:
            if attempt >= attempts:
                raise
            logger.warning(
                f"{description} failed (attempt {attempt}/{attempts}): {e}; retrying"
            )
            if current_delay > 0:
                time.sleep(current_delay)
            current_delay *= backoff
