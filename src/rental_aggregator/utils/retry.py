"""Retry helper with exponential backoff for blocking network calls."""

import logging
import time
from functools import wraps
from typing import Tuple, Type

logger = logging.getLogger(__name__)


def retry_with_backoff(
    max_retries: int = 3,
    backoff_factor: float = 2,
    exceptions: Tuple[Type[Exception], ...] = (Exception,),
):
    """
    Decorator for retrying functions with exponential backoff.

    Args:
        max_retries: Maximum number of retry attempts (0 disables retrying)
        backoff_factor: Multiplier for delay between retries (delay = backoff_factor ** attempt)
        exceptions: Tuple of exception types to catch and retry

    Example:
        @retry_with_backoff(max_retries=2, exceptions=(requests.RequestException,))
        def fetch_index():
            ...
    """

    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            for attempt in range(max_retries + 1):
                try:
                    return func(*args, **kwargs)
                except exceptions as e:
                    if attempt >= max_retries:
                        if max_retries:
                            logger.error(f"{func.__name__} failed after {max_retries + 1} attempts: {e}")
                        raise
                    delay = backoff_factor**attempt
                    logger.warning(
                        f"{func.__name__} failed (attempt {attempt + 1}/{max_retries + 1}): {e}. "
                        f"Retrying in {delay}s..."
                    )
                    time.sleep(delay)

        return wrapper

    return decorator
