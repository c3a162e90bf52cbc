"""
Transaction helpers for read-recompute-write operations.

Settlement, item transitions and cash session changes lock the rows they
recompute from. When the database cannot serialize two of them (deadlock,
serialization failure, locked SQLite file) the whole unit is re-run from a
fresh read a bounded number of times before the caller is told to try again.
"""
import functools
import logging
import time

from django.conf import settings
from django.db import OperationalError, transaction

from core_backend.exceptions import ConcurrencyError

logger = logging.getLogger(__name__)


def atomic_with_retry(func=None, *, max_retries=None, backoff_seconds=0.05):
    """
    Run the decorated function inside transaction.atomic(), retrying on
    OperationalError.

    Usage:
        @atomic_with_retry
        def settle(...): ...

        @atomic_with_retry(max_retries=5)
        def close_session(...): ...

    Raises:
        ConcurrencyError: once every attempt failed to serialize.
    """

    def decorator(inner):
        @functools.wraps(inner)
        def wrapper(*args, **kwargs):
            attempts = max_retries
            if attempts is None:
                attempts = getattr(settings, "POS_SETTLEMENT_MAX_RETRIES", 3)
            attempts = max(1, attempts)

            # A retry cannot help once we are already inside an outer transaction:
            # the outer block is broken and must be rolled back by its owner.
            if transaction.get_connection().in_atomic_block:
                with transaction.atomic():
                    return inner(*args, **kwargs)

            last_error = None
            for attempt in range(1, attempts + 1):
                try:
                    with transaction.atomic():
                        return inner(*args, **kwargs)
                except OperationalError as e:
                    last_error = e
                    logger.info(
                        f"{inner.__name__}: transaction failed to serialize "
                        f"(attempt {attempt}/{attempts}): {e}"
                    )
                    if attempt < attempts:
                        time.sleep(backoff_seconds * attempt)

            logger.error(f"{inner.__name__}: giving up after {attempts} attempts: {last_error}")
            raise ConcurrencyError()

        return wrapper

    if func is not None:
        return decorator(func)
    return decorator
