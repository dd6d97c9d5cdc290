"""
Attempt observers that route retry notifications to logging.
"""

import logging
from typing import Callable

from .config import AttemptEvent

logger = logging.getLogger(__name__)

Observer = Callable[[AttemptEvent], None]


def log_retry_attempt(name: str, logger: logging.Logger | None = None) -> Observer:
    """
    Build an observer that logs each retry as a warning.

    Args:
        name: Name of the retried operation, used as log context
        logger: Logger to write to (default: this module's logger)

    Returns:
        Observer callable
    """
    log = logger if logger is not None else logging.getLogger(__name__)

    def observer(event: AttemptEvent) -> None:
        log.warning(
            f"Retry attempt {event.attempt}/{event.max_retries} on {name}: "
            f"{type(event.error).__name__}: {event.error}, "
            f"waiting {event.delay:.1f}s ({event.elapsed:.1f}s elapsed)"
        )

    return observer


def chain_observers(*observers: Observer | None) -> Observer:
    """
    Combine observers into one that calls each in order, skipping None.

    A failing observer is logged at debug level and does not stop the others.
    """
    active = [o for o in observers if o is not None]

    def observer(event: AttemptEvent) -> None:
        for o in active:
            try:
                o(event)
            except Exception:
                logger.debug(f"Retry observer {o!r} failed", exc_info=True)

    return observer
