"""
Backoff calculation, the retry loop and the retry decorator.
"""

import asyncio
import functools
import inspect
import logging
import random
import time
from typing import Any, Awaitable, Callable, ParamSpec, TypeVar

from .config import AttemptEvent, RetryConfig
from .observers import Observer, chain_observers, log_retry_attempt
from ..exceptions import BailedError, MisuseError, RetriesExhaustedError

logger = logging.getLogger(__name__)

P = ParamSpec("P")
T = TypeVar("T")

BailPredicate = Callable[[Exception], bool]


def calculate_backoff(attempt: int, config: RetryConfig) -> float:
    """
    Calculate backoff delay before retrying a failed attempt.

    Args:
        attempt: One-based number of the failed attempt
        config: Retry configuration

    Returns:
        Delay in seconds, between min_delay and max_delay
    """
    try:
        delay = config.min_delay * (config.backoff_factor ** (attempt - 1))
    except OverflowError:
        delay = config.max_delay

    if config.randomize:
        delay = delay * (1 + random.random())

    return min(delay, config.max_delay)


def _should_bail(bail_on: BailPredicate | None, error: Exception) -> bool:
    if bail_on is None:
        return False
    try:
        return bool(bail_on(error))
    except Exception:
        # Treat a failing predicate as "do not bail".
        logger.warning(
            f"Bail predicate failed on {type(error).__name__}: {error}, retrying",
            exc_info=True,
        )
        return False


def _notify(on_retry: Observer, event: AttemptEvent) -> None:
    try:
        on_retry(event)
    except Exception:
        logger.debug(f"Retry observer failed on attempt {event.attempt}", exc_info=True)


def _describe(operation: Callable[..., Any]) -> str:
    func = operation.func if isinstance(operation, functools.partial) else operation
    return getattr(func, "__qualname__", repr(func))


async def run_with_retry(
    operation: Callable[[], Awaitable[T]],
    config: RetryConfig | None = None,
    bail_on: BailPredicate | None = None,
    on_retry: Observer | None = None,
) -> T:
    """
    Run an async operation, retrying failures with exponential backoff.

    Args:
        operation: Zero-argument callable returning an awaitable
        config: Retry configuration (default: RetryConfig())
        bail_on: Optional predicate; returning True stops retrying at once
        on_retry: Optional observer called before each retry

    Returns:
        The operation's result

    Raises:
        BailedError: bail_on matched the error of an attempt
        RetriesExhaustedError: every allowed attempt failed
        MisuseError: operation did not return an awaitable
    """
    if config is None:
        config = RetryConfig()

    start = time.monotonic()
    attempt = 1

    while True:
        try:
            pending = operation()
            if not inspect.isawaitable(pending):
                raise MisuseError(
                    f"Cannot retry {_describe(operation)}: "
                    f"returned {type(pending).__name__}, not an awaitable",
                    attempts=attempt,
                )
            return await pending
        except MisuseError:
            raise
        except Exception as e:
            if _should_bail(bail_on, e):
                raise BailedError(attempts=attempt, last_error=e) from e
            if attempt > config.max_retries:
                raise RetriesExhaustedError(attempts=attempt, last_error=e) from e

            delay = calculate_backoff(attempt, config)
            if on_retry is not None:
                _notify(
                    on_retry,
                    AttemptEvent(
                        attempt=attempt,
                        error=e,
                        elapsed=time.monotonic() - start,
                        delay=delay,
                        max_retries=config.max_retries,
                    ),
                )

        await asyncio.sleep(delay)
        attempt += 1


def with_retry(
    config: RetryConfig | None = None,
    bail_on: BailPredicate | None = None,
    on_retry: Observer | None = None,
    logger: logging.Logger | None = None,
) -> Callable[[Callable[P, Awaitable[T]]], Callable[P, Awaitable[T]]]:
    """
    Decorator for async functions with retry logic.

    Every retry calls on_retry first, then logs a warning naming the
    decorated function.

    Args:
        config: Retry configuration (default: RetryConfig())
        bail_on: Optional predicate; returning True stops retrying at once
        on_retry: Optional observer called before each retry
        logger: Logger for retry warnings (default: the observers module logger)

    Returns:
        Decorated async function with retry behavior
    """

    def decorator(func: Callable[P, Awaitable[T]]) -> Callable[P, Awaitable[T]]:
        name = getattr(func, "__qualname__", repr(func))
        if not callable(func):
            raise MisuseError(f"Cannot apply retry to {name}: not callable")
        if inspect.isfunction(func) and not inspect.iscoroutinefunction(func):
            raise MisuseError(f"Cannot apply retry to a not async function {name}")

        observer = chain_observers(on_retry, log_retry_attempt(name, logger))

        @functools.wraps(func)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
            return await run_with_retry(
                functools.partial(func, *args, **kwargs),
                config,
                bail_on,
                observer,
            )

        return wrapper

    return decorator
