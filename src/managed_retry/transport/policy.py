"""
Retry policy for transport calls that fail with HTTP-like status codes.

Certain statuses (by default 400) mean the request will never succeed as
sent, so the policy bails on them instead of spending the retry budget.
"""

from dataclasses import dataclass, field
from typing import Awaitable, Callable, Iterable, ParamSpec, TypeVar

import httpx

from ..retry import (
    BailPredicate,
    Observer,
    RetryConfig,
    with_retry,
    run_with_retry,
)

P = ParamSpec("P")
T = TypeVar("T")

DEFAULT_SKIP_STATUS_CODES = frozenset({400})
DEFAULT_TRANSPORT_CONFIG = RetryConfig(max_retries=3, max_delay=5.0)


def _as_status(value: object) -> int | None:
    # bool is an int subclass but never a status code
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    return None


def extract_status_code(error: BaseException) -> int | None:
    """
    Extract an HTTP-like status code from an error, if it carries one.

    Recognizes httpx.HTTPStatusError directly, then falls back to a
    structural check so other clients' errors work too: a ``response``
    exposing ``status_code`` or ``status``, or the error's own
    ``status_code`` / ``status`` attribute.

    Returns:
        The status code, or None when the error has none
    """
    if isinstance(error, httpx.HTTPStatusError):
        return error.response.status_code

    response = getattr(error, "response", None)
    if response is not None:
        for attr in ("status_code", "status"):
            status = _as_status(getattr(response, attr, None))
            if status is not None:
                return status

    for attr in ("status_code", "status"):
        status = _as_status(getattr(error, attr, None))
        if status is not None:
            return status

    return None


def bail_on_status_codes(codes: Iterable[int]) -> BailPredicate:
    """Build a bail predicate matching errors whose status code is in codes."""
    skip = frozenset(codes)

    def bail_on(error: Exception) -> bool:
        status = extract_status_code(error)
        return status is not None and status in skip

    return bail_on


@dataclass(frozen=True)
class TransportRetryPolicy:
    """
    Retry configuration bundled with a status-code bail predicate.

    Attributes:
        config: Retry schedule
        skip_status_codes: Statuses that stop retrying immediately
    """

    config: RetryConfig = DEFAULT_TRANSPORT_CONFIG
    skip_status_codes: frozenset[int] = field(default=DEFAULT_SKIP_STATUS_CODES)

    @property
    def bail_on(self) -> BailPredicate:
        return bail_on_status_codes(self.skip_status_codes)

    async def run(
        self,
        operation: Callable[[], Awaitable[T]],
        on_retry: Observer | None = None,
    ) -> T:
        """Run an async operation under this policy."""
        return await run_with_retry(operation, self.config, self.bail_on, on_retry)

    def wrap(
        self,
        func: Callable[P, Awaitable[T]],
        on_retry: Observer | None = None,
    ) -> Callable[P, Awaitable[T]]:
        """Return func wrapped with this policy, logging each retry."""
        return with_retry(self.config, self.bail_on, on_retry)(func)


def with_transport_retry(
    skip_status_codes: Iterable[int] = DEFAULT_SKIP_STATUS_CODES,
    **overrides,
) -> TransportRetryPolicy:
    """
    Build a transport retry policy.

    Args:
        skip_status_codes: Statuses that stop retrying immediately (default: {400})
        **overrides: RetryConfig fields replacing the transport defaults
            (max_retries=3, max_delay=5.0)

    Returns:
        Configured TransportRetryPolicy
    """
    return TransportRetryPolicy(
        config=DEFAULT_TRANSPORT_CONFIG.with_overrides(**overrides),
        skip_status_codes=frozenset(skip_status_codes),
    )


def transport_retry(
    skip_status_codes: Iterable[int] = DEFAULT_SKIP_STATUS_CODES,
    **overrides,
) -> Callable[[Callable[P, Awaitable[T]]], Callable[P, Awaitable[T]]]:
    """Decorator form of with_transport_retry."""
    policy = with_transport_retry(skip_status_codes, **overrides)
    return policy.wrap
