"""
Managed Retry - Backoff retries for async operations.

Retry loop with early bail, attempt observers and a transport preset that
stops on non-retryable status codes.
"""

from .exceptions import (
    RetryError,
    BailedError,
    RetriesExhaustedError,
    MisuseError,
)
from .retry import (
    AttemptEvent,
    RetryConfig,
    calculate_backoff,
    chain_observers,
    log_retry_attempt,
    with_retry,
    run_with_retry,
)
from .transport import (
    TransportRetryPolicy,
    bail_on_status_codes,
    extract_status_code,
    transport_retry,
    with_transport_retry,
)

__version__ = "0.1.0"

__all__ = [
    # Version
    "__version__",
    # Exceptions
    "RetryError",
    "BailedError",
    "RetriesExhaustedError",
    "MisuseError",
    # Retry
    "AttemptEvent",
    "RetryConfig",
    "calculate_backoff",
    "chain_observers",
    "log_retry_attempt",
    "with_retry",
    "run_with_retry",
    # Transport
    "TransportRetryPolicy",
    "bail_on_status_codes",
    "extract_status_code",
    "transport_retry",
    "with_transport_retry",
]
