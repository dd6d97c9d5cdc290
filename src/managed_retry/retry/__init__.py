"""
Managed Retry - Retry Logic.

Retry loop with exponential backoff, optional jitter and early bail.
"""

from .config import AttemptEvent, RetryConfig
from .backoff import BailPredicate, calculate_backoff, run_with_retry, with_retry
from .observers import Observer, chain_observers, log_retry_attempt

__all__ = [
    "AttemptEvent",
    "RetryConfig",
    "BailPredicate",
    "Observer",
    "calculate_backoff",
    "run_with_retry",
    "with_retry",
    "chain_observers",
    "log_retry_attempt",
]
