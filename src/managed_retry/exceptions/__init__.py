"""
Managed Retry - Exception Hierarchy.

Terminal errors surfaced by a retry run.
"""

from .base import (
    RetryError,
    BailedError,
    RetriesExhaustedError,
    MisuseError,
)

__all__ = [
    "RetryError",
    "BailedError",
    "RetriesExhaustedError",
    "MisuseError",
]
