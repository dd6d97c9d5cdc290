"""
Managed Retry - Transport Policy.

Retry presets for transport calls that bail on chosen status codes.
"""

from .policy import (
    DEFAULT_SKIP_STATUS_CODES,
    DEFAULT_TRANSPORT_CONFIG,
    TransportRetryPolicy,
    bail_on_status_codes,
    extract_status_code,
    transport_retry,
    with_transport_retry,
)

__all__ = [
    "DEFAULT_SKIP_STATUS_CODES",
    "DEFAULT_TRANSPORT_CONFIG",
    "TransportRetryPolicy",
    "bail_on_status_codes",
    "extract_status_code",
    "transport_retry",
    "with_transport_retry",
]
