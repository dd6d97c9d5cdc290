"""
Retry configuration and attempt event definitions.
"""

from dataclasses import dataclass, replace


@dataclass(frozen=True)
class RetryConfig:
    """
    Configuration for retry behavior.

    Attributes:
        max_retries: Retries after the first attempt; 0 means try once (default: 10)
        min_delay: Delay before the first retry in seconds (default: 1.0)
        max_delay: Maximum delay cap in seconds (default: 60.0)
        backoff_factor: Growth factor applied per attempt (default: 2.0)
        randomize: Multiply each delay by a random factor in [1, 2) (default: True)
    """

    max_retries: int = 10
    min_delay: float = 1.0
    max_delay: float = 60.0
    backoff_factor: float = 2.0
    randomize: bool = True

    def __post_init__(self) -> None:
        if self.max_retries < 0:
            raise ValueError("max_retries must be >= 0")
        if self.min_delay < 0:
            raise ValueError("min_delay must be >= 0")
        if self.max_delay < self.min_delay:
            raise ValueError("max_delay must be >= min_delay")
        if self.backoff_factor <= 1:
            raise ValueError("backoff_factor must be > 1")

    def with_overrides(self, **changes) -> "RetryConfig":
        """Return a validated copy with the given fields replaced."""
        return replace(self, **changes)

    @classmethod
    def aggressive(cls) -> "RetryConfig":
        """Preset for aggressive retry (more attempts, longer delays)."""
        return cls(
            max_retries=15,
            min_delay=2.0,
            max_delay=120.0,
        )

    @classmethod
    def conservative(cls) -> "RetryConfig":
        """Preset for conservative retry (fewer attempts, shorter delays)."""
        return cls(
            max_retries=3,
            min_delay=0.5,
            max_delay=10.0,
        )

    @classmethod
    def no_retry(cls) -> "RetryConfig":
        """Preset for no retry (single attempt only)."""
        return cls(max_retries=0)


@dataclass(frozen=True)
class AttemptEvent:
    """
    A failed attempt that is about to be retried.

    Attributes:
        attempt: One-based number of the attempt that failed
        error: The error raised by that attempt
        elapsed: Seconds since the retry run started
        delay: Seconds the run will wait before the next attempt
        max_retries: Retry budget of the run
    """

    attempt: int
    error: Exception
    elapsed: float
    delay: float = 0.0
    max_retries: int = 0
