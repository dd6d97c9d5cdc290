"""
Base exception classes for retry orchestration.

Each terminal error records how many attempts were made and the last error
raised by the wrapped operation, so callers can tell "gave up after N tries"
apart from "deliberately stopped early".
"""


class RetryError(Exception):
    """Base exception for all retry errors."""

    def __init__(
        self,
        message: str,
        *,
        attempts: int = 0,
        last_error: BaseException | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.attempts = attempts
        self.last_error = last_error

    def __str__(self) -> str:
        parts = [self.message]
        if self.attempts:
            parts.append(f"(attempts: {self.attempts})")
        if self.last_error is not None:
            parts.append(f"{type(self.last_error).__name__}: {self.last_error}")
        return " ".join(parts)


class BailedError(RetryError):
    """Raised when the bail predicate stops the run before the budget is spent."""

    def __init__(self, message: str = "Retry bailed", **kwargs):
        super().__init__(message, **kwargs)


class RetriesExhaustedError(RetryError):
    """Raised when every allowed attempt failed."""

    def __init__(self, message: str = "Retries exhausted", **kwargs):
        super().__init__(message, **kwargs)


class MisuseError(RetryError):
    """Raised when the wrapped operation cannot be awaited. Never retried."""

    def __init__(self, message: str = "Operation is not awaitable", **kwargs):
        super().__init__(message, **kwargs)
