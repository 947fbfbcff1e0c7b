"""Error taxonomy for bounded retries."""

from __future__ import annotations

from enum import Enum


class CancelReason(str, Enum):
    """Why an execution context stopped."""

    DEADLINE_EXCEEDED = "deadline_exceeded"
    CANCELLED = "cancelled"


class RetryError(Exception):
    """Base class for errors raised by ctxretry itself."""


class ConfigurationError(RetryError, ValueError):
    """Raised when the caller misuses the retry primitive."""


class ContextError(RetryError):
    """Raised when an execution context is cancelled or expires."""

    reason: CancelReason


class Cancelled(ContextError):
    reason = CancelReason.CANCELLED

    def __init__(self, message: str = "context canceled") -> None:
        super().__init__(message)


class DeadlineExceeded(ContextError, TimeoutError):
    reason = CancelReason.DEADLINE_EXCEEDED

    def __init__(self, message: str = "context deadline exceeded") -> None:
        super().__init__(message)


class RetryFailedError(RetryError):
    """Raised if the retry loop ever terminates without a result (logic defect)."""


def error_for(reason: CancelReason) -> ContextError:
    """Return a fresh exception instance for ``reason``."""

    if reason is CancelReason.DEADLINE_EXCEEDED:
        return DeadlineExceeded()
    return Cancelled()


__all__ = [
    "CancelReason",
    "Cancelled",
    "ConfigurationError",
    "ContextError",
    "DeadlineExceeded",
    "RetryError",
    "RetryFailedError",
    "error_for",
]
