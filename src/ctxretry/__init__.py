"""Cancellation-aware, deadline-bound exponential retry."""

from .context import Context, background, with_cancel, with_deadline, with_timeout
from .errors import (
    CancelReason,
    Cancelled,
    ConfigurationError,
    ContextError,
    DeadlineExceeded,
    RetryError,
    RetryFailedError,
)
from .retry import backoff_for, backoff_schedule, exponential_retry, retry_with_policy, retrying

__all__ = [
    "CancelReason",
    "Cancelled",
    "ConfigurationError",
    "Context",
    "ContextError",
    "DeadlineExceeded",
    "RetryError",
    "RetryFailedError",
    "background",
    "backoff_for",
    "backoff_schedule",
    "exponential_retry",
    "retry_with_policy",
    "retrying",
    "with_cancel",
    "with_deadline",
    "with_timeout",
]
