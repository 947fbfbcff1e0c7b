"""Deadline-bound exponential retry."""

from __future__ import annotations

import functools
import logging
from collections.abc import Callable
from datetime import timedelta
from typing import TYPE_CHECKING, TypeVar

from ctxretry.context import Context, as_seconds
from ctxretry.errors import CancelReason, ConfigurationError, RetryFailedError

if TYPE_CHECKING:
    from ctxretry.config.models import RetryPolicyConfig

T = TypeVar("T")

LOGGER = logging.getLogger(__name__)


def backoff_for(base_backoff: float | timedelta, attempt: int) -> float:
    """Seconds to wait after failed attempt number ``attempt`` (0-indexed)."""
    return as_seconds(base_backoff) * (2**attempt)


def backoff_schedule(base_backoff: float | timedelta, max_retries: int) -> list[float]:
    """Waits that follow each failed attempt when every attempt fails."""
    return [backoff_for(base_backoff, attempt) for attempt in range(max_retries)]


def exponential_retry(
    ctx: Context,
    operation: Callable[[], T],
    *,
    max_retries: int,
    base_backoff: float | timedelta,
) -> T:
    """Call ``operation`` until it succeeds, ``max_retries`` is spent or ``ctx`` ends.

    The operation runs at most ``max_retries + 1`` times. Between attempts the
    call waits ``base_backoff * 2**attempt`` unless the context finishes
    first, in which case the context's error is raised and the operation's
    error is dropped. When the budget runs out the last operation error is
    re-raised unchanged.

    ``ctx`` must carry a deadline; otherwise :class:`ConfigurationError` is
    raised before the first attempt.
    """

    if not ctx.has_deadline():
        raise ConfigurationError("no deadline set by caller")
    if max_retries < 0:
        raise ConfigurationError("max_retries must be >= 0")
    if as_seconds(base_backoff) <= 0:
        raise ConfigurationError("base_backoff must be positive")

    for attempt in range(max_retries + 1):
        try:
            return operation()
        except Exception:  # noqa: BLE001 - every failure is retried until the budget is spent
            if attempt == max_retries:
                raise
            if ctx.wait(backoff_for(base_backoff, attempt)):
                if ctx.reason() is CancelReason.DEADLINE_EXCEEDED:
                    LOGGER.info("deadline exceeded")
                else:
                    LOGGER.info("canceled or timeout")
                raise ctx.error() from None
    raise RetryFailedError("exponential retry failed")


def retry_with_policy(ctx: Context, operation: Callable[[], T], policy: "RetryPolicyConfig") -> T:
    """Run :func:`exponential_retry` with the budget of a configured policy."""

    return exponential_retry(
        ctx,
        operation,
        max_retries=policy.max_retries,
        base_backoff=policy.base_backoff_seconds,
    )


def retrying(*, max_retries: int, base_backoff: float | timedelta) -> Callable[[Callable[..., T]], Callable[..., T]]:
    """Decorator form of :func:`exponential_retry`.

    The decorated function receives the context as its first positional
    argument; each attempt calls it again with the same arguments.
    """

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @functools.wraps(func)
        def wrapper(ctx: Context, *args, **kwargs) -> T:
            return exponential_retry(
                ctx,
                lambda: func(ctx, *args, **kwargs),
                max_retries=max_retries,
                base_backoff=base_backoff,
            )

        return wrapper

    return decorator


__all__ = [
    "backoff_for",
    "backoff_schedule",
    "exponential_retry",
    "retry_with_policy",
    "retrying",
]
