"""Execution contexts carrying a deadline and a cancellation signal.

A :class:`Context` is the caller's statement of how long work may run. It
exposes an absolute deadline on the ``time.monotonic`` clock, a signal that
can be waited on, and the reason it stopped (deadline vs. explicit cancel).

Contexts form a tree: a child never outlives its parent. Its deadline is the
earlier of its own and its parent's, and cancelling a parent cancels all of
its children.

Typical use::

    with with_timeout(background(), 2.0) as ctx:
        value = exponential_retry(ctx, op, max_retries=3, base_backoff=0.1)
"""

from __future__ import annotations

import threading
import time
from datetime import timedelta
from typing import Optional

from ctxretry.errors import CancelReason, ContextError, error_for


def as_seconds(value: float | timedelta) -> float:
    """Normalise a duration given as seconds or ``timedelta`` to float seconds."""

    if isinstance(value, timedelta):
        return value.total_seconds()
    return float(value)


class Context:
    """Cancellable scope with an optional monotonic deadline.

    A child stays registered with its parent until it is cancelled or
    observed past its deadline. Cancel derived contexts when done with
    them, or use them as ``with`` blocks.
    """

    def __init__(self, deadline: Optional[float] = None, *, parent: Optional["Context"] = None) -> None:
        self._lock = threading.Lock()
        self._event = threading.Event()
        self._reason: Optional[CancelReason] = None
        self._children: set[Context] = set()
        self._parent = parent

        if parent is not None:
            parent_deadline = parent.deadline()
            if parent_deadline is not None and (deadline is None or parent_deadline < deadline):
                deadline = parent_deadline
        self._deadline = deadline

        if parent is not None:
            parent._attach(self)

    def __enter__(self) -> "Context":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.cancel()

    def __repr__(self) -> str:
        return f"Context(deadline={self._deadline!r}, reason={self._reason!r})"

    def deadline(self) -> Optional[float]:
        """Return the absolute ``time.monotonic`` deadline, if any."""
        return self._deadline

    def has_deadline(self) -> bool:
        return self._deadline is not None

    def remaining(self) -> Optional[float]:
        """Seconds left until the deadline (never negative), or ``None``."""
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - time.monotonic())

    def done(self) -> bool:
        """Return True once the context is cancelled or past its deadline."""

        if self._event.is_set():
            return True
        if self._deadline is not None and time.monotonic() >= self._deadline:
            self._finish(CancelReason.DEADLINE_EXCEEDED)
            return True
        return False

    def reason(self) -> Optional[CancelReason]:
        if not self.done():
            return None
        return self._reason

    def error(self) -> Optional[ContextError]:
        """Return a new exception describing why the context stopped."""

        reason = self.reason()
        if reason is None:
            return None
        return error_for(reason)

    def cancel(self) -> None:
        """Cancel the context and its children. Later calls are no-ops."""
        self._finish(CancelReason.CANCELLED)

    def wait(self, timeout: float | timedelta) -> bool:
        """Block until the context is done or ``timeout`` elapses.

        Returns True when the context finished first. No helper thread or
        timer is created; the wait is an ``Event.wait`` bounded by the time
        left to the deadline.
        """

        end = time.monotonic() + max(as_seconds(timeout), 0.0)
        while not self.done():
            now = time.monotonic()
            if now >= end:
                return False
            limit = end - now
            if self._deadline is not None:
                limit = min(limit, max(self._deadline - now, 0.0))
            self._event.wait(limit)
        return True

    def _attach(self, child: "Context") -> None:
        with self._lock:
            reason = self._reason
            if reason is None:
                self._children.add(child)
        if reason is not None:
            child._finish(reason)

    def _detach(self, child: "Context") -> None:
        with self._lock:
            self._children.discard(child)

    def _finish(self, reason: CancelReason) -> None:
        with self._lock:
            if self._reason is not None:
                return
            self._reason = reason
            children = list(self._children)
            self._children.clear()
            self._event.set()

        for child in children:
            child._finish(reason)
        if self._parent is not None:
            self._parent._detach(self)


def background() -> Context:
    """Return a root context with no deadline."""
    return Context()


def with_cancel(parent: Context) -> Context:
    return Context(parent=parent)


def with_deadline(parent: Context, deadline: float) -> Context:
    """Derive a context expiring at the monotonic timestamp ``deadline``."""
    return Context(deadline, parent=parent)


def with_timeout(parent: Context, timeout: float | timedelta) -> Context:
    """Derive a context expiring ``timeout`` from now."""
    return Context(time.monotonic() + as_seconds(timeout), parent=parent)


__all__ = [
    "Context",
    "as_seconds",
    "background",
    "with_cancel",
    "with_deadline",
    "with_timeout",
]
