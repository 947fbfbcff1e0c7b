from __future__ import annotations

import time
from datetime import timedelta
from typing import Optional

from ctxretry.context import Context, as_seconds
from ctxretry.errors import CancelReason


class RecordingContext(Context):
    """Context with a distant deadline whose waits return instantly.

    Each requested wait is recorded. When ``cancel_on_wait`` is set, the
    context finishes with ``reason`` on that wait (1-indexed).
    """

    def __init__(
        self,
        *,
        cancel_on_wait: Optional[int] = None,
        reason: CancelReason = CancelReason.CANCELLED,
    ) -> None:
        super().__init__(time.monotonic() + 3600)
        self.waits: list[float] = []
        self._cancel_on_wait = cancel_on_wait
        self._cancel_reason = reason

    def wait(self, timeout: float | timedelta) -> bool:
        self.waits.append(as_seconds(timeout))
        if self._cancel_on_wait is not None and len(self.waits) >= self._cancel_on_wait:
            self._finish(self._cancel_reason)
            return True
        return False


class ScriptedOperation:
    """Zero-argument operation failing ``failures`` times before returning ``value``.

    With ``failures=None`` it never succeeds. Passing ``error`` makes every
    failure raise that same instance.
    """

    def __init__(
        self,
        failures: Optional[int] = None,
        value: object = None,
        error: Optional[Exception] = None,
    ) -> None:
        self.failures = failures
        self.value = value
        self.error = error
        self.calls = 0

    def __call__(self) -> object:
        self.calls += 1
        if self.failures is None or self.calls <= self.failures:
            if self.error is not None:
                raise self.error
            raise RuntimeError(f"failure {self.calls}")
        return self.value
