"""
Cooperative cancellation for builds and reconciliation passes.

A CancelToken is created by the caller and threaded down to every blocking
call (resource store access, builder subprocess). The subprocess runner polls
it and terminates the child process once it fires.
"""

import threading
import time
from typing import Optional

from ..exceptions import BuildCancelledError


class CancelToken:
    """A cancellation flag with an optional deadline."""

    def __init__(self, timeout: Optional[float] = None):
        self._event = threading.Event()
        self._deadline = time.monotonic() + timeout if timeout is not None else None

    def cancel(self):
        self._event.set()

    @property
    def expired(self) -> bool:
        return self._deadline is not None and time.monotonic() >= self._deadline

    @property
    def cancelled(self) -> bool:
        return self._event.is_set() or self.expired

    def remaining(self) -> Optional[float]:
        """Seconds left before the deadline, or None when there is none."""
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - time.monotonic())

    def wait(self, seconds: float) -> bool:
        """Sleep up to `seconds`, waking early on cancellation. Returns `cancelled`."""
        remaining = self.remaining()
        if remaining is not None:
            seconds = min(seconds, remaining)
        self._event.wait(seconds)
        return self.cancelled

    def raise_if_cancelled(self, what: str = "operation"):
        if self._event.is_set():
            raise BuildCancelledError(f"{what} was cancelled")
        if self.expired:
            raise BuildCancelledError(f"{what} exceeded its deadline")
