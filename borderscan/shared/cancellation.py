"""
Cooperative cancellation for the pixel passes.

Passes poll a CancellationToken at coarse points (once per scanline, once
per candidate threshold) and raise OperationCancelled when it is set.
"""

import threading
import time
from typing import Optional


class OperationCancelled(Exception):
    """Raised when a pass observes its cancellation token."""

    def __init__(self, reason: str = "cancelled"):
        super().__init__(reason)
        self.reason = reason


class CancellationToken:
    """
    Thread-safe cancellation signal with an optional deadline.

    Can be set from another thread or from a signal handler.
    """

    def __init__(self, deadline: Optional[float] = None):
        """
        Initialize token.

        Args:
            deadline: Optional time.monotonic() value after which the
                token reports itself as cancelled
        """
        self._event = threading.Event()
        self._deadline = deadline

    @classmethod
    def with_timeout(cls, seconds: float) -> "CancellationToken":
        """Create a token that cancels itself after `seconds`."""
        return cls(deadline=time.monotonic() + seconds)

    def cancel(self) -> None:
        """Request cancellation."""
        self._event.set()

    @property
    def deadline_exceeded(self) -> bool:
        return self._deadline is not None and time.monotonic() >= self._deadline

    @property
    def cancelled(self) -> bool:
        """Whether cancellation was requested or the deadline passed."""
        return self._event.is_set() or self.deadline_exceeded

    def raise_if_cancelled(self) -> None:
        """Raise OperationCancelled if the token is cancelled."""
        if self._event.is_set():
            raise OperationCancelled("cancelled")
        if self.deadline_exceeded:
            raise OperationCancelled("deadline exceeded")


def check_cancelled(token: Optional[CancellationToken]) -> None:
    """Poll point used by the passes; a missing token never cancels."""
    if token is not None:
        token.raise_if_cancelled()
