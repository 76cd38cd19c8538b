"""Cancellation and deadline token passed through every outbound call."""

from __future__ import annotations

import threading
import time
from typing import Optional


class RequestContext:
    """Cancellation signal with an optional deadline.

    A context can be shared by several calls (and threads). Once cancelled or
    expired it stays that way; executors consult it before sending and again
    after the response arrives.
    """

    def __init__(self, timeout_s: Optional[float] = None) -> None:
        self._event = threading.Event()
        self._reason = ""
        self.deadline: Optional[float] = (
            time.monotonic() + timeout_s if timeout_s is not None else None
        )

    def cancel(self, reason: str = "cancelled") -> None:
        """Fire the cancellation signal."""
        if not self._event.is_set():
            self._reason = reason
            self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    @property
    def expired(self) -> bool:
        return self.deadline is not None and time.monotonic() >= self.deadline

    @property
    def done(self) -> bool:
        """True when the caller no longer wants a result."""
        return self.cancelled or self.expired

    @property
    def reason(self) -> str:
        if self.cancelled:
            return self._reason
        if self.expired:
            return "deadline exceeded"
        return ""

    def remaining_s(self) -> Optional[float]:
        """Seconds left before the deadline, or ``None`` without a deadline."""
        if self.deadline is None:
            return None
        return max(0.0, self.deadline - time.monotonic())


__all__ = ["RequestContext"]
