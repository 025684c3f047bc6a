"""Monotonic deadlines threaded through every browser wait."""

from __future__ import annotations

import time

from careerscout.errors import DeadlineExceeded


class Deadline:
    """A point in monotonic time after which work should stop.

    Waits never get cancelled pre-emptively. Each suspend point asks the
    deadline for a timeout no longer than what is left, and ``check()``
    raises before the next step once the budget is gone.
    """

    def __init__(self, seconds: float, label: str = "operation") -> None:
        self.seconds = seconds
        self.label = label
        self._expires_at = time.monotonic() + seconds

    def remaining(self) -> float:
        return max(0.0, self._expires_at - time.monotonic())

    @property
    def expired(self) -> bool:
        return self.remaining() <= 0.0

    def check(self) -> None:
        if self.expired:
            raise DeadlineExceeded(f"{self.label} exceeded its {self.seconds:.0f}s budget")

    def timeout_ms(self, cap_seconds: float) -> int:
        """Timeout for a single wait, in milliseconds, bounded by the cap."""
        self.check()
        return max(1, int(min(cap_seconds, self.remaining()) * 1000))

    def child(self, seconds: float, label: str) -> "Deadline":
        """A nested deadline that never outlives this one."""
        return Deadline(min(seconds, self.remaining()), label=label)
