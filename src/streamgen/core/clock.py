"""Clock abstraction for testable session expiry.

Production code uses SystemClock (the default).
Tests inject MockClock to control time advancement.
"""

import time
from typing import Protocol


class Clock(Protocol):
    """Abstract monotonic clock used for session ages."""

    def monotonic(self) -> float:
        """Return monotonic time in seconds."""
        ...


class SystemClock:
    """Production clock using time.monotonic()."""

    def monotonic(self) -> float:
        return time.monotonic()


class MockClock:
    """Controllable clock for deterministic testing.

    Example:
        clock = MockClock(start=0.0)
        manager = SessionManager(clock=clock)
        manager.new_session("a")
        clock.advance(2.5)
        assert manager.is_expired("a")  # with a 1s duration
    """

    def __init__(self, start: float = 0.0) -> None:
        self._current = start

    def monotonic(self) -> float:
        return self._current

    def advance(self, seconds: float) -> None:
        """Move time forward; negative values are rejected."""
        if seconds < 0:
            raise ValueError(f"Cannot advance clock by negative amount: {seconds}")
        self._current += seconds
