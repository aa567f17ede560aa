"""
Mock implementations for testing.

These classes implement the abstract interfaces with in-memory behavior
so the monitor loop can be driven step by step.
"""

from typing import Callable, List, Optional
from datetime import datetime, timedelta

from .interfaces import ClockInterface, SinkInterface


class MockClock(ClockInterface):
    """
    Controllable clock for testing.

    sleep() never blocks. It records the call, advances the clock and then
    invokes the optional on_sleep hook, which tests use to append input or
    stop the monitor between poll cycles.
    """

    def __init__(
        self,
        start_time: Optional[datetime] = None,
        on_sleep: Optional[Callable[[int], None]] = None,
    ):
        self._current_time = start_time or datetime(2025, 1, 1, 0, 0, 0)
        self._sleep_calls: List[float] = []
        self._on_sleep = on_sleep

    def now(self) -> datetime:
        return self._current_time

    def timestamp(self) -> float:
        return self._current_time.timestamp()

    def sleep(self, seconds: float) -> None:
        self._sleep_calls.append(seconds)
        self._current_time += timedelta(seconds=seconds)
        if self._on_sleep is not None:
            self._on_sleep(len(self._sleep_calls))

    # Test helper methods

    def advance(self, seconds: float) -> None:
        """Advance time by specified seconds."""
        self._current_time += timedelta(seconds=seconds)

    def set_on_sleep(self, hook: Optional[Callable[[int], None]]) -> None:
        """Install a callback run after every sleep() with the call count."""
        self._on_sleep = hook

    def get_sleep_calls(self) -> List[float]:
        """Get list of all sleep() calls made."""
        return self._sleep_calls.copy()


class MockSink(SinkInterface):
    """
    In-memory sink for testing.

    Collects written lines; can be told to fail after N writes.
    """

    def __init__(self):
        self._lines: List[bytes] = []
        self._closed = False
        self._fail_after: Optional[int] = None

    def write_line(self, line: bytes) -> None:
        from .sink_writer import SinkWriteError

        if self._closed:
            raise SinkWriteError("sink is closed")
        if self._fail_after is not None and len(self._lines) >= self._fail_after:
            raise SinkWriteError("simulated write failure")
        self._lines.append(bytes(line))

    def close(self) -> None:
        self._closed = True

    # Test helper methods

    @property
    def lines(self) -> List[bytes]:
        """Lines written so far."""
        return self._lines.copy()

    @property
    def closed(self) -> bool:
        return self._closed

    def set_fail_after(self, writes: Optional[int]) -> None:
        """Make write_line() raise once this many lines have been written."""
        self._fail_after = writes
