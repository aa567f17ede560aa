"""
Real implementations of interfaces for production use.
"""

from datetime import datetime
import time

from .interfaces import ClockInterface


class RealClock(ClockInterface):
    """
    Real clock implementation using system time.
    """

    def now(self) -> datetime:
        return datetime.now()

    def timestamp(self) -> float:
        return time.time()

    def sleep(self, seconds: float) -> None:
        time.sleep(seconds)
