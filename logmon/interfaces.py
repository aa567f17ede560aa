"""
Interfaces for the log monitor.

Abstract base classes and value types shared by the monitoring components.
Clocks and sinks are injected so the poll loop can be tested without real
sleeps or real output files.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, asdict
from datetime import datetime
from enum import Enum
from typing import Dict


class MonitorState(Enum):
    """Lifecycle states of a monitoring session."""
    IDLE = "idle"
    RUNNING = "running"
    STOPPED = "stopped"


@dataclass(frozen=True)
class MonitorStatistics:
    """Point-in-time copy of the session counters."""
    lines_processed: int = 0
    lines_matched: int = 0
    bytes_read: int = 0
    long_lines_discarded: int = 0

    def to_dict(self) -> Dict[str, int]:
        return asdict(self)


class ClockInterface(ABC):
    """
    Abstract interface for time operations.

    Enables deterministic testing of the poll loop.
    """

    @abstractmethod
    def now(self) -> datetime:
        """Get current datetime."""
        pass

    @abstractmethod
    def timestamp(self) -> float:
        """Get current timestamp (seconds since epoch)."""
        pass

    @abstractmethod
    def sleep(self, seconds: float) -> None:
        """Sleep for specified duration."""
        pass


class SinkInterface(ABC):
    """
    Abstract interface for the matched-line output.

    Implementations:
    - SinkWriter: append-only file on disk
    - MockSink: in-memory list for testing
    """

    @abstractmethod
    def write_line(self, line: bytes) -> None:
        """Append one line (without its newline) and make it durable."""
        pass

    @abstractmethod
    def close(self) -> None:
        """Release the underlying resource. Must be idempotent."""
        pass
