"""
Statistics Collector for the log monitor.

Counters are written by the poll-loop thread and read from any thread.
A single lock makes every update and every snapshot atomic, so readers
never see one counter advanced without its companions.
"""

import threading

from .interfaces import MonitorStatistics


class StatsCollector:
    """
    Tracks monitoring counters for one session.

    - lines_processed: non-empty lines handed to the matcher
    - lines_matched: lines written to the output
    - bytes_read: bytes read from the input, including dropped ones
    - long_lines_discarded: lines cut to the maximum length
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._lines_processed = 0
        self._lines_matched = 0
        self._bytes_read = 0
        self._long_lines_discarded = 0

    def record_bytes(self, count: int) -> None:
        """Record bytes read from the input."""
        if count <= 0:
            return
        with self._lock:
            self._bytes_read += count

    def record_line(self, matched: bool = False, truncated: bool = False) -> None:
        """Record one processed line and its outcome."""
        with self._lock:
            self._lines_processed += 1
            if matched:
                self._lines_matched += 1
            if truncated:
                self._long_lines_discarded += 1

    def snapshot(self) -> MonitorStatistics:
        """Return a consistent copy of all counters."""
        with self._lock:
            return MonitorStatistics(
                lines_processed=self._lines_processed,
                lines_matched=self._lines_matched,
                bytes_read=self._bytes_read,
                long_lines_discarded=self._long_lines_discarded,
            )
