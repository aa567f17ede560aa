"""
Log Monitor controller.

Ties the tail reader, line reassembler, keyword matcher, sink and
statistics together under a start/stop lifecycle.
"""

from __future__ import annotations

import logging
import threading
from typing import Optional

from .config import MonitorConfig
from .implementations import RealClock
from .interfaces import ClockInterface, MonitorState, MonitorStatistics, SinkInterface
from .keyword_matcher import KeywordMatcher
from .line_reassembler import LineReassembler
from .sink_writer import SinkWriter, SinkWriteError
from .stats import StatsCollector
from .tail_reader import TailReader

logger = logging.getLogger(__name__)


class LogMonitor:
    """
    Tails a log file and appends lines containing any keyword to an output file.

    Components:
    - TailReader: reads new bytes from the input, survives rotation
    - LineReassembler: rebuilds lines across chunk boundaries, caps length
    - KeywordMatcher: substring test against the configured keywords
    - SinkWriter: append-only output, flushed per matched line
    - StatsCollector: counters, read via get_statistics()

    start() blocks the calling thread until stop() is called from another
    thread or a signal handler. Memory use is bounded by buffer_size plus
    max_line_length regardless of input size or line length.

    Usage:
        monitor = LogMonitor(MonitorConfig("app.log", "hits.log", ("ERROR",)))
        thread = monitor.run_in_thread()
        ...
        monitor.stop()
        thread.join()
        print(monitor.get_statistics())

    Raises:
        SinkOpenError: The output path cannot be opened for append.
    """

    def __init__(
        self,
        config: MonitorConfig,
        clock: Optional[ClockInterface] = None,
        sink: Optional[SinkInterface] = None,
    ):
        self._config = config
        self._clock = clock or RealClock()
        self._stop_event = threading.Event()
        self._state = MonitorState.IDLE
        self._state_lock = threading.Lock()

        self._stats = StatsCollector()
        self._matcher = KeywordMatcher(config.keywords)
        self._sink = sink if sink is not None else SinkWriter(config.output_path)
        self._reassembler = LineReassembler(
            on_line=self._process_line,
            max_line_length=config.max_line_length,
        )
        self._reader = TailReader(
            path=config.input_path,
            reassembler=self._reassembler,
            stats=self._stats,
            buffer_size=config.buffer_size,
        )

    @property
    def config(self) -> MonitorConfig:
        return self._config

    @property
    def state(self) -> MonitorState:
        return self._state

    @property
    def keywords(self) -> tuple:
        return self._matcher.keywords

    def start(self) -> None:
        """
        Run the poll loop until stop() is called. Blocks the caller.

        Each cycle reads everything appended since the last one; a cycle
        that reads nothing sleeps for the poll interval. The stop flag is
        checked at the top of every cycle, so an in-flight cycle always
        reads through to end of file.

        Raises:
            RuntimeError: The monitor was already started.
            SinkWriteError: A matched line could not be written. The monitor
                is stopped and its resources closed before this propagates.
        """
        with self._state_lock:
            if self._state is not MonitorState.IDLE:
                raise RuntimeError(f"Monitor cannot start from state {self._state.value}")
            self._state = MonitorState.RUNNING

        logger.info(
            "Starting log monitor: input=%s output=%s keywords=%s",
            self._config.input_path,
            self._config.output_path,
            ", ".join(self._matcher.keywords) or "(none)",
        )

        try:
            while not self._stop_event.is_set():
                if self._reader.poll() == 0:
                    self._clock.sleep(self._config.poll_interval)
        finally:
            self._shutdown()

    def stop(self) -> None:
        """Ask the poll loop to exit. Safe from any thread or signal handler."""
        self._stop_event.set()

    def close(self) -> None:
        """Release resources of a monitor that will not be started."""
        with self._state_lock:
            if self._state is not MonitorState.IDLE:
                return
        self._stop_event.set()
        self._shutdown()

    def get_statistics(self) -> MonitorStatistics:
        """Return a point-in-time copy of the counters."""
        return self._stats.snapshot()

    def run_in_thread(self, name: str = "logmon-monitor") -> threading.Thread:
        """Start the poll loop on a daemon thread and return the thread."""
        thread = threading.Thread(target=self.start, name=name, daemon=True)
        thread.start()
        return thread

    def _process_line(self, line: bytes, truncated: bool) -> None:
        matched = self._matcher.matches(line)
        if matched:
            try:
                self._sink.write_line(line)
            except SinkWriteError as e:
                logger.error("Stopping: %s", e)
                raise
        self._stats.record_line(matched=matched, truncated=truncated)

    def _shutdown(self) -> None:
        self._reader.close()
        self._sink.close()
        with self._state_lock:
            self._state = MonitorState.STOPPED
        stats = self._stats.snapshot()
        logger.info(
            "Log monitor stopped: %d lines processed, %d matched, %d bytes read, %d long lines discarded",
            stats.lines_processed,
            stats.lines_matched,
            stats.bytes_read,
            stats.long_lines_discarded,
        )
