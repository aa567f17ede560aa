#!/usr/bin/env python3
"""
Synthetic trading-log generator.

Appends order-event lines to a file at a fixed rate so the monitor can be
exercised against a live, growing log. About one line in a thousand is a
15,000-character market-data dump to exercise line truncation.

Usage:
    logmon-generate a.log 1000          # ~1,000 lines/second until Ctrl+C
    logmon-generate a.log 100 --count 50000
"""

from __future__ import annotations

import argparse
import logging
import random
import signal
import sys
import threading
from typing import BinaryIO, Optional

from .implementations import RealClock
from .interfaces import ClockInterface

logger = logging.getLogger(__name__)

SYMBOLS = ("AAPL", "GOOGL", "MSFT", "AMZN", "TSLA", "META", "NVDA", "JPM", "BAC", "GS")
ORDER_TYPES = ("LIMIT", "MARKET", "STOP", "IOC", "FOK", "GTD")
SIDES = ("BUY", "SELL")
EVENT_KEYWORDS = ("key1", "key2", "EXECUTION", "REJECT", "FILL", "CANCEL", "ERROR", "WARNING")

LONG_LINE_PADDING = 15000
DEFAULT_LONG_LINE_RATE = 0.001


class LogGenerator:
    """
    Appends synthetic trading log lines to a file.

    Line format:
        [2025-01-01 00:00:00.000000] FILL OrderID=123456 Symbol=AAPL Side=BUY
        Type=LIMIT Price=123.45 Qty=500 Venue=NYSE Latency=42us

    (one line in the file). The file is opened in append mode and every
    line is flushed so a tailing reader sees it immediately.

    Raises:
        RuntimeError: The file cannot be opened for append.
    """

    def __init__(
        self,
        path: str,
        rng: Optional[random.Random] = None,
        clock: Optional[ClockInterface] = None,
    ):
        self._path = path
        self._rng = rng or random.Random()
        self._clock = clock or RealClock()
        self._count = 0
        try:
            self._file: Optional[BinaryIO] = open(path, "ab")
        except OSError as e:
            raise RuntimeError(f"failed to open log file: {path}: {e}") from e

    @property
    def count(self) -> int:
        """Lines written so far."""
        return self._count

    def timestamp(self) -> str:
        """Current time as ``YYYY-MM-DD HH:MM:SS.ffffff``."""
        return self._clock.now().strftime("%Y-%m-%d %H:%M:%S.%f")

    def normal_line(self) -> str:
        rng = self._rng
        return (
            f"[{self.timestamp()}] {rng.choice(EVENT_KEYWORDS)}"
            f" OrderID={rng.randint(100000, 999999)}"
            f" Symbol={rng.choice(SYMBOLS)}"
            f" Side={rng.choice(SIDES)}"
            f" Type={rng.choice(ORDER_TYPES)}"
            f" Price={rng.randint(10000, 50000) / 100.0}"
            f" Qty={rng.randint(100, 10000)}"
            f" Venue=NYSE"
            f" Latency={rng.randint(10, 500)}us"
        )

    def long_line(self) -> str:
        return f"[{self.timestamp()}] key1 MARKET_DATA_SNAPSHOT " + "X" * LONG_LINE_PADDING

    def write_line(self, line: str) -> None:
        if self._file is None:
            raise RuntimeError(f"log file is closed: {self._path}")
        self._file.write(line.encode("utf-8") + b"\n")
        self._file.flush()
        self._count += 1

    def write(self, count: int, long_line_rate: float = DEFAULT_LONG_LINE_RATE) -> int:
        """Write ``count`` lines immediately. Returns the number written."""
        for _ in range(count):
            self.write_line(self._next_line(long_line_rate))
        return count

    def run(
        self,
        interval_us: int = 1000,
        stop_event: Optional[threading.Event] = None,
        limit: Optional[int] = None,
        long_line_rate: float = DEFAULT_LONG_LINE_RATE,
    ) -> int:
        """
        Write one line every ``interval_us`` microseconds.

        Runs until stop_event is set or ``limit`` lines were written.
        Returns the number of lines written by this call.
        """
        written = 0
        while stop_event is None or not stop_event.is_set():
            if limit is not None and written >= limit:
                break
            self.write_line(self._next_line(long_line_rate))
            written += 1
            if self._count % 10000 == 0:
                logger.info("Generated %d log entries", self._count)
            if interval_us > 0:
                self._clock.sleep(interval_us / 1_000_000)
        return written

    def close(self) -> None:
        if self._file is not None:
            self._file.close()
            self._file = None

    def __enter__(self) -> "LogGenerator":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def _next_line(self, long_line_rate: float) -> str:
        if long_line_rate > 0 and self._rng.random() < long_line_rate:
            return self.long_line()
        return self.normal_line()


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        prog="logmon-generate",
        description="Append synthetic trading log lines to a file",
    )
    parser.add_argument("path", nargs="?", default="a.log", help="Log file to append to (default: a.log)")
    parser.add_argument(
        "interval_us",
        nargs="?",
        type=int,
        default=1000,
        help="Microseconds between lines (default: 1000)",
    )
    parser.add_argument("--count", "-n", type=int, default=None, help="Stop after N lines")
    parser.add_argument(
        "--long-line-rate",
        type=float,
        default=DEFAULT_LONG_LINE_RATE,
        help="Fraction of oversized lines (default: 0.001)",
    )
    args = parser.parse_args(argv)

    if args.interval_us < 0:
        parser.error("interval_us must not be negative")

    logging.basicConfig(level=logging.INFO, format="[%(asctime)s] %(levelname)s %(name)s: %(message)s")

    rate = 1_000_000 // args.interval_us if args.interval_us else 0
    print("=== Log Generator ===")
    print(f"Generating trading logs to: {args.path}")
    print(f"Interval: {args.interval_us} microseconds")
    print(f"Rate: ~{rate or 'unthrottled'} logs/second")
    print("Press Ctrl+C to stop.")

    stop = threading.Event()

    def handle_stop(signum: int, frame: object) -> None:
        stop.set()

    previous = {
        sig: signal.signal(sig, handle_stop) for sig in (signal.SIGINT, signal.SIGTERM)
    }

    try:
        with LogGenerator(args.path) as generator:
            generator.run(
                interval_us=args.interval_us,
                stop_event=stop,
                limit=args.count,
                long_line_rate=args.long_line_rate,
            )
            print(f"Generated {generator.count} log entries")
    except (RuntimeError, OSError) as e:
        print(f"Fatal error: {e}", file=sys.stderr)
        return 1
    finally:
        for sig, handler in previous.items():
            signal.signal(sig, handler)
    return 0


if __name__ == "__main__":
    sys.exit(main())
