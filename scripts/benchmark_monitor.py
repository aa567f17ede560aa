#!/usr/bin/env python3
"""
Throughput and memory benchmark for the log monitor.

- Generates a synthetic trading log of N lines
- Runs the monitor over it until every byte has been read
- Reports throughput, match counts and RSS growth (psutil)
- Times KeywordMatcher.matches on representative lines

RSS growth should stay flat as --lines grows: memory is bounded by the
read buffer plus the maximum line length.

Usage:
    python3 scripts/benchmark_monitor.py --lines 200000
    python3 scripts/benchmark_monitor.py --lines 1000000 --json
"""

import argparse
import json
import os
import random
import sys
import tempfile
import time
from dataclasses import dataclass, asdict
from typing import Dict

import psutil

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from logmon.config import MonitorConfig
from logmon.keyword_matcher import KeywordMatcher
from logmon.log_generator import LogGenerator
from logmon.monitor import LogMonitor


@dataclass
class MonitorRunMetrics:
    """Results of one end-to-end monitor run."""
    lines_generated: int
    input_bytes: int
    lines_processed: int
    lines_matched: int
    long_lines_discarded: int
    duration_sec: float
    rss_before_mb: float
    rss_peak_mb: float

    @property
    def throughput_mbps(self) -> float:
        if self.duration_sec == 0:
            return 0.0
        return (self.input_bytes / (1024 * 1024)) / self.duration_sec

    @property
    def line_rate(self) -> float:
        if self.duration_sec == 0:
            return 0.0
        return self.lines_processed / self.duration_sec


def _rss_mb(proc: psutil.Process) -> float:
    return proc.memory_info().rss / (1024 * 1024)


def run_monitor_benchmark(lines: int, keywords: list, buffer_size: int, workdir: str) -> MonitorRunMetrics:
    input_path = os.path.join(workdir, "bench_input.log")
    output_path = os.path.join(workdir, "bench_output.log")

    with LogGenerator(input_path, rng=random.Random(1234)) as gen:
        gen.write(lines)
    input_bytes = os.path.getsize(input_path)

    proc = psutil.Process()
    rss_before = _rss_mb(proc)
    rss_peak = rss_before

    config = MonitorConfig(
        input_path=input_path,
        output_path=output_path,
        keywords=tuple(keywords),
        buffer_size=buffer_size,
    )
    monitor = LogMonitor(config)

    start = time.perf_counter()
    thread = monitor.run_in_thread()
    while monitor.get_statistics().bytes_read < input_bytes:
        rss_peak = max(rss_peak, _rss_mb(proc))
        time.sleep(0.01)
    duration = time.perf_counter() - start
    monitor.stop()
    thread.join(timeout=5.0)

    stats = monitor.get_statistics()
    return MonitorRunMetrics(
        lines_generated=lines,
        input_bytes=input_bytes,
        lines_processed=stats.lines_processed,
        lines_matched=stats.lines_matched,
        long_lines_discarded=stats.long_lines_discarded,
        duration_sec=duration,
        rss_before_mb=rss_before,
        rss_peak_mb=max(rss_peak, _rss_mb(proc)),
    )


def run_matcher_benchmark(iterations: int) -> Dict[str, float]:
    """Return nanoseconds per matches() call for a few line shapes."""
    line = b"2024-10-15 12:34:56.789123 EXECUTION OrderID=123456 Symbol=AAPL Side=BUY"
    miss = b"2024-10-15 12:34:56.789123 INFO OrderID=123456 Symbol=AAPL Side=BUY"
    long_line = b"X" * 5000 + b"EXECUTION" + b"Y" * 5000

    cases = {
        "single_keyword": (KeywordMatcher(["EXECUTION"]), line),
        "multiple_keywords": (
            KeywordMatcher(["key1", "key2", "EXECUTION", "REJECT", "FILL",
                            "CANCEL", "ERROR", "WARNING", "INFO", "DEBUG"]),
            line,
        ),
        "no_match": (KeywordMatcher(["key1", "key2", "EXECUTION"]), miss),
        "long_line": (KeywordMatcher(["EXECUTION"]), long_line),
    }

    results = {}
    for name, (matcher, text) in cases.items():
        start = time.perf_counter_ns()
        for _ in range(iterations):
            matcher.matches(text)
        results[name] = (time.perf_counter_ns() - start) / iterations
    return results


def main() -> int:
    parser = argparse.ArgumentParser(description="Benchmark the log monitor")
    parser.add_argument("--lines", type=int, default=200_000, help="Lines to generate (default: 200000)")
    parser.add_argument("--buffer-size", type=int, default=64 * 1024, help="Read chunk size")
    parser.add_argument("--keywords", default="key1,key2", help="Comma separated keywords")
    parser.add_argument("--iterations", type=int, default=100_000, help="Matcher iterations per case")
    parser.add_argument("--json", action="store_true", help="Emit JSON")
    args = parser.parse_args()

    keywords = [k for k in args.keywords.split(",") if k]

    with tempfile.TemporaryDirectory(prefix="logmon-bench-") as workdir:
        metrics = run_monitor_benchmark(args.lines, keywords, args.buffer_size, workdir)
    matcher = run_matcher_benchmark(args.iterations)

    if args.json:
        report = asdict(metrics)
        report["throughput_mbps"] = round(metrics.throughput_mbps, 2)
        report["line_rate"] = round(metrics.line_rate, 1)
        report["matcher_ns_per_call"] = {k: round(v, 1) for k, v in matcher.items()}
        print(json.dumps(report, indent=2))
        return 0

    print("=== Monitor ===")
    print(f"  Lines generated:      {metrics.lines_generated}")
    print(f"  Input size:           {metrics.input_bytes / (1024 * 1024):.1f} MB")
    print(f"  Lines processed:      {metrics.lines_processed}")
    print(f"  Lines matched:        {metrics.lines_matched}")
    print(f"  Long lines discarded: {metrics.long_lines_discarded}")
    print(f"  Duration:             {metrics.duration_sec:.2f} s")
    print(f"  Throughput:           {metrics.throughput_mbps:.1f} MB/s ({metrics.line_rate:.0f} lines/s)")
    print(f"  RSS growth:           {metrics.rss_peak_mb - metrics.rss_before_mb:.1f} MB")
    print()
    print("=== KeywordMatcher.matches ===")
    for name, ns in matcher.items():
        print(f"  {name:<20} {ns:8.1f} ns/call")
    return 0


if __name__ == "__main__":
    sys.exit(main())
