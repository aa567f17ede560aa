"""Tests for logmon/log_generator.py: synthetic trading log lines."""

from __future__ import annotations

import random
import re
import threading
from datetime import datetime

import pytest

from logmon.log_generator import (
    EVENT_KEYWORDS,
    LONG_LINE_PADDING,
    LogGenerator,
    main,
)
from logmon.mocks import MockClock

LINE_RE = re.compile(
    rb"^\[2025-03-04 09:30:00\.\d{6}\] (\w+) OrderID=\d{6} Symbol=[A-Z]+ "
    rb"Side=(BUY|SELL) Type=[A-Z]+ Price=\d+\.\d+ Qty=\d+ Venue=NYSE Latency=\d+us$"
)


@pytest.fixture
def clock():
    return MockClock(start_time=datetime(2025, 3, 4, 9, 30, 0))


@pytest.fixture
def generator(tmp_path, clock):
    gen = LogGenerator(str(tmp_path / "trading.log"), rng=random.Random(42), clock=clock)
    yield gen
    gen.close()


class TestLogGenerator:
    def test_timestamp_format(self, generator):
        assert generator.timestamp() == "2025-03-04 09:30:00.000000"

    def test_normal_line_format(self, generator):
        line = generator.normal_line().encode("utf-8")
        match = LINE_RE.match(line)
        assert match is not None
        assert match.group(1).decode() in EVENT_KEYWORDS

    def test_long_line(self, generator):
        line = generator.long_line()
        assert "key1 MARKET_DATA_SNAPSHOT" in line
        assert line.endswith("X" * LONG_LINE_PADDING)
        assert len(line) > LONG_LINE_PADDING

    def test_write_appends_and_flushes(self, tmp_path, generator):
        assert generator.write(25, long_line_rate=0.0) == 25
        assert generator.count == 25
        lines = (tmp_path / "trading.log").read_bytes().split(b"\n")
        assert lines[-1] == b""
        assert len(lines) == 26
        assert all(LINE_RE.match(line) for line in lines[:-1])

    def test_long_line_rate_one(self, tmp_path, generator):
        generator.write(3, long_line_rate=1.0)
        lines = (tmp_path / "trading.log").read_bytes().splitlines()
        assert all(len(line) > LONG_LINE_PADDING for line in lines)

    def test_appends_to_existing_file(self, tmp_path, clock):
        path = tmp_path / "trading.log"
        path.write_bytes(b"existing\n")
        with LogGenerator(str(path), rng=random.Random(1), clock=clock) as gen:
            gen.write(1, long_line_rate=0.0)
        assert path.read_bytes().startswith(b"existing\n")
        assert len(path.read_bytes().splitlines()) == 2

    def test_run_with_limit_sleeps_between_lines(self, generator, clock):
        assert generator.run(interval_us=2000, limit=5, long_line_rate=0.0) == 5
        assert clock.get_sleep_calls() == [0.002] * 5

    def test_run_stops_on_event(self, generator, clock):
        stop = threading.Event()
        clock.set_on_sleep(lambda count: stop.set() if count == 3 else None)
        assert generator.run(interval_us=1000, stop_event=stop) == 3

    def test_write_after_close(self, generator):
        generator.close()
        with pytest.raises(RuntimeError):
            generator.write_line("late")

    def test_unopenable_path(self, tmp_path):
        with pytest.raises(RuntimeError, match="failed to open log file"):
            LogGenerator(str(tmp_path / "missing" / "trading.log"))

    def test_same_seed_same_lines(self, tmp_path, clock):
        a = LogGenerator(str(tmp_path / "a.log"), rng=random.Random(7), clock=clock)
        b = LogGenerator(str(tmp_path / "b.log"), rng=random.Random(7), clock=clock)
        try:
            assert [a.normal_line() for _ in range(10)] == [b.normal_line() for _ in range(10)]
        finally:
            a.close()
            b.close()


class TestMain:
    def test_count_limit(self, tmp_path, capsys):
        path = tmp_path / "gen.log"
        assert main([str(path), "0", "--count", "20", "--long-line-rate", "0"]) == 0
        assert len(path.read_bytes().splitlines()) == 20
        assert "Generated 20 log entries" in capsys.readouterr().out

    def test_unopenable_path_returns_1(self, tmp_path, capsys):
        rc = main([str(tmp_path / "missing" / "gen.log"), "0", "--count", "1"])
        assert rc == 1
        assert "Fatal error" in capsys.readouterr().err

    def test_negative_interval_rejected(self, tmp_path):
        with pytest.raises(SystemExit):
            main([str(tmp_path / "gen.log"), "-5"])
