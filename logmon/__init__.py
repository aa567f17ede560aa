"""
logmon - keyword log monitor

Tails a growing log file in constant memory and appends lines containing
any configured keyword to an output file.
"""

from .interfaces import (
    MonitorState,
    MonitorStatistics,
    ClockInterface,
    SinkInterface,
)
from .config import (
    DEFAULT_BUFFER_SIZE,
    DEFAULT_POLL_INTERVAL,
    MAX_LINE_LENGTH,
    ConfigError,
    MonitorConfig,
    load_config,
)
from .keyword_matcher import DEFAULT_KEYWORDS, KeywordMatcher, parse_keywords
from .line_reassembler import LineReassembler
from .stats import StatsCollector
from .sink_writer import SinkWriter, SinkOpenError, SinkWriteError
from .tail_reader import TailReader
from .monitor import LogMonitor

__version__ = "0.1.0"

__all__ = [
    "MonitorState",
    "MonitorStatistics",
    "ClockInterface",
    "SinkInterface",
    "DEFAULT_BUFFER_SIZE",
    "DEFAULT_POLL_INTERVAL",
    "MAX_LINE_LENGTH",
    "ConfigError",
    "MonitorConfig",
    "load_config",
    "DEFAULT_KEYWORDS",
    "KeywordMatcher",
    "parse_keywords",
    "LineReassembler",
    "StatsCollector",
    "SinkWriter",
    "SinkOpenError",
    "SinkWriteError",
    "TailReader",
    "LogMonitor",
]
