"""Command-line entry point for the log monitor.

Usage:
    logmon app.log hits.log ERROR REJECT
    logmon app.log hits.log              # prompts for keywords
    logmon --config monitor.yaml -v
"""

from __future__ import annotations

import argparse
import logging
import signal
import sys
import threading
from typing import Callable, Optional, TextIO

from .config import ConfigError, MonitorConfig, load_config, DEFAULT_BUFFER_SIZE, DEFAULT_POLL_INTERVAL
from .interfaces import MonitorStatistics
from .keyword_matcher import DEFAULT_KEYWORDS, parse_keywords
from .monitor import LogMonitor
from .sink_writer import SinkOpenError, SinkWriteError

DEFAULT_INPUT = "a.log"
DEFAULT_OUTPUT = "b.log"

_LOG_FORMAT = "[%(asctime)s] %(levelname)s %(name)s: %(message)s"


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="logmon",
        description="Tail a log file and append lines containing any keyword to an output file",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  logmon app.log hits.log key1 key2
  logmon app.log hits.log --poll-interval-ms 50
  logmon --config monitor.yaml
        """,
    )
    parser.add_argument("input", nargs="?", default=None, help=f"Log file to monitor (default: {DEFAULT_INPUT})")
    parser.add_argument("output", nargs="?", default=None, help=f"File to append matches to (default: {DEFAULT_OUTPUT})")
    parser.add_argument("keywords", nargs="*", help="Keywords to match (prompted for when omitted)")
    parser.add_argument("--config", "-c", metavar="FILE", help="YAML config file")
    parser.add_argument(
        "--buffer-size",
        type=int,
        default=None,
        metavar="BYTES",
        help=f"Read chunk size (default: {DEFAULT_BUFFER_SIZE})",
    )
    parser.add_argument(
        "--poll-interval-ms",
        type=float,
        default=None,
        metavar="MS",
        help=f"Idle poll interval in milliseconds (default: {int(DEFAULT_POLL_INTERVAL * 1000)})",
    )
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    verbosity.add_argument("--quiet", "-q", action="store_true", help="Warnings and errors only")
    return parser


def _configure_logging(verbose: bool, quiet: bool) -> None:
    level = logging.DEBUG if verbose else logging.WARNING if quiet else logging.INFO
    logging.basicConfig(level=level, format=_LOG_FORMAT)


def prompt_keywords(
    read: Callable[[str], str] = input,
    out: TextIO = sys.stdout,
) -> list[str]:
    """Ask the operator for keywords; fall back to the defaults on empty input."""
    try:
        text = read("Enter keywords to filter (space or comma separated): ")
    except EOFError:
        text = ""
    keywords = parse_keywords(text, default=())
    if not keywords:
        print(f"No keywords provided. Using defaults: {', '.join(DEFAULT_KEYWORDS)}", file=out)
        return list(DEFAULT_KEYWORDS)
    return keywords


def resolve_config(
    args: argparse.Namespace,
    interactive: Optional[bool] = None,
    read: Callable[[str], str] = input,
) -> MonitorConfig:
    """Combine command-line arguments, the optional config file and the prompt.

    Precedence: command line, then config file, then defaults. Keywords come
    from the command line, the config file, the interactive prompt, or the
    defaults, in that order.
    """
    poll_interval = args.poll_interval_ms / 1000.0 if args.poll_interval_ms is not None else None
    keywords = list(args.keywords) if args.keywords else None

    if args.config:
        config = load_config(
            args.config,
            input_path=args.input,
            output_path=args.output,
            keywords=keywords,
            buffer_size=args.buffer_size,
            poll_interval=poll_interval,
        )
        input_path = config.input_path
        output_path = config.output_path
        keywords = list(config.keywords) or None
        buffer_size = config.buffer_size
        poll_interval = config.poll_interval
    else:
        input_path = args.input or DEFAULT_INPUT
        output_path = args.output or DEFAULT_OUTPUT
        buffer_size = args.buffer_size if args.buffer_size is not None else DEFAULT_BUFFER_SIZE
        if poll_interval is None:
            poll_interval = DEFAULT_POLL_INTERVAL

    if keywords is None:
        if interactive is None:
            interactive = sys.stdin is not None and sys.stdin.isatty()
        keywords = prompt_keywords(read) if interactive else list(DEFAULT_KEYWORDS)

    return MonitorConfig(
        input_path=input_path,
        output_path=output_path,
        keywords=tuple(keywords),
        buffer_size=buffer_size,
        poll_interval=poll_interval,
    )


def print_statistics(stats: MonitorStatistics, out: TextIO = sys.stdout) -> None:
    print("\n=== Statistics ===", file=out)
    print(f"Lines processed: {stats.lines_processed}", file=out)
    print(f"Lines matched: {stats.lines_matched}", file=out)
    print(f"Bytes read: {stats.bytes_read}", file=out)
    print(f"Long lines discarded: {stats.long_lines_discarded}", file=out)


def _install_signal_handlers(monitor: LogMonitor) -> dict:
    """Route SIGINT/SIGTERM to monitor.stop(). Returns the previous handlers."""
    previous: dict = {}
    if threading.current_thread() is not threading.main_thread():
        return previous

    def signal_handler(sig, frame):
        print(f"\nReceived signal {sig}, stopping monitor...", file=sys.stderr)
        monitor.stop()

    for sig in (signal.SIGINT, signal.SIGTERM):
        previous[sig] = signal.signal(sig, signal_handler)
    return previous


def _restore_signal_handlers(previous: dict) -> None:
    for sig, handler in previous.items():
        signal.signal(sig, handler)


def main(argv: Optional[list[str]] = None) -> int:
    """Entry point for the ``logmon`` CLI.

    Returns:
        Exit code: 0 on a clean stop, 1 on a configuration or output error.
    """
    parser = _build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose, args.quiet)

    try:
        config = resolve_config(args)
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print("=== Log Monitor ===")
    print(f"Input file: {config.input_path}")
    print(f"Output file: {config.output_path}")
    print(f"Keywords: {', '.join(config.keywords)}")

    try:
        monitor = LogMonitor(config)
    except SinkOpenError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    previous = _install_signal_handlers(monitor)
    exit_code = 0
    try:
        monitor.start()
    except SinkWriteError as e:
        print(f"Error: {e}", file=sys.stderr)
        exit_code = 1
    finally:
        _restore_signal_handlers(previous)

    print_statistics(monitor.get_statistics())
    return exit_code


if __name__ == "__main__":
    sys.exit(main())
