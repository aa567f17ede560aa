"""Tests for logmon/cli.py: argument parsing, keyword prompt and main()."""

from __future__ import annotations

import io

import pytest

import logmon.cli as cli
from logmon.config import DEFAULT_BUFFER_SIZE, DEFAULT_POLL_INTERVAL, ConfigError
from logmon.interfaces import MonitorStatistics
from logmon.sink_writer import SinkOpenError, SinkWriteError


def parse(*argv):
    return cli._build_parser().parse_args(list(argv))


class TestParser:
    def test_positional_arguments(self):
        args = parse("in.log", "out.log", "ERROR", "FILL")
        assert args.input == "in.log"
        assert args.output == "out.log"
        assert args.keywords == ["ERROR", "FILL"]

    def test_no_arguments(self):
        args = parse()
        assert args.input is None
        assert args.output is None
        assert args.keywords == []
        assert args.config is None

    def test_options(self):
        args = parse("--buffer-size", "4096", "--poll-interval-ms", "50", "-v")
        assert args.buffer_size == 4096
        assert args.poll_interval_ms == 50.0
        assert args.verbose

    def test_verbose_and_quiet_exclusive(self):
        with pytest.raises(SystemExit):
            parse("-v", "-q")


class TestPromptKeywords:
    def test_reads_keywords(self):
        out = io.StringIO()
        assert cli.prompt_keywords(lambda prompt: "ERROR, REJECT", out) == ["ERROR", "REJECT"]
        assert out.getvalue() == ""

    def test_empty_answer_uses_defaults(self):
        out = io.StringIO()
        assert cli.prompt_keywords(lambda prompt: "   ", out) == ["key1", "key2"]
        assert "Using defaults: key1, key2" in out.getvalue()

    def test_eof_uses_defaults(self):
        def read(prompt):
            raise EOFError

        assert cli.prompt_keywords(read, io.StringIO()) == ["key1", "key2"]


class TestResolveConfig:
    def test_defaults_without_prompt(self):
        config = cli.resolve_config(parse(), interactive=False)
        assert config.input_path == "a.log"
        assert config.output_path == "b.log"
        assert config.keywords == ("key1", "key2")
        assert config.buffer_size == DEFAULT_BUFFER_SIZE
        assert config.poll_interval == DEFAULT_POLL_INTERVAL

    def test_command_line_keywords_skip_prompt(self):
        def read(prompt):
            raise AssertionError("should not prompt")

        config = cli.resolve_config(parse("x.log", "y.log", "FILL"), interactive=True, read=read)
        assert config.keywords == ("FILL",)

    def test_interactive_prompt(self):
        config = cli.resolve_config(parse("x.log", "y.log"), interactive=True, read=lambda p: "CANCEL")
        assert config.keywords == ("CANCEL",)

    def test_poll_interval_in_milliseconds(self):
        config = cli.resolve_config(parse("--poll-interval-ms", "250"), interactive=False)
        assert config.poll_interval == pytest.approx(0.25)

    def test_config_file(self, tmp_path):
        path = tmp_path / "monitor.yaml"
        path.write_text("input: in.log\noutput: out.log\nkeywords: [REJECT]\npoll_interval_ms: 20\n")
        config = cli.resolve_config(parse("--config", str(path)), interactive=False)
        assert config.input_path == "in.log"
        assert config.output_path == "out.log"
        assert config.keywords == ("REJECT",)
        assert config.poll_interval == pytest.approx(0.02)

    def test_command_line_overrides_config_file(self, tmp_path):
        path = tmp_path / "monitor.yaml"
        path.write_text("input: in.log\noutput: out.log\nkeywords: [REJECT]\n")
        config = cli.resolve_config(
            parse("--config", str(path), "other.log", "other-out.log", "FILL"),
            interactive=False,
        )
        assert config.input_path == "other.log"
        assert config.output_path == "other-out.log"
        assert config.keywords == ("FILL",)

    def test_config_file_without_keywords_prompts(self, tmp_path):
        path = tmp_path / "monitor.yaml"
        path.write_text("input: in.log\noutput: out.log\n")
        config = cli.resolve_config(parse("--config", str(path)), interactive=True, read=lambda p: "WARN")
        assert config.keywords == ("WARN",)

    def test_invalid_buffer_size(self):
        with pytest.raises(ConfigError):
            cli.resolve_config(parse("--buffer-size", "0"), interactive=False)


def test_print_statistics():
    out = io.StringIO()
    cli.print_statistics(MonitorStatistics(10, 3, 512, 1), out)
    text = out.getvalue()
    assert "=== Statistics ===" in text
    assert "Lines processed: 10" in text
    assert "Lines matched: 3" in text
    assert "Bytes read: 512" in text
    assert "Long lines discarded: 1" in text


class FakeMonitor:
    """Stands in for LogMonitor so main() does not block."""

    instances: list = []
    error = None

    def __init__(self, config):
        self.config = config
        self.started = False
        self.stopped = False
        FakeMonitor.instances.append(self)

    def start(self):
        self.started = True
        if FakeMonitor.error is not None:
            raise FakeMonitor.error

    def stop(self):
        self.stopped = True

    def get_statistics(self):
        return MonitorStatistics(4, 2, 100, 0)


@pytest.fixture
def fake_monitor(monkeypatch):
    FakeMonitor.instances = []
    FakeMonitor.error = None
    monkeypatch.setattr(cli, "LogMonitor", FakeMonitor)
    return FakeMonitor


class TestMain:
    def test_runs_monitor_and_prints_statistics(self, fake_monitor, tmp_path, capsys):
        rc = cli.main([str(tmp_path / "in.log"), str(tmp_path / "out.log"), "ERROR"])
        assert rc == 0
        monitor = fake_monitor.instances[0]
        assert monitor.started
        assert monitor.config.keywords == ("ERROR",)

        out = capsys.readouterr().out
        assert "=== Log Monitor ===" in out
        assert "Keywords: ERROR" in out
        assert "Lines matched: 2" in out

    def test_write_error_returns_1(self, fake_monitor, tmp_path, capsys):
        fake_monitor.error = SinkWriteError("disk full")
        rc = cli.main([str(tmp_path / "in.log"), str(tmp_path / "out.log"), "ERROR"])
        assert rc == 1
        captured = capsys.readouterr()
        assert "disk full" in captured.err
        assert "Lines processed: 4" in captured.out

    def test_config_error_returns_1(self, fake_monitor, capsys):
        rc = cli.main(["--buffer-size", "-5", "in.log", "out.log", "k"])
        assert rc == 1
        assert "Error:" in capsys.readouterr().err
        assert fake_monitor.instances == []

    def test_missing_config_file_returns_1(self, fake_monitor, tmp_path):
        assert cli.main(["--config", str(tmp_path / "missing.yaml")]) == 1

    def test_unopenable_output_returns_1(self, tmp_path, capsys):
        """Uses the real LogMonitor: the output directory does not exist."""
        rc = cli.main([str(tmp_path / "in.log"), str(tmp_path / "nodir" / "out.log"), "k"])
        assert rc == 1
        assert "Failed to open output file" in capsys.readouterr().err

    def test_sink_open_error_from_monitor(self, monkeypatch, tmp_path):
        def refuse(config):
            raise SinkOpenError("Failed to open output file: nope")

        monkeypatch.setattr(cli, "LogMonitor", refuse)
        assert cli.main([str(tmp_path / "in.log"), str(tmp_path / "out.log"), "k"]) == 1
