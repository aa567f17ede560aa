"""Monitor configuration: defaults, validation and YAML loading."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Optional

import yaml

# 64 KiB reads balance syscall count against resident buffer size.
DEFAULT_BUFFER_SIZE = 64 * 1024

# Seconds to sleep after a poll cycle that read nothing.
DEFAULT_POLL_INTERVAL = 0.01

# Longest logical line kept in memory; anything past this is dropped.
MAX_LINE_LENGTH = 5000

_CONFIG_KEYS = {"input", "output", "keywords", "buffer_size", "poll_interval_ms"}


class ConfigError(ValueError):
    """Raised for an invalid monitor configuration."""


@dataclass(frozen=True)
class MonitorConfig:
    """Immutable settings for one monitoring session.

    Attributes:
        input_path: Log file to tail. It may not exist yet.
        output_path: File that matched lines are appended to.
        keywords: Case-sensitive substrings, checked in order.
        buffer_size: Bytes requested per read.
        poll_interval: Seconds to sleep when a cycle reads nothing.
        max_line_length: Cap on a logical line, in bytes.
    """
    input_path: str
    output_path: str
    keywords: tuple[str, ...] = field(default_factory=tuple)
    buffer_size: int = DEFAULT_BUFFER_SIZE
    poll_interval: float = DEFAULT_POLL_INTERVAL
    max_line_length: int = MAX_LINE_LENGTH

    def __post_init__(self) -> None:
        object.__setattr__(self, "keywords", tuple(self.keywords))

        if not self.input_path:
            raise ConfigError("input path must not be empty")
        if not self.output_path:
            raise ConfigError("output path must not be empty")
        if int(self.buffer_size) <= 0:
            raise ConfigError(f"buffer size must be positive, got {self.buffer_size}")
        if float(self.poll_interval) < 0:
            raise ConfigError(f"poll interval must not be negative, got {self.poll_interval}")
        if int(self.max_line_length) <= 0:
            raise ConfigError(f"max line length must be positive, got {self.max_line_length}")
        for kw in self.keywords:
            if not isinstance(kw, str):
                raise ConfigError(f"keywords must be strings, got {kw!r}")


def _coerce_keywords(raw: Any) -> list[str]:
    from .keyword_matcher import parse_keywords

    if raw is None:
        return []
    if isinstance(raw, str):
        return parse_keywords(raw, default=())
    if isinstance(raw, (list, tuple)):
        return [str(k) for k in raw if str(k)]
    raise ConfigError(f"keywords must be a list or a string, got {type(raw).__name__}")


def load_config(
    path: str,
    input_path: Optional[str] = None,
    output_path: Optional[str] = None,
    keywords: Optional[Iterable[str]] = None,
    buffer_size: Optional[int] = None,
    poll_interval: Optional[float] = None,
) -> MonitorConfig:
    """Build a MonitorConfig from a YAML file.

    The file holds a mapping with any of ``input``, ``output``, ``keywords``
    (list, or a comma/space separated string), ``buffer_size`` and
    ``poll_interval_ms``. Keyword arguments that are not ``None`` override
    the file's values.

    Raises:
        ConfigError: The file is unreadable, not a mapping, has unknown keys,
            or the resulting configuration is invalid.
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigError(f"cannot read config file {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid YAML in {path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"invalid config file (expected mapping): {path}")

    unknown = set(data) - _CONFIG_KEYS
    if unknown:
        raise ConfigError(f"unknown config keys in {path}: {sorted(unknown)}")

    file_interval = data.get("poll_interval_ms")
    try:
        return MonitorConfig(
            input_path=input_path or data.get("input") or "",
            output_path=output_path or data.get("output") or "",
            keywords=tuple(keywords) if keywords is not None else tuple(_coerce_keywords(data.get("keywords"))),
            buffer_size=int(buffer_size if buffer_size is not None else data.get("buffer_size", DEFAULT_BUFFER_SIZE)),
            poll_interval=(
                float(poll_interval) if poll_interval is not None
                else float(file_interval) / 1000.0 if file_interval is not None
                else DEFAULT_POLL_INTERVAL
            ),
        )
    except (TypeError, ValueError) as e:
        if isinstance(e, ConfigError):
            raise
        raise ConfigError(f"invalid value in {path}: {e}") from e
