"""
Sink Writer for the log monitor.

Appends matched lines to the output file, one flush per line.
"""

from __future__ import annotations

import logging
from typing import BinaryIO, Optional

import portalocker

from .interfaces import SinkInterface

logger = logging.getLogger(__name__)


class SinkOpenError(RuntimeError):
    """The output file could not be opened for append."""


class SinkWriteError(RuntimeError):
    """A matched line could not be written to the output file."""


class SinkWriter(SinkInterface):
    """Append-only line writer.

    The file is opened once, in append mode, when the writer is created, so
    existing output is never truncated. Parent directories are not created.
    Each line is written under an exclusive lock and flushed before
    ``write_line`` returns.

    Raises:
        SinkOpenError: The path cannot be opened for append.
    """

    def __init__(self, path: str) -> None:
        self._path = path
        self._lines_written = 0
        try:
            self._file: Optional[BinaryIO] = open(path, "ab")
        except OSError as e:
            raise SinkOpenError(f"Failed to open output file: {path}: {e}") from e
        logger.debug("Output opened for append: %s", path)

    @property
    def path(self) -> str:
        return self._path

    @property
    def lines_written(self) -> int:
        return self._lines_written

    @property
    def closed(self) -> bool:
        return self._file is None

    def write_line(self, line: bytes) -> None:
        """Append ``line`` plus a newline and flush it."""
        f = self._file
        if f is None:
            raise SinkWriteError(f"Output file is closed: {self._path}")
        try:
            portalocker.lock(f, portalocker.LOCK_EX)
            try:
                f.write(line)
                f.write(b"\n")
                f.flush()
            finally:
                portalocker.unlock(f)
        except (OSError, portalocker.LockException) as e:
            raise SinkWriteError(f"Failed to write to {self._path}: {e}") from e
        self._lines_written += 1

    def close(self) -> None:
        if self._file is None:
            return
        try:
            self._file.close()
        finally:
            self._file = None

    def __enter__(self) -> "SinkWriter":
        return self

    def __exit__(self, *exc) -> None:
        self.close()
