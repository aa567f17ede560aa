"""
Tail Reader for the log monitor.

Follows a growing file by polling: each poll reads everything appended
since the last one, in fixed-size chunks, and feeds it to a LineReassembler.
Handles the file not existing yet and rotation (truncation, replacement
with a new inode, deletion).
"""

from __future__ import annotations

import logging
import os
from typing import BinaryIO, Optional, Tuple

from .config import DEFAULT_BUFFER_SIZE
from .line_reassembler import LineReassembler
from .stats import StatsCollector

logger = logging.getLogger(__name__)


class TailReader:
    """
    Owns the input file handle and the read cursor.

    The cursor only moves forward while the file keeps its identity. When a
    read fails or the path is found truncated, replaced or removed, the
    handle is closed, the cursor goes back to 0 and the partial line held
    by the reassembler is dropped, so nothing spanning the rotation is
    ever emitted. The next poll reopens the path from the start.

    Usage:
        reader = TailReader("app.log", reassembler, stats)
        while running:
            if reader.poll() == 0:
                time.sleep(0.01)
        reader.close()
    """

    def __init__(
        self,
        path: str,
        reassembler: LineReassembler,
        stats: StatsCollector,
        buffer_size: int = DEFAULT_BUFFER_SIZE,
    ):
        if buffer_size <= 0:
            raise ValueError(f"buffer_size must be positive, got {buffer_size}")
        self._path = path
        self._reassembler = reassembler
        self._stats = stats
        self._buffer_size = buffer_size

        self._file: Optional[BinaryIO] = None
        self._identity: Optional[Tuple[int, int]] = None
        self._position = 0
        self._waiting_logged = False

    @property
    def path(self) -> str:
        return self._path

    @property
    def position(self) -> int:
        """Byte offset of the next read."""
        return self._position

    @property
    def is_open(self) -> bool:
        return self._file is not None

    def poll(self) -> int:
        """
        Run one poll cycle.

        Reads until end of file and returns the number of bytes read. Zero
        means the caller should wait one poll interval before polling again.
        """
        if self._file is None and not self._open():
            return 0

        total = 0
        while True:
            try:
                data = self._file.read(self._buffer_size)
            except OSError as e:
                logger.warning("Read error on %s: %s; reopening from start", self._path, e)
                self._reset()
                return total

            if not data:
                break

            count = len(data)
            total += count
            self._position += count
            self._stats.record_bytes(count)
            self._reassembler.consume(data)

        # At end of stream: nothing more to read from this handle, so check
        # whether the path still refers to the file we are reading.
        if self._rotated():
            self._reset()
        elif total:
            logger.debug("Read %d bytes from %s (offset %d)", total, self._path, self._position)
        return total

    def close(self) -> None:
        """Close the input handle, keeping the cursor."""
        if self._file is None:
            return
        try:
            self._file.close()
        except OSError as e:
            logger.debug("Error closing %s: %s", self._path, e)
        finally:
            self._file = None
            self._identity = None

    def _open(self) -> bool:
        try:
            f = open(self._path, "rb")
        except OSError as e:
            if not self._waiting_logged:
                logger.debug("Input %s not ready: %s", self._path, e)
                self._waiting_logged = True
            return False

        try:
            st = os.fstat(f.fileno())
            if st.st_size < self._position:
                # Shrunk while closed: the cursor no longer means anything.
                self._position = 0
                self._reassembler.reset()
            f.seek(self._position)
        except OSError as e:
            f.close()
            logger.warning("Cannot position %s at %d: %s", self._path, self._position, e)
            return False

        self._file = f
        self._identity = (st.st_dev, st.st_ino)
        self._waiting_logged = False
        logger.info("Opened input %s at offset %d", self._path, self._position)
        return True

    def _rotated(self) -> bool:
        try:
            st = os.stat(self._path)
        except FileNotFoundError:
            logger.info("Input %s was removed", self._path)
            return True
        except OSError as e:
            logger.warning("Cannot stat %s: %s", self._path, e)
            return True

        if (st.st_dev, st.st_ino) != self._identity:
            logger.info("Input %s was replaced", self._path)
            return True
        if st.st_size < self._position:
            logger.info(
                "Input %s was truncated (%d < %d)", self._path, st.st_size, self._position,
            )
            return True
        return False

    def _reset(self) -> None:
        self.close()
        self._position = 0
        self._reassembler.reset()
