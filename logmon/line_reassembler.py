"""
Line Reassembler for the log monitor.

Turns arbitrary byte chunks into complete logical lines while holding at
most ``max_line_length`` bytes of an unterminated line in memory.
"""

from typing import Callable

from .config import MAX_LINE_LENGTH

LineCallback = Callable[[bytes, bool], None]


class LineReassembler:
    """
    Splits a byte stream into newline-terminated lines across chunk boundaries.

    Each complete, non-empty line is passed to ``on_line(line, truncated)``.
    ``line`` never exceeds ``max_line_length`` bytes; ``truncated`` is True
    when the logical line was longer and its tail was dropped.

    States:
    - normal: trailing bytes of a chunk accumulate in the pending buffer
    - skipping: a line overflowed the pending buffer and was already emitted;
      its remaining bytes are dropped up to and including the next newline

    The result depends only on the byte stream, never on how it was chunked.
    """

    def __init__(self, on_line: LineCallback, max_line_length: int = MAX_LINE_LENGTH):
        if max_line_length <= 0:
            raise ValueError(f"max_line_length must be positive, got {max_line_length}")
        self._on_line = on_line
        self._max = max_line_length
        self._pending = bytearray()
        self._skipping = False

    @property
    def max_line_length(self) -> int:
        return self._max

    @property
    def pending(self) -> int:
        """Bytes of the unterminated line currently buffered."""
        return len(self._pending)

    @property
    def skipping(self) -> bool:
        """True while dropping the tail of an overflowed line."""
        return self._skipping

    def consume(self, chunk: bytes) -> None:
        """Feed the next chunk of the stream."""
        start = 0
        size = len(chunk)

        while True:
            nl = chunk.find(b"\n", start)
            if nl < 0:
                break

            if self._skipping:
                # Newline ends the overflowed line; its tail is gone.
                self._skipping = False
            elif self._pending:
                self._complete_pending(chunk, start, nl)
            else:
                self._emit_fragment(chunk, start, nl)

            start = nl + 1

        if start < size and not self._skipping:
            self._hold_partial(chunk, start, size)

    def reset(self) -> None:
        """Discard any partial line, e.g. after the input was rotated."""
        self._pending.clear()
        self._skipping = False

    def _emit_fragment(self, chunk: bytes, start: int, end: int) -> None:
        length = end - start
        if length == 0:
            return
        if length > self._max:
            self._on_line(chunk[start:start + self._max], True)
        else:
            self._on_line(chunk[start:end], False)

    def _complete_pending(self, chunk: bytes, start: int, end: int) -> None:
        room = self._max - len(self._pending)
        truncated = (end - start) > room
        self._pending += chunk[start:start + min(room, end - start)]
        line = bytes(self._pending)
        self._pending.clear()
        self._on_line(line, truncated)

    def _hold_partial(self, chunk: bytes, start: int, end: int) -> None:
        room = self._max - len(self._pending)
        if end - start <= room:
            self._pending += chunk[start:end]
            return

        # Overflow: emit the capped line now and drop the rest of it.
        self._pending += chunk[start:start + room]
        line = bytes(self._pending)
        self._pending.clear()
        self._skipping = True
        self._on_line(line, True)
