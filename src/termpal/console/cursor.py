"""
Cursor position query (DSR 6 / CPR).

The request is written to the output and the terminal's reply,
``ESC [ row ; col R``, arrives on the same input stream as keystrokes.
The exchange runs under the input lock so no concurrent key read can
consume part of the reply.

Anything in the input that is not part of the reply pattern (e.g. keys
typed while the query is in flight) is discarded. A terminal that never
replies blocks the caller; there is no timeout.
"""

from __future__ import annotations

import logging
from typing import Callable

from termpal.console.keyboard import StdinReader
from termpal.console.writer import AnsiWriter
from termpal.core.constants import CPR_BUFFER_SIZE
from termpal.io.terminal_io import TerminalIO
from termpal.terminfo.capabilities import CapabilitySet

logger = logging.getLogger(__name__)

_ESC = 0x1B
_LBRACKET = ord("[")
_R = ord("R")


def _is_digit(byte: int) -> bool:
    return 0x30 <= byte <= 0x39


class _ResponseScanner:
    """Scans a byte stream that is refilled from the terminal on demand."""

    def __init__(self, read: Callable[[int], bytes], buffer_size: int = CPR_BUFFER_SIZE):
        self._read = read
        self._buffer_size = buffer_size
        self._data = b""
        self._pos = 0

    def _refill(self) -> None:
        data = self._read(self._buffer_size)
        if not data:
            raise EOFError("Console input closed while waiting for a cursor position report")
        self._data = data
        self._pos = 0

    def skip_until(self, condition: Callable[[int], bool]) -> None:
        """Advance to the next byte satisfying ``condition`` (not consumed)."""
        while True:
            data, pos = self._data, self._pos
            while pos < len(data) and not condition(data[pos]):
                pos += 1
            self._pos = pos
            if pos < len(data):
                return
            self._refill()

    def consume(self) -> None:
        self._pos += 1

    def parse_int(self) -> int:
        """Parse a run of digits, following it across refills."""
        result = 0
        while True:
            data = self._data
            while self._pos < len(data) and _is_digit(data[self._pos]):
                result = result * 10 + data[self._pos] - 0x30
                self._pos += 1
            if self._pos < len(data):
                return result
            # The run ends the buffer; the reply always continues with ';' or 'R'
            self._refill()

    def remaining(self) -> bytes:
        return self._data[self._pos:]


class CursorPositionProtocol:
    """Queries the terminal for the cursor position."""

    def __init__(
        self,
        writer: AnsiWriter,
        reader: StdinReader,
        io: TerminalIO,
        capabilities: Callable[[], CapabilitySet],
        interactive: Callable[[], bool],
    ):
        self._writer = writer
        self._reader = reader
        self._io = io
        self._capabilities = capabilities
        self._interactive = interactive

    def query_position(self) -> tuple[int, int]:
        """
        Return the zero-based (row, column) of the cursor.

        Returns (0, 0) without any I/O when input or output is redirected
        or the terminal has no usable position request.
        """
        if not self._interactive():
            return 0, 0

        request = self._capabilities().cursor_position_request
        if not request:
            return 0, 0

        row = col = 0
        with self._reader.lock, self._io.cbreak(self._reader.fd):
            self._writer.write(request)

            scanner = _ResponseScanner(self._reader.read_unbuffered)

            scanner.skip_until(lambda b: b == _ESC)
            scanner.consume()
            scanner.skip_until(lambda b: b == _LBRACKET)

            scanner.skip_until(_is_digit)
            value = scanner.parse_int()
            if value >= 1:
                row = value - 1

            scanner.skip_until(_is_digit)
            value = scanner.parse_int()
            if value >= 1:
                col = value - 1

            scanner.skip_until(lambda b: b == _R)
            scanner.consume()

            # Keystrokes that arrived after the reply in the same read
            trailing = scanner.remaining()
            if trailing:
                self._reader.feed(trailing)

        logger.debug("Cursor position report: row=%d col=%d", row, col)
        return row, col
