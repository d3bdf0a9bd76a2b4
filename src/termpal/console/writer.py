"""Serialized escape-sequence output."""

from __future__ import annotations

import logging
import threading

from termpal.io.terminal_io import TerminalIO

logger = logging.getLogger(__name__)


class AnsiWriter:
    """
    Writes text to the terminal under a single output lock.

    Every escape sequence the console emits goes through one writer, so
    two emissions never interleave. The lock is reentrant so a caller
    can hold it across several writes that must stay together (e.g. a
    color reset followed by both color sets).
    """

    def __init__(self, io: TerminalIO, fd: int, encoding: str = "utf-8"):
        self._io = io
        self._fd = fd
        self._encoding = encoding
        self.lock = threading.RLock()

    @property
    def fd(self) -> int:
        return self._fd

    def write(self, text: str) -> None:
        """
        Encode and write ``text``; empty strings are ignored.

        A broken pipe means the reader went away and is treated as
        success. Any other OSError propagates.
        """
        if not text:
            return
        data = memoryview(text.encode(self._encoding))
        with self.lock:
            try:
                while data:
                    written = self._io.write(self._fd, data)
                    data = data[written:]
            except BrokenPipeError:
                logger.debug("Broken pipe on fd %d; dropping %d bytes", self._fd, len(data))
