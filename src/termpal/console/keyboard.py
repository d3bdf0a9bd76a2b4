"""Keyboard input: key-sequence matching and the stdin key reader."""

from __future__ import annotations

import codecs
import dataclasses
import logging
import threading
from typing import Callable, Optional

from termpal.core.keys import ConsoleKey, KeyBinding, KeyInfo
from termpal.io.terminal_io import TerminalIO
from termpal.terminfo.capabilities import KeyTable

logger = logging.getLogger(__name__)

READ_BUFFER_SIZE = 1024


class KeyMatcher:
    """Longest-prefix matcher over a KeyTable."""

    def __init__(self, table: KeyTable):
        self._table = table

    @property
    def table(self) -> KeyTable:
        return self._table

    def match(self, buffer: str, start: int, end: int) -> tuple[Optional[KeyBinding], int]:
        """
        Find the longest registered sequence at ``buffer[start:end]``.

        Candidate lengths are tried from longest to shortest, so a
        modified key (e.g. shift+left, ``ESC[1;2D``) is never mistaken
        for a shorter sequence it starts with.

        Returns:
            Tuple of (binding, matched length), or (None, 0) on a miss.
        """
        table = self._table
        available = end - start
        if not table or available < table.min_length:
            return None, 0

        for length in range(min(available, table.max_length), table.min_length - 1, -1):
            binding = table.get(buffer[start:start + length])
            if binding is not None:
                return binding, length

        return None, 0


def recode_key_table(table: KeyTable, encoding: str) -> KeyTable:
    """
    Re-decode a key table's sequences with the input encoding.

    Sequences come from terminfo as latin-1 text (one character per
    byte). Input is decoded with ``encoding``, so 8-bit sequences must be
    decoded the same way to compare equal. Sequences that are not valid
    in ``encoding`` (e.g. a lone C1 CSI, ``\\x9b``, under UTF-8) can never
    arrive as decoded input and are dropped.
    """
    if codecs.lookup(encoding).name == "iso8859-1":
        return table

    bindings: dict[str, KeyBinding] = {}
    for binding in table:
        try:
            sequence = binding.sequence.encode("latin1").decode(encoding)
        except UnicodeDecodeError:
            logger.debug("Key sequence %r is not valid %s; skipped", binding.sequence, encoding)
            continue
        bindings[sequence] = dataclasses.replace(binding, sequence=sequence)
    return KeyTable(bindings)


# Characters reported for keys recognized through the key table
_BINDING_CHARS: dict[ConsoleKey, str] = {
    ConsoleKey.ENTER: "\r",
    ConsoleKey.TAB: "\t",
    ConsoleKey.BACKSPACE: "\b",
}

_SIMPLE_KEYS: dict[str, ConsoleKey] = {
    "\r": ConsoleKey.ENTER,
    "\n": ConsoleKey.ENTER,
    "\t": ConsoleKey.TAB,
    "\x7f": ConsoleKey.BACKSPACE,
    "\b": ConsoleKey.BACKSPACE,
    "\x1b": ConsoleKey.ESCAPE,
    " ": ConsoleKey.SPACEBAR,
}


def char_to_key(ch: str) -> KeyInfo:
    """Map a single input character that matched no key sequence."""
    if ch in _SIMPLE_KEYS:
        return KeyInfo(ch, _SIMPLE_KEYS[ch])
    if "0" <= ch <= "9":
        return KeyInfo(ch, ConsoleKey(ConsoleKey.D0 + ord(ch) - ord("0")))
    if "a" <= ch <= "z":
        return KeyInfo(ch, ConsoleKey(ConsoleKey.A + ord(ch) - ord("a")))
    if "A" <= ch <= "Z":
        return KeyInfo(ch, ConsoleKey(ConsoleKey.A + ord(ch) - ord("A")), shift=True)
    if "\x01" <= ch <= "\x1a":
        # Ctrl+A .. Ctrl+Z
        return KeyInfo(ch, ConsoleKey(ConsoleKey.A + ord(ch) - 1), control=True)
    return KeyInfo(ch, ConsoleKey.NONE)


class StdinReader:
    """
    Reads key presses from the terminal's input descriptor.

    Input is decoded into a pending buffer; each :meth:`read_key` takes
    the longest matching key sequence off its front, or a single
    character when nothing matches. When the buffer holds only the
    start of a known sequence, the reader waits up to ``escape_delay``
    seconds for the rest before deciding.

    Key sequences are matched in the same encoding as the input (see
    :func:`recode_key_table`).

    ``lock`` is the console's input lock. The cursor position query
    holds it while it reads the terminal's reply with
    :meth:`read_unbuffered`, so a reply is never taken for keystrokes.
    """

    def __init__(
        self,
        io: TerminalIO,
        fd: int,
        key_table: Callable[[], KeyTable],
        encoding: str = "utf-8",
        escape_delay: float = 0.1,
    ):
        self._io = io
        self._fd = fd
        self._key_table = key_table
        self._escape_delay = escape_delay
        self._encoding = encoding
        self._decoder = codecs.getincrementaldecoder(encoding)(errors="replace")
        self._pending = ""
        self._matcher: Optional[KeyMatcher] = None
        self.lock = threading.RLock()

    @property
    def fd(self) -> int:
        return self._fd

    @property
    def matcher(self) -> KeyMatcher:
        if self._matcher is None:
            self._matcher = KeyMatcher(recode_key_table(self._key_table(), self._encoding))
        return self._matcher

    def read_key(self) -> KeyInfo:
        """
        Read one key press, blocking until one is available.

        Raises:
            EOFError: if the input descriptor reaches end of file.
        """
        with self.lock:
            while not self._pending:
                self._fill()
            self._await_sequence()
            return self._next_key()

    def key_available(self) -> bool:
        """Check whether a key can be read without blocking."""
        with self.lock:
            if self._pending:
                return True
            return self._io.wait_readable(self._fd, 0)

    def read_unbuffered(self, count: int) -> bytes:
        """Read raw bytes from the descriptor, bypassing the key buffer."""
        return self._io.read(self._fd, count)

    def feed(self, data: bytes) -> None:
        """Append raw input bytes to the key buffer."""
        with self.lock:
            self._pending += self._decoder.decode(data)

    def _fill(self) -> None:
        data = self._io.read(self._fd, READ_BUFFER_SIZE)
        if not data:
            raise EOFError("End of console input")
        self._pending += self._decoder.decode(data)

    def _await_sequence(self) -> None:
        """Wait for more input while the buffer is an incomplete key sequence."""
        table = self.matcher.table
        while table.is_prefix(self._pending):
            if not self._io.wait_readable(self._fd, self._escape_delay):
                logger.debug("Incomplete key sequence %r timed out", self._pending)
                return
            self._fill()

    def _next_key(self) -> KeyInfo:
        buffer = self._pending
        binding, length = self.matcher.match(buffer, 0, len(buffer))
        if binding is not None:
            self._pending = buffer[length:]
            return KeyInfo.from_binding(binding, _BINDING_CHARS.get(binding.key, "\0"))

        self._pending = buffer[1:]
        return char_to_key(buffer[0])
