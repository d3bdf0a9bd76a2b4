"""Shared fakes: an in-memory terminfo database and a scripted terminal."""

from collections import deque
from contextlib import contextmanager
from typing import Iterable, Iterator, Optional

import pytest

from termpal.config import ConsoleConfig
from termpal.console.console import Console


XTERM_STRINGS: dict[str, str] = {
    "setaf": "\x1b[3%p1%dm",
    "setab": "\x1b[4%p1%dm",
    "op": "\x1b[39;49m",
    "cnorm": "\x1b[?12l\x1b[?25h",
    "civis": "\x1b[?25l",
    "cup": "\x1b[%i%p1%d;%p2%dH",
    "bel": "\x07",
    "clear": "\x1b[H\x1b[2J",
    "smkx": "\x1b[?1h\x1b=",
    "u7": "\x1b[6n",
    "kcub1": "\x1bOD",
    "kcuf1": "\x1bOC",
    "kcuu1": "\x1bOA",
    "kcud1": "\x1bOB",
    "kLFT": "\x1b[1;2D",
    "kLFT5": "\x1b[1;5D",
    "kRIT3": "\x1b[1;3C",
    "kUP7": "\x1b[1;7A",
    "kf1": "\x1bOP",
    "kf5": "\x1b[15~",
    "kbs": "\x7f",
    "kdch1": "\x1b[3~",
    "khome": "\x1bOH",
    "kend": "\x1bOF",
}

XTERM_NUMBERS: dict[str, int] = {
    "colors": 256,
    "cols": 80,
    "lines": 24,
}


class FakeDatabase:
    """Dict-backed TerminfoDatabase."""

    def __init__(
        self,
        term: Optional[str] = "xterm-256color",
        strings: Optional[dict[str, str]] = None,
        numbers: Optional[dict[str, int]] = None,
    ):
        self.term = term
        self.strings = dict(XTERM_STRINGS if strings is None else strings)
        self.numbers = dict(XTERM_NUMBERS if numbers is None else numbers)

    def get_string(self, name: str) -> Optional[str]:
        return self.strings.get(name)

    def get_number(self, name: str) -> int:
        return self.numbers.get(name, -1)

    def get_extended_string(self, name: str) -> Optional[str]:
        return self.strings.get(name)


def fake_tparm(template: str, *args: int) -> str:
    """Just enough of tparm for %i and %pN%d."""
    params = list(args)
    if "%i" in template:
        params[:2] = [p + 1 for p in params[:2]]
        template = template.replace("%i", "")
    for n, value in enumerate(params, start=1):
        template = template.replace(f"%p{n}%d", str(value))
    return template


class FakeTerminalIO:
    """
    Scripted TerminalIO.

    Each read returns (at most) the next queued chunk, so chunk
    boundaries model separate arrivals from the terminal. Writes are
    collected in ``output``.
    """

    def __init__(
        self,
        chunks: Iterable[bytes] = (),
        tty_fds: Iterable[int] = (0, 1, 2),
        size: Optional[tuple[int, int]] = (24, 80),
    ):
        self.chunks: deque[bytes] = deque(chunks)
        self.tty_fds = set(tty_fds)
        self.size = size
        self.output = bytearray()
        self.max_write: Optional[int] = None
        self.write_error: Optional[OSError] = None
        self.write_calls = 0
        self.cbreak_calls = 0

    def queue(self, *chunks: bytes) -> None:
        self.chunks.extend(chunks)

    @property
    def text(self) -> str:
        return self.output.decode("utf-8")

    def read(self, fd: int, count: int) -> bytes:
        if not self.chunks:
            return b""
        chunk = self.chunks.popleft()
        if len(chunk) > count:
            self.chunks.appendleft(chunk[count:])
            chunk = chunk[:count]
        return chunk

    def write(self, fd: int, data: bytes) -> int:
        self.write_calls += 1
        if self.write_error is not None:
            raise self.write_error
        data = bytes(data)
        if self.max_write is not None:
            data = data[:self.max_write]
        self.output += data
        return len(data)

    def is_interactive(self, fd: int) -> bool:
        return fd in self.tty_fds

    def window_size(self, fd: int) -> Optional[tuple[int, int]]:
        return self.size

    def wait_readable(self, fd: int, timeout: Optional[float]) -> bool:
        return bool(self.chunks)

    @contextmanager
    def cbreak(self, fd: int) -> Iterator[None]:
        self.cbreak_calls += 1
        yield


@pytest.fixture
def fake_io() -> FakeTerminalIO:
    return FakeTerminalIO()


@pytest.fixture
def xterm_db() -> FakeDatabase:
    return FakeDatabase()


@pytest.fixture
def console(fake_io: FakeTerminalIO, xterm_db: FakeDatabase) -> Console:
    """Console on an interactive fake xterm."""
    return Console(ConsoleConfig(term="xterm-256color"), io=fake_io, database=xterm_db, evaluate=fake_tparm)


@pytest.fixture
def redirected_io() -> FakeTerminalIO:
    return FakeTerminalIO(tty_fds=())


@pytest.fixture
def redirected_console(redirected_io: FakeTerminalIO, xterm_db: FakeDatabase) -> Console:
    """Console whose standard streams are all redirected."""
    return Console(ConsoleConfig(term="xterm-256color"), io=redirected_io, database=xterm_db, evaluate=fake_tparm)
