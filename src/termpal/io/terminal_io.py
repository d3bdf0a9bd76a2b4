"""Low-level terminal I/O on file descriptors."""

from __future__ import annotations

import os
import select
import termios
import tty
from contextlib import contextmanager
from typing import ContextManager, Iterator, Optional, Protocol


class TerminalIO(Protocol):
    """File-descriptor primitives the console is built on."""

    def read(self, fd: int, count: int) -> bytes: ...

    def write(self, fd: int, data: bytes) -> int: ...

    def is_interactive(self, fd: int) -> bool: ...

    def window_size(self, fd: int) -> Optional[tuple[int, int]]: ...

    def wait_readable(self, fd: int, timeout: Optional[float]) -> bool: ...

    def cbreak(self, fd: int) -> ContextManager[None]: ...


class PosixTerminalIO:
    """
    TerminalIO over os/select/termios.

    Reads go straight to os.read() so nothing is held back in Python's
    own buffers, which the key reader and cursor query rely on.
    """

    def read(self, fd: int, count: int) -> bytes:
        """Read up to ``count`` bytes, blocking until some are available."""
        while True:
            try:
                return os.read(fd, count)
            except InterruptedError:
                continue

    def write(self, fd: int, data: bytes) -> int:
        return os.write(fd, data)

    def is_interactive(self, fd: int) -> bool:
        try:
            return os.isatty(fd)
        except OSError:
            return False

    def window_size(self, fd: int) -> Optional[tuple[int, int]]:
        """Return (rows, columns), or None if the size is unavailable."""
        try:
            size = os.get_terminal_size(fd)
        except OSError:
            return None
        return size.lines, size.columns

    def wait_readable(self, fd: int, timeout: Optional[float]) -> bool:
        """Check if input is available within timeout (None blocks)."""
        try:
            ready, _, _ = select.select([fd], [], [], timeout)
            return bool(ready)
        except (ValueError, OSError):
            return False

    @contextmanager
    def cbreak(self, fd: int) -> Iterator[None]:
        """
        Context manager for cbreak mode: no line buffering, no echo.

        A no-op when ``fd`` is not a terminal.
        """
        try:
            old_settings = termios.tcgetattr(fd)
        except termios.error:
            yield
            return
        try:
            tty.setcbreak(fd, termios.TCSANOW)
            yield
        finally:
            termios.tcsetattr(fd, termios.TCSADRAIN, old_settings)
