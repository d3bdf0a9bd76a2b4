"""The public console API."""

from __future__ import annotations

import logging
import threading
from typing import Optional, Union

from termpal.config import ConsoleConfig
from termpal.console.colors import ColorStateTracker
from termpal.console.cursor import CursorPositionProtocol
from termpal.console.keyboard import StdinReader
from termpal.console.writer import AnsiWriter
from termpal.core.color import ColorChannel, ConsoleColor
from termpal.core.constants import CURSOR_SIZE, TITLE_PARAMETER
from termpal.core.errors import InvalidOperationError, PlatformNotSupportedError
from termpal.core.keys import KeyInfo
from termpal.io.terminal_io import PosixTerminalIO, TerminalIO
from termpal.terminfo.capabilities import CapabilityRegistry, CapabilitySet
from termpal.terminfo.database import Evaluator, TerminfoDatabase, load_database, tparm

logger = logging.getLogger(__name__)


class Console:
    """
    Terminal-capability-driven console control.

    Owns the capability registry, the output writer, the key reader and
    the tracked color state for one terminal. Escape sequences are only
    written when the output is an interactive terminal; with redirected
    output every control operation is a silent no-op.

    Example:
        >>> console = Console()
        >>> console.initialize()
        >>> console.foreground_color = ConsoleColor.YELLOW
        >>> console.write("warning\\n")
        >>> console.reset_color()
    """

    def __init__(
        self,
        config: Optional[ConsoleConfig] = None,
        io: Optional[TerminalIO] = None,
        database: Optional[TerminfoDatabase] = None,
        evaluate: Evaluator = tparm,
    ):
        self.config = config or ConsoleConfig.from_env()
        self._io = io or PosixTerminalIO()
        self._evaluate = evaluate

        if database is not None:
            self.registry = CapabilityRegistry(lambda: database)
        else:
            self.registry = CapabilityRegistry(
                lambda: load_database(self.config.term, self.config.stdout_fd)
            )

        self._input_redirected = not self._io.is_interactive(self.config.stdin_fd)
        self._output_redirected = not self._io.is_interactive(self.config.stdout_fd)
        self._error_redirected = not self._io.is_interactive(self.config.stderr_fd)

        self.writer = AnsiWriter(self._io, self.config.stdout_fd, self.config.encoding)
        self.reader = StdinReader(
            self._io,
            self.config.stdin_fd,
            lambda: self.capabilities.key_table,
            encoding=self.config.encoding,
            escape_delay=self.config.escape_delay,
        )
        self.colors = ColorStateTracker(
            self.writer,
            lambda: self.capabilities,
            self._evaluate,
            suppressed=self._output_redirected or self.config.no_color,
        )
        self.cursor = CursorPositionProtocol(
            self.writer,
            self.reader,
            self._io,
            lambda: self.capabilities,
            lambda: not (self._input_redirected or self._output_redirected),
        )

        self._init_lock = threading.Lock()
        self._initialized = False

    # -- lifecycle ----------------------------------------------------------

    @property
    def capabilities(self) -> CapabilitySet:
        return self.registry.resolve()

    def initialize(self) -> None:
        """
        One-time startup: resolve capabilities and enable keypad transmit.

        Safe to call more than once; only the first call has effects.
        """
        if self._initialized:
            return
        with self._init_lock, self.writer.lock:
            if self._initialized:
                return
            caps = self.capabilities
            if not self._output_redirected and caps.keypad_xmit:
                logger.debug("Enabling keypad transmit mode")
                self.writer.write(caps.keypad_xmit)
            self._initialized = True

    # -- redirection --------------------------------------------------------

    @property
    def is_input_redirected(self) -> bool:
        return self._input_redirected

    @property
    def is_output_redirected(self) -> bool:
        return self._output_redirected

    @property
    def is_error_redirected(self) -> bool:
        return self._error_redirected

    # -- output -------------------------------------------------------------

    def write(self, text: str) -> None:
        """Write plain text through the console's output writer."""
        self.writer.write(text)

    def _write_control(self, sequence: str) -> None:
        if not self._output_redirected:
            self.writer.write(sequence)

    # -- colors -------------------------------------------------------------

    @property
    def foreground_color(self) -> Optional[ConsoleColor]:
        return self.colors.get_color(ColorChannel.FOREGROUND)

    @foreground_color.setter
    def foreground_color(self, value: Union[ConsoleColor, int, None]) -> None:
        self.colors.set_color(ColorChannel.FOREGROUND, value)

    @property
    def background_color(self) -> Optional[ConsoleColor]:
        return self.colors.get_color(ColorChannel.BACKGROUND)

    @background_color.setter
    def background_color(self, value: Union[ConsoleColor, int, None]) -> None:
        self.colors.set_color(ColorChannel.BACKGROUND, value)

    def reset_color(self) -> None:
        self.colors.reset()

    # -- screen -------------------------------------------------------------

    def clear(self) -> None:
        """Clear the screen."""
        self._write_control(self.capabilities.clear)

    def beep(self) -> None:
        """Ring the terminal bell."""
        self._write_control(self.capabilities.bell)

    def beep_tone(self, frequency: int, duration: int) -> None:
        raise PlatformNotSupportedError("beep_tone")

    @property
    def title(self) -> str:
        raise PlatformNotSupportedError("Reading the title")

    @title.setter
    def title(self, value: str) -> None:
        if self._output_redirected:
            return
        template = self.capabilities.title
        if not template:
            return
        # Only the title itself is a string parameter. The surrounding parts
        # are evaluated without arguments, so a status-line template that
        # also takes numeric parameters (e.g. a tsl with a column %p1%d)
        # is not supported.
        parts = [self._evaluate(part) if part else "" for part in template.split(TITLE_PARAMETER)]
        self.writer.write(value.join(parts))

    # -- cursor -------------------------------------------------------------

    @property
    def cursor_visible(self) -> bool:
        raise PlatformNotSupportedError("Reading cursor visibility")

    @cursor_visible.setter
    def cursor_visible(self, visible: bool) -> None:
        caps = self.capabilities
        self._write_control(caps.cursor_visible if visible else caps.cursor_invisible)

    @property
    def cursor_size(self) -> int:
        return CURSOR_SIZE

    @cursor_size.setter
    def cursor_size(self, value: int) -> None:
        raise PlatformNotSupportedError("Setting the cursor size")

    def get_cursor_position(self) -> tuple[int, int]:
        """Return the zero-based (row, column); (0, 0) when unavailable."""
        return self.cursor.query_position()

    @property
    def cursor_left(self) -> int:
        return self.get_cursor_position()[1]

    @property
    def cursor_top(self) -> int:
        return self.get_cursor_position()[0]

    def set_cursor_position(self, row: int, col: int) -> None:
        """Move the cursor to the zero-based (row, column)."""
        if row < 0 or col < 0:
            raise ValueError(f"Cursor position must be non-negative, got ({row}, {col})")
        if self._output_redirected:
            return
        template = self.capabilities.cursor_address
        if template:
            self.writer.write(self._evaluate(template, row, col))

    # -- window -------------------------------------------------------------

    @property
    def window_width(self) -> int:
        size = self._io.window_size(self.config.stdout_fd)
        return size[1] if size else self.capabilities.columns

    @window_width.setter
    def window_width(self, value: int) -> None:
        raise PlatformNotSupportedError("Setting the window width")

    @property
    def window_height(self) -> int:
        size = self._io.window_size(self.config.stdout_fd)
        return size[0] if size else self.capabilities.lines

    @window_height.setter
    def window_height(self, value: int) -> None:
        raise PlatformNotSupportedError("Setting the window height")

    @property
    def buffer_width(self) -> int:
        return self.window_width

    @buffer_width.setter
    def buffer_width(self, value: int) -> None:
        raise PlatformNotSupportedError("Setting the buffer width")

    @property
    def buffer_height(self) -> int:
        return self.window_height

    @buffer_height.setter
    def buffer_height(self, value: int) -> None:
        raise PlatformNotSupportedError("Setting the buffer height")

    @property
    def largest_window_width(self) -> int:
        return self.window_width

    @property
    def largest_window_height(self) -> int:
        return self.window_height

    @property
    def window_left(self) -> int:
        return 0

    @window_left.setter
    def window_left(self, value: int) -> None:
        raise PlatformNotSupportedError("Setting the window position")

    @property
    def window_top(self) -> int:
        return 0

    @window_top.setter
    def window_top(self, value: int) -> None:
        raise PlatformNotSupportedError("Setting the window position")

    def set_buffer_size(self, width: int, height: int) -> None:
        raise PlatformNotSupportedError("set_buffer_size")

    def set_window_position(self, left: int, top: int) -> None:
        raise PlatformNotSupportedError("set_window_position")

    def set_window_size(self, width: int, height: int) -> None:
        raise PlatformNotSupportedError("set_window_size")

    def move_buffer_area(self, *args: object) -> None:
        raise PlatformNotSupportedError("move_buffer_area")

    # -- input --------------------------------------------------------------

    def read_key(self, intercept: bool = False) -> KeyInfo:
        """
        Read one key press, blocking until one is available.

        The key's character is echoed unless ``intercept`` is True.

        Raises:
            InvalidOperationError: if input is redirected.
            EOFError: if console input is closed.
        """
        if self._input_redirected:
            raise InvalidOperationError("Cannot read keys when input is redirected")

        self.initialize()
        # Input lock first, then cbreak: the same order as the cursor query.
        with self.reader.lock, self._io.cbreak(self.config.stdin_fd):
            key = self.reader.read_key()

        if not intercept and key.char != "\0":
            self.writer.write(key.char)
        return key

    @property
    def key_available(self) -> bool:
        """True if a key press is waiting to be read."""
        if self._input_redirected:
            raise InvalidOperationError("Cannot check for keys when input is redirected")
        return self.reader.key_available()
