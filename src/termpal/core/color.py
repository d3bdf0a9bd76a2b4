"""Console color representation."""

from __future__ import annotations

from enum import Enum, IntEnum
from typing import Optional, Union

from termpal.core.constants import CONSOLE_COLOR_TO_ANSI
from termpal.core.errors import InvalidColorError


class ColorChannel(Enum):
    """Which half of a cell a color applies to."""
    FOREGROUND = 0
    BACKGROUND = 1


class ConsoleColor(IntEnum):
    """
    The 16 logical console colors.

    Values follow the classic console ordering (dark colors 0-7, bright
    colors 8-15), which is *not* the ANSI ordering. Use :meth:`to_ansi`
    to get the terminal color number.
    """
    BLACK = 0
    DARK_BLUE = 1
    DARK_GREEN = 2
    DARK_CYAN = 3
    DARK_RED = 4
    DARK_MAGENTA = 5
    DARK_YELLOW = 6
    GRAY = 7
    DARK_GRAY = 8
    BLUE = 9
    GREEN = 10
    CYAN = 11
    RED = 12
    MAGENTA = 13
    YELLOW = 14
    WHITE = 15

    def to_ansi(self, max_colors: int = 16) -> int:
        """
        Return the ANSI color number for this color.

        Bright colors fold onto their dark counterparts on 8-color
        terminals.
        """
        return CONSOLE_COLOR_TO_ANSI[self.value] % max_colors

    @property
    def is_bright(self) -> bool:
        return self.value >= 8


def coerce_color(value: Union[ConsoleColor, int, None]) -> Optional[ConsoleColor]:
    """
    Validate a color argument.

    Accepts a ConsoleColor, an int in 0-15, or None (the "unset" state).

    Raises:
        InvalidColorError: for anything else, including bools.
    """
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidColorError(value)
    try:
        return ConsoleColor(value)
    except ValueError:
        raise InvalidColorError(value) from None
