"""Core data types: colors, keys, constants and errors."""

from termpal.core.color import ColorChannel, ConsoleColor
from termpal.core.errors import (
    InvalidColorError,
    InvalidOperationError,
    PlatformNotSupportedError,
    TermpalError,
)
from termpal.core.keys import ConsoleKey, ConsoleSpecialKey, KeyBinding, KeyInfo

__all__ = [
    "ColorChannel",
    "ConsoleColor",
    "ConsoleKey",
    "ConsoleSpecialKey",
    "KeyBinding",
    "KeyInfo",
    "TermpalError",
    "InvalidColorError",
    "InvalidOperationError",
    "PlatformNotSupportedError",
]
