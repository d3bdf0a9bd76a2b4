"""Console control: output writer, colors, cursor queries and key input."""

from termpal.console.colors import ColorStateTracker
from termpal.console.console import Console
from termpal.console.cursor import CursorPositionProtocol
from termpal.console.keyboard import KeyMatcher, StdinReader, char_to_key
from termpal.console.writer import AnsiWriter

__all__ = [
    "AnsiWriter",
    "ColorStateTracker",
    "Console",
    "CursorPositionProtocol",
    "KeyMatcher",
    "StdinReader",
    "char_to_key",
]
