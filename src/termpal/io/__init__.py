"""Terminal file-descriptor I/O and signal handling."""

from termpal.io.signals import BreakHandlerRegistrar
from termpal.io.terminal_io import PosixTerminalIO, TerminalIO

__all__ = [
    "BreakHandlerRegistrar",
    "PosixTerminalIO",
    "TerminalIO",
]
