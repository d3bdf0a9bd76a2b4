"""
termpal: terminfo-driven console control

Drive the terminal attached to the process through its terminfo
capabilities instead of hard-coded escape sequences.

Quick Start:
    >>> from termpal import Console, ConsoleColor
    >>> console = Console()
    >>> console.initialize()
    >>> console.foreground_color = ConsoleColor.GREEN
    >>> console.write("ok\\n")
    >>> console.reset_color()
    >>> key = console.read_key(intercept=True)
    >>> key.key, key.shift, key.control

Features:
    - Colors, clear, bell, title and cursor visibility from terminfo
    - Function, navigation and modified arrow keys decoded from the
      terminal's own key sequences (longest match wins)
    - Cursor position queries that share the input stream safely with
      key reads
    - Escape output suppressed automatically when output is redirected
"""

__version__ = "0.1.0"

# Core types
from termpal.core.color import ColorChannel, ConsoleColor
from termpal.core.errors import (
    InvalidColorError,
    InvalidOperationError,
    PlatformNotSupportedError,
    TermpalError,
)
from termpal.core.keys import ConsoleKey, ConsoleSpecialKey, KeyBinding, KeyInfo

# Configuration
from termpal.config import ConsoleConfig

# Console
from termpal.console.console import Console

# Capabilities
from termpal.terminfo.capabilities import CapabilityRegistry, CapabilitySet, KeyTable

# Signals
from termpal.io.signals import BreakHandlerRegistrar

__all__ = [
    # Version
    "__version__",
    # Core types
    "ColorChannel",
    "ConsoleColor",
    "ConsoleKey",
    "ConsoleSpecialKey",
    "KeyBinding",
    "KeyInfo",
    # Errors
    "TermpalError",
    "InvalidColorError",
    "InvalidOperationError",
    "PlatformNotSupportedError",
    # Configuration
    "ConsoleConfig",
    # Console
    "Console",
    # Capabilities
    "CapabilityRegistry",
    "CapabilitySet",
    "KeyTable",
    # Signals
    "BreakHandlerRegistrar",
]
