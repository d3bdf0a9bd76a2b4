"""Console configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional


@dataclass
class ConsoleConfig:
    """
    Settings for a :class:`~termpal.console.Console`.

    Defaults target the process's standard streams and the terminal
    named by ``$TERM``. Use :meth:`from_env` to honor the environment,
    or the ``with_*`` helpers to adjust individual settings:

        >>> config = ConsoleConfig.from_env().with_term("xterm-256color")
    """

    # Terminal type used to look up the terminfo entry (None = no database)
    term: Optional[str] = None

    # Standard stream descriptors
    stdin_fd: int = 0
    stdout_fd: int = 1
    stderr_fd: int = 2

    # Encoding for text written to and read from the terminal
    encoding: str = "utf-8"

    # Seconds to wait for the rest of a partially received key sequence
    escape_delay: float = 0.1

    # Suppress color escapes even on an interactive terminal
    no_color: bool = False

    log_level: str = "WARNING"

    def with_term(self, term: Optional[str]) -> ConsoleConfig:
        """Set the terminal type."""
        self.term = term
        return self

    def with_escape_delay(self, seconds: float) -> ConsoleConfig:
        """Set the key-sequence completion delay."""
        if seconds < 0:
            raise ValueError(f"escape_delay must be >= 0, got {seconds}")
        self.escape_delay = seconds
        return self

    def with_log_level(self, level: str) -> ConsoleConfig:
        """Set the log level name (DEBUG, INFO, WARNING, ...)."""
        self.log_level = level.upper()
        return self

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> ConsoleConfig:
        """
        Build a config from environment variables.

        Recognized variables:
            TERMPAL_TERM, TERM: terminal type (TERMPAL_TERM wins)
            TERMPAL_ENCODING: terminal encoding
            TERMPAL_ESCAPE_DELAY: key-sequence completion delay in seconds
            NO_COLOR: any non-empty value disables color escapes
            TERMPAL_LOG_LEVEL: log level name
        """
        env = os.environ if environ is None else environ
        config = cls()
        config.term = env.get("TERMPAL_TERM") or env.get("TERM") or None
        config.encoding = env.get("TERMPAL_ENCODING") or config.encoding
        config.no_color = bool(env.get("NO_COLOR"))

        if delay := env.get("TERMPAL_ESCAPE_DELAY"):
            try:
                seconds = float(delay)
            except ValueError:
                raise ValueError(f"Invalid TERMPAL_ESCAPE_DELAY: {delay!r}") from None
            config.with_escape_delay(seconds)

        if level := env.get("TERMPAL_LOG_LEVEL"):
            config.with_log_level(level)

        return config
