"""
Terminfo database access.

The console layer only needs a handful of lookups from the terminal
description, expressed by the :class:`TerminfoDatabase` protocol, plus
a parameterized-string evaluator. The default implementations sit on
top of the standard :mod:`curses` module (``setupterm``, ``tigetstr``,
``tigetnum`` and ``tparm``).
"""

from __future__ import annotations

import curses
import logging
import threading
from typing import Optional, Protocol

logger = logging.getLogger(__name__)

# setupterm() binds the process to a single terminal type; curses cannot
# switch to another one afterwards.
_setup_lock = threading.Lock()
_current_term: Optional[str] = None


class TerminfoDatabase(Protocol):
    """Named capability lookups for one terminal type."""

    @property
    def term(self) -> Optional[str]: ...

    def get_string(self, name: str) -> Optional[str]: ...

    def get_number(self, name: str) -> int: ...

    def get_extended_string(self, name: str) -> Optional[str]: ...


class Evaluator(Protocol):
    """Substitutes integer arguments into a capability template."""

    def __call__(self, template: str, *args: int) -> str: ...


class CursesDatabase:
    """
    Terminfo database backed by the ncurses library.

    Strings come back from curses as bytes; they are decoded as latin-1
    so every byte maps to exactly one character and sequences keep
    their byte values.
    """

    def __init__(self, term: str):
        self._term = term

    @property
    def term(self) -> str:
        return self._term

    def get_string(self, name: str) -> Optional[str]:
        value = curses.tigetstr(name)
        if not value:
            return None
        return value.decode("latin1")

    def get_number(self, name: str) -> int:
        # -1: absent, -2: not a numeric capability
        return max(curses.tigetnum(name), -1)

    def get_extended_string(self, name: str) -> Optional[str]:
        # ncurses resolves user-defined (extended) names through the same
        # lookup when built with extended capabilities.
        return self.get_string(name)


def load_database(term: Optional[str], fd: int) -> Optional[CursesDatabase]:
    """
    Load the terminfo entry for ``term``.

    Returns None when no terminal type is given or no entry exists for
    it; callers treat a missing database as "no capabilities".
    """
    global _current_term

    if not term:
        return None

    with _setup_lock:
        if _current_term is None:
            try:
                curses.setupterm(term, fd)
            except curses.error as err:
                logger.warning("No terminfo entry for %r: %s", term, err)
                return None
            _current_term = term
            logger.debug("Loaded terminfo entry for %r", term)
        elif _current_term != term:
            logger.warning(
                "Terminal type %r requested, but curses is already bound to %r; "
                "keeping %r for the rest of this process",
                term, _current_term, _current_term,
            )
        return CursesDatabase(_current_term)


def tparm(template: str, *args: int) -> str:
    """Evaluate a capability template with curses.tparm."""
    result = curses.tparm(template.encode("latin1"), *args)
    return result.decode("latin1")
