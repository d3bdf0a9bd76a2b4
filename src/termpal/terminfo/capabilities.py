"""
Capability resolution and key-table construction.

A :class:`CapabilityRegistry` reads everything the console needs from a
terminfo database exactly once and freezes it into a
:class:`CapabilitySet`. Missing capabilities are never an error here;
they come back empty and the console turns them into no-ops.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Callable, Iterator, Optional

from termpal.core.constants import (
    KNOWN_CURSOR_POSITION_REQUEST,
    TITLE_FORMATS,
    TITLE_PARAMETER,
)
from termpal.core.keys import ConsoleKey, KeyBinding
from termpal.terminfo.database import TerminfoDatabase

logger = logging.getLogger(__name__)


# terminfo name -> (key, shift, alt, control)
KEY_CAPABILITIES: tuple[tuple[str, ConsoleKey, bool, bool, bool], ...] = (
    *((f"kf{n}", ConsoleKey[f"F{n}"], False, False, False) for n in range(1, 25)),
    ("kbs", ConsoleKey.BACKSPACE, False, False, False),
    ("kcbt", ConsoleKey.TAB, True, False, False),
    ("kbeg", ConsoleKey.HOME, False, False, False),
    ("kclr", ConsoleKey.CLEAR, False, False, False),
    ("kdch1", ConsoleKey.DELETE, False, False, False),
    ("kcud1", ConsoleKey.DOWN_ARROW, False, False, False),
    ("kend", ConsoleKey.END, False, False, False),
    ("kent", ConsoleKey.ENTER, False, False, False),
    ("khlp", ConsoleKey.HELP, False, False, False),
    ("khome", ConsoleKey.HOME, False, False, False),
    ("kich1", ConsoleKey.INSERT, False, False, False),
    ("kcub1", ConsoleKey.LEFT_ARROW, False, False, False),
    ("knp", ConsoleKey.PAGE_DOWN, False, False, False),
    ("kpp", ConsoleKey.PAGE_UP, False, False, False),
    ("kprt", ConsoleKey.PRINT, False, False, False),
    ("kcuf1", ConsoleKey.RIGHT_ARROW, False, False, False),
    ("kind", ConsoleKey.PAGE_DOWN, True, False, False),   # scroll forward
    ("kri", ConsoleKey.PAGE_UP, True, False, False),      # scroll reverse
    ("kBEG", ConsoleKey.HOME, True, False, False),
    ("kDC", ConsoleKey.DELETE, True, False, False),
    ("kHOM", ConsoleKey.HOME, True, False, False),
    ("kslt", ConsoleKey.SELECT, False, False, False),
    ("kLFT", ConsoleKey.LEFT_ARROW, True, False, False),
    ("kPRT", ConsoleKey.PRINT, True, False, False),
    ("kRIT", ConsoleKey.RIGHT_ARROW, True, False, False),
    ("kcuu1", ConsoleKey.UP_ARROW, False, False, False),
)

# Extended (user-defined) names carrying an xterm modifier suffix
MODIFIER_KEY_PREFIXES: tuple[tuple[str, ConsoleKey], ...] = (
    ("kLFT", ConsoleKey.LEFT_ARROW),
    ("kRIT", ConsoleKey.RIGHT_ARROW),
    ("kUP", ConsoleKey.UP_ARROW),
    ("kDN", ConsoleKey.DOWN_ARROW),
    ("kDC", ConsoleKey.DELETE),
    ("kEND", ConsoleKey.END),
    ("kHOM", ConsoleKey.HOME),
    ("kNXT", ConsoleKey.PAGE_DOWN),
    ("kPRV", ConsoleKey.PAGE_UP),
)

# suffix -> (shift, alt, control)
MODIFIER_SUFFIXES: tuple[tuple[str, bool, bool, bool], ...] = (
    ("3", False, True, False),
    ("4", True, True, False),
    ("5", False, False, True),
    ("6", True, False, True),
    ("7", False, True, True),
)


class KeyTable:
    """
    Mapping of terminal key sequences to key bindings.

    Keeps the shortest and longest sequence length so matching can
    bound its search, and the set of strict prefixes of all sequences
    so a reader can tell when more input may complete a key.
    """

    def __init__(self, bindings: Optional[dict[str, KeyBinding]] = None):
        self._bindings: dict[str, KeyBinding] = dict(bindings or {})
        if self._bindings:
            lengths = [len(seq) for seq in self._bindings]
            self.min_length = min(lengths)
            self.max_length = max(lengths)
        else:
            self.min_length = 0
            self.max_length = 0
        self.prefixes: frozenset[str] = frozenset(
            seq[:i] for seq in self._bindings for i in range(1, len(seq))
        )

    def get(self, sequence: str) -> Optional[KeyBinding]:
        return self._bindings.get(sequence)

    def is_prefix(self, text: str) -> bool:
        """True if ``text`` is a strict prefix of some registered sequence."""
        return text in self.prefixes

    def __contains__(self, sequence: object) -> bool:
        return sequence in self._bindings

    def __len__(self) -> int:
        return len(self._bindings)

    def __iter__(self) -> Iterator[KeyBinding]:
        return iter(self._bindings.values())

    def __bool__(self) -> bool:
        return bool(self._bindings)


def build_key_table(db: TerminfoDatabase) -> KeyTable:
    """
    Build the key table from the database's key capabilities.

    Standard names come first, then the modifier variants; a sequence
    listed twice keeps the last binding.
    """
    bindings: dict[str, KeyBinding] = {}

    def add(sequence: Optional[str], key: ConsoleKey, shift: bool, alt: bool, control: bool) -> None:
        if sequence:
            bindings[sequence] = KeyBinding(sequence, key, shift, alt, control)

    for name, key, shift, alt, control in KEY_CAPABILITIES:
        add(db.get_string(name), key, shift, alt, control)

    for prefix, key in MODIFIER_KEY_PREFIXES:
        for suffix, shift, alt, control in MODIFIER_SUFFIXES:
            add(db.get_extended_string(prefix + suffix), key, shift, alt, control)

    return KeyTable(bindings)


@dataclass(frozen=True)
class CapabilitySet:
    """Everything the console needs from the terminal description."""
    term: Optional[str] = None
    foreground: str = ""
    background: str = ""
    reset_colors: str = ""
    max_colors: int = 0
    columns: int = 0
    lines: int = 0
    cursor_visible: str = ""
    cursor_invisible: str = ""
    cursor_address: str = ""
    title: str = ""
    bell: str = ""
    clear: str = ""
    keypad_xmit: str = ""
    cursor_position_request: str = ""
    key_table: KeyTable = field(default_factory=KeyTable)

    def scalars(self) -> dict[str, object]:
        """Scalar capabilities by name, for display."""
        return {
            "foreground": self.foreground,
            "background": self.background,
            "reset_colors": self.reset_colors,
            "max_colors": self.max_colors,
            "columns": self.columns,
            "lines": self.lines,
            "cursor_visible": self.cursor_visible,
            "cursor_invisible": self.cursor_invisible,
            "cursor_address": self.cursor_address,
            "title": self.title,
            "bell": self.bell,
            "clear": self.clear,
            "keypad_xmit": self.keypad_xmit,
            "cursor_position_request": self.cursor_position_request,
        }


def normalize_max_colors(colors: int) -> int:
    """Fold a terminfo color count to 16, 8 or 0."""
    if colors >= 16:
        return 16
    if colors >= 8:
        return 8
    return 0


def title_format(db: TerminfoDatabase) -> str:
    """Return the title template, or '' if the terminal has none."""
    to_status = db.get_string("tsl")
    from_status = db.get_string("fsl")
    if to_status is not None and from_status is not None:
        return to_status + TITLE_PARAMETER + from_status

    term = db.term
    if term is None:
        return ""
    if term.startswith("xterm"):
        term = "xterm"
    return TITLE_FORMATS.get(term, "")


def resolve_capabilities(db: Optional[TerminfoDatabase]) -> CapabilitySet:
    """Read a CapabilitySet from ``db``; None yields an empty set."""
    if db is None:
        return CapabilitySet()

    def string(name: str) -> str:
        return db.get_string(name) or ""

    request = db.get_string("u7")
    return CapabilitySet(
        term=db.term,
        foreground=string("setaf"),
        background=string("setab"),
        reset_colors=db.get_string("op") or string("oc"),
        max_colors=normalize_max_colors(db.get_number("colors")),
        columns=max(db.get_number("cols"), 0),
        lines=max(db.get_number("lines"), 0),
        cursor_visible=string("cnorm"),
        cursor_invisible=string("civis"),
        cursor_address=string("cup"),
        title=title_format(db),
        bell=string("bel"),
        clear=string("clear"),
        keypad_xmit=string("smkx"),
        cursor_position_request=(
            KNOWN_CURSOR_POSITION_REQUEST if request == KNOWN_CURSOR_POSITION_REQUEST else ""
        ),
        key_table=build_key_table(db),
    )


class CapabilityRegistry:
    """
    Resolves the active terminal's capabilities once.

    The database loader is only called on the first :meth:`resolve`;
    concurrent first callers wait on a lock and all receive the same
    CapabilitySet.
    """

    def __init__(self, loader: Callable[[], Optional[TerminfoDatabase]]):
        self._loader = loader
        self._lock = threading.Lock()
        self._capabilities: Optional[CapabilitySet] = None

    @property
    def resolved(self) -> bool:
        return self._capabilities is not None

    def resolve(self) -> CapabilitySet:
        caps = self._capabilities
        if caps is not None:
            return caps

        with self._lock:
            if self._capabilities is None:
                db = self._loader()
                caps = resolve_capabilities(db)
                logger.debug(
                    "Resolved capabilities for %r: %d colors, %d key sequences",
                    caps.term, caps.max_colors, len(caps.key_table),
                )
                self._capabilities = caps
            return self._capabilities
