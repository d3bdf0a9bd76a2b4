"""Key identifiers and key event types."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum


class ConsoleKey(IntEnum):
    """Logical key identifiers (values match the classic virtual-key codes)."""
    NONE = 0
    BACKSPACE = 8
    TAB = 9
    CLEAR = 12
    ENTER = 13
    ESCAPE = 27
    SPACEBAR = 32
    PAGE_UP = 33
    PAGE_DOWN = 34
    END = 35
    HOME = 36
    LEFT_ARROW = 37
    UP_ARROW = 38
    RIGHT_ARROW = 39
    DOWN_ARROW = 40
    SELECT = 41
    PRINT = 42
    INSERT = 45
    DELETE = 46
    HELP = 47
    D0 = 48
    D1 = 49
    D2 = 50
    D3 = 51
    D4 = 52
    D5 = 53
    D6 = 54
    D7 = 55
    D8 = 56
    D9 = 57
    A = 65
    B = 66
    C = 67
    D = 68
    E = 69
    F = 70
    G = 71
    H = 72
    I = 73
    J = 74
    K = 75
    L = 76
    M = 77
    N = 78
    O = 79
    P = 80
    Q = 81
    R = 82
    S = 83
    T = 84
    U = 85
    V = 86
    W = 87
    X = 88
    Y = 89
    Z = 90
    F1 = 112
    F2 = 113
    F3 = 114
    F4 = 115
    F5 = 116
    F6 = 117
    F7 = 118
    F8 = 119
    F9 = 120
    F10 = 121
    F11 = 122
    F12 = 123
    F13 = 124
    F14 = 125
    F15 = 126
    F16 = 127
    F17 = 128
    F18 = 129
    F19 = 130
    F20 = 131
    F21 = 132
    F22 = 133
    F23 = 134
    F24 = 135


class ConsoleSpecialKey(Enum):
    """Key combinations delivered as break signals rather than input."""
    CONTROL_BREAK = 0
    CONTROL_C = 1


def format_modifiers(shift: bool, alt: bool, control: bool) -> str:
    """Modifier names joined with '+', e.g. 'shift+control'."""
    names = [
        name for name, on in
        (("shift", shift), ("alt", alt), ("control", control))
        if on
    ]
    return "+".join(names)


@dataclass(frozen=True)
class KeyBinding:
    """A terminal key sequence and the key it stands for."""
    sequence: str
    key: ConsoleKey
    shift: bool = False
    alt: bool = False
    control: bool = False

    @property
    def modifiers(self) -> str:
        return format_modifiers(self.shift, self.alt, self.control)


@dataclass(frozen=True)
class KeyInfo:
    """A key press read from the console."""
    char: str
    key: ConsoleKey
    shift: bool = False
    alt: bool = False
    control: bool = False

    @classmethod
    def from_binding(cls, binding: KeyBinding, char: str = "\0") -> KeyInfo:
        return cls(char, binding.key, binding.shift, binding.alt, binding.control)

    @property
    def modifiers(self) -> str:
        return format_modifiers(self.shift, self.alt, self.control)

    @property
    def is_char(self) -> bool:
        """Check if this key carries a printable character."""
        return self.char != "\0" and self.char.isprintable()
