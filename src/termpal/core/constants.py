"""Shared constants for terminal control."""

# ANSI escape sequences
ESC = "\x1b"
CSI = f"{ESC}["
BEL = "\x07"

# The only cursor position request (terminfo u7) the response parser
# understands: DSR 6, answered by "ESC [ row ; col R".
KNOWN_CURSOR_POSITION_REQUEST = f"{CSI}6n"

# Scratch buffer size for reading a cursor position report
CPR_BUFFER_SIZE = 1024

# Placeholder for the title text in a title template
TITLE_PARAMETER = "%p1%s"

# Title templates for terminals whose terminfo entry lacks tsl/fsl.
# Every xterm* variant is normalized to "xterm" before lookup.
TITLE_FORMATS: dict[str, str] = {
    "aixterm": f"{ESC}]0;{TITLE_PARAMETER}{BEL}",
    "dtterm": f"{ESC}]0;{TITLE_PARAMETER}{BEL}",
    "linux": f"{ESC}]0;{TITLE_PARAMETER}{BEL}",
    "rxvt": f"{ESC}]0;{TITLE_PARAMETER}{BEL}",
    "xterm": f"{ESC}]0;{TITLE_PARAMETER}{BEL}",
    "cygwin": f"{ESC}];{TITLE_PARAMETER}{BEL}",
    "konsole": f"{ESC}]30;{TITLE_PARAMETER}{BEL}",
    "screen": f"{ESC}k{TITLE_PARAMETER}{ESC}",
}

# ConsoleColor value (index) -> ANSI color number.
# Console colors are ordered Black, DarkBlue, DarkGreen, DarkCyan, ...
# while ANSI orders black, red, green, yellow, blue, magenta, cyan, white.
# Source: https://en.wikipedia.org/wiki/ANSI_escape_code#Colors
CONSOLE_COLOR_TO_ANSI: tuple[int, ...] = (
    # Dark colors
    0,   # Black
    4,   # DarkBlue
    2,   # DarkGreen
    6,   # DarkCyan
    1,   # DarkRed
    5,   # DarkMagenta
    3,   # DarkYellow
    7,   # Gray
    # Bright colors
    8,   # DarkGray
    12,  # Blue
    10,  # Green
    14,  # Cyan
    9,   # Red
    13,  # Magenta
    11,  # Yellow
    15,  # White
)

# Reported cursor size (percent of cell), fixed on terminals
CURSOR_SIZE = 100
