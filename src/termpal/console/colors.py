"""Foreground/background color tracking."""

from __future__ import annotations

from typing import Callable, Optional, Union

from termpal.console.writer import AnsiWriter
from termpal.core.color import ColorChannel, ConsoleColor, coerce_color
from termpal.terminfo.capabilities import CapabilitySet
from termpal.terminfo.database import Evaluator


class ColorStateTracker:
    """
    Tracks the current foreground and background colors.

    Every change is emitted as: reset colors, then the foreground (if
    set), then the background (if set). Terminals disagree on whether
    setting one channel disturbs the other, so both are always
    reissued after the reset.

    Evaluated escape strings are cached per (channel, color). The cache
    is filled without locking: concurrent evaluations produce identical
    strings, so a lost update only costs a recomputation.
    """

    def __init__(
        self,
        writer: AnsiWriter,
        capabilities: Callable[[], CapabilitySet],
        evaluate: Evaluator,
        suppressed: bool = False,
    ):
        self._writer = writer
        self._capabilities = capabilities
        self._evaluate = evaluate
        self._suppressed = suppressed
        self._colors: dict[ColorChannel, Optional[ConsoleColor]] = {
            ColorChannel.FOREGROUND: None,
            ColorChannel.BACKGROUND: None,
        }
        self._cache: list[list[Optional[str]]] = [[None] * 16 for _ in ColorChannel]

    @property
    def suppressed(self) -> bool:
        """True when color escapes are not emitted (redirected output)."""
        return self._suppressed

    def get_color(self, channel: ColorChannel) -> Optional[ConsoleColor]:
        return self._colors[channel]

    def set_color(self, channel: ColorChannel, color: Union[ConsoleColor, int, None]) -> None:
        """
        Set one channel and re-emit the full color state.

        Raises:
            InvalidColorError: if ``color`` is not a console color or None.
        """
        value = coerce_color(color)
        with self._writer.lock:
            self._colors[channel] = value
            self._refresh()

    def reset(self) -> None:
        """Forget both colors and emit the terminal's reset string."""
        with self._writer.lock:
            self._colors[ColorChannel.FOREGROUND] = None
            self._colors[ColorChannel.BACKGROUND] = None
            self._write_reset()

    def color_string(self, channel: ColorChannel, color: ConsoleColor) -> str:
        """
        Return the escape string selecting ``color`` on ``channel``.

        Returns '' when the terminal has no template for the channel or
        reports no colors.
        """
        cached = self._cache[channel.value][color.value]
        if cached is not None:
            return cached

        caps = self._capabilities()
        template = caps.foreground if channel is ColorChannel.FOREGROUND else caps.background
        if not template or caps.max_colors <= 0:
            return ""

        evaluated = self._evaluate(template, color.to_ansi(caps.max_colors))
        self._cache[channel.value][color.value] = evaluated
        return evaluated

    def _refresh(self) -> None:
        self._write_reset()
        for channel in ColorChannel:
            color = self._colors[channel]
            if color is not None:
                self._write_color(channel, color)

    def _write_reset(self) -> None:
        if not self._suppressed:
            self._writer.write(self._capabilities().reset_colors)

    def _write_color(self, channel: ColorChannel, color: ConsoleColor) -> None:
        if not self._suppressed:
            self._writer.write(self.color_string(channel, color))
