"""Break-signal (Ctrl+C / Ctrl+Break) registration."""

from __future__ import annotations

import logging
import os
import signal
from typing import Callable, Optional

from termpal.core.keys import ConsoleSpecialKey

logger = logging.getLogger(__name__)

# Returns True to cancel the default action
BreakCallback = Callable[[ConsoleSpecialKey], bool]

_SIGNAL_KEYS = {
    signal.SIGINT: ConsoleSpecialKey.CONTROL_C,
    signal.SIGQUIT: ConsoleSpecialKey.CONTROL_BREAK,
}


class BreakHandlerRegistrar:
    """
    Routes SIGINT and SIGQUIT to a callback.

    If the callback does not cancel the event, the default action runs:
    SIGINT raises KeyboardInterrupt, SIGQUIT is re-delivered with its
    default disposition.
    """

    def __init__(self, callback: BreakCallback):
        self._callback = callback
        self._previous: dict[int, object] = {}
        self._registered = False

    @property
    def registered(self) -> bool:
        return self._registered

    def register(self) -> None:
        if self._registered:
            raise RuntimeError("Break handlers are already registered")
        for signum in _SIGNAL_KEYS:
            self._previous[signum] = signal.signal(signum, self._handle)
        self._registered = True

    def unregister(self) -> None:
        if not self._registered:
            raise RuntimeError("Break handlers are not registered")
        self._registered = False
        for signum, previous in self._previous.items():
            signal.signal(signum, previous)
        self._previous.clear()

    def _handle(self, signum: int, frame: Optional[object]) -> None:
        key = _SIGNAL_KEYS[signum]
        if self._callback(key):
            logger.debug("Break event %s cancelled", key.name)
            return

        if signum == signal.SIGINT:
            signal.default_int_handler(signum, frame)
        else:
            signal.signal(signum, signal.SIG_DFL)
            os.kill(os.getpid(), signum)
