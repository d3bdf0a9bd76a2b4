"""Tests for break-signal registration."""

import signal

import pytest

from termpal.core.keys import ConsoleSpecialKey
from termpal.io.signals import BreakHandlerRegistrar


@pytest.fixture
def events() -> list[ConsoleSpecialKey]:
    return []


class TestBreakHandlerRegistrar:

    def test_register_and_unregister(self, events: list) -> None:
        before = signal.getsignal(signal.SIGINT)
        registrar = BreakHandlerRegistrar(lambda key: events.append(key) or True)

        registrar.register()
        try:
            assert registrar.registered
            assert signal.getsignal(signal.SIGINT) != before
        finally:
            registrar.unregister()

        assert not registrar.registered
        assert signal.getsignal(signal.SIGINT) == before

    def test_register_twice(self) -> None:
        registrar = BreakHandlerRegistrar(lambda key: True)
        registrar.register()
        try:
            with pytest.raises(RuntimeError):
                registrar.register()
        finally:
            registrar.unregister()

    def test_unregister_without_register(self) -> None:
        with pytest.raises(RuntimeError):
            BreakHandlerRegistrar(lambda key: True).unregister()

    def test_cancelled_control_c(self, events: list) -> None:
        registrar = BreakHandlerRegistrar(lambda key: events.append(key) or True)
        registrar.register()
        try:
            signal.raise_signal(signal.SIGINT)
        finally:
            registrar.unregister()
        assert events == [ConsoleSpecialKey.CONTROL_C]

    def test_cancelled_control_break(self, events: list) -> None:
        registrar = BreakHandlerRegistrar(lambda key: events.append(key) or True)
        registrar.register()
        try:
            signal.raise_signal(signal.SIGQUIT)
        finally:
            registrar.unregister()
        assert events == [ConsoleSpecialKey.CONTROL_BREAK]

    def test_uncancelled_control_c_interrupts(self, events: list) -> None:
        registrar = BreakHandlerRegistrar(lambda key: events.append(key) or False)
        registrar.register()
        try:
            with pytest.raises(KeyboardInterrupt):
                signal.raise_signal(signal.SIGINT)
        finally:
            registrar.unregister()
        assert events == [ConsoleSpecialKey.CONTROL_C]
