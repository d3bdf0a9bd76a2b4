"""Tests for capability resolution and the key table."""

import threading

import pytest

from conftest import FakeDatabase
from termpal.core.constants import TITLE_FORMATS
from termpal.core.keys import ConsoleKey
from termpal.terminfo.capabilities import (
    CapabilityRegistry,
    CapabilitySet,
    KeyTable,
    build_key_table,
    normalize_max_colors,
    resolve_capabilities,
    title_format,
)


class TestResolveCapabilities:
    """Tests for reading a CapabilitySet from a database."""

    def test_no_database_is_empty(self) -> None:
        caps = resolve_capabilities(None)
        assert caps == CapabilitySet()
        assert caps.term is None
        assert caps.foreground == ""
        assert caps.max_colors == 0
        assert len(caps.key_table) == 0

    def test_xterm_strings(self) -> None:
        caps = resolve_capabilities(FakeDatabase())
        assert caps.term == "xterm-256color"
        assert caps.foreground == "\x1b[3%p1%dm"
        assert caps.background == "\x1b[4%p1%dm"
        assert caps.reset_colors == "\x1b[39;49m"
        assert caps.cursor_invisible == "\x1b[?25l"
        assert caps.keypad_xmit == "\x1b[?1h\x1b="
        assert caps.columns == 80
        assert caps.lines == 24

    def test_reset_falls_back_to_original_colors(self) -> None:
        db = FakeDatabase()
        del db.strings["op"]
        db.strings["oc"] = "\x1b]104\x07"
        assert resolve_capabilities(db).reset_colors == "\x1b]104\x07"

    def test_missing_reset(self) -> None:
        db = FakeDatabase()
        del db.strings["op"]
        assert resolve_capabilities(db).reset_colors == ""

    def test_absent_numbers_clamp_to_zero(self) -> None:
        caps = resolve_capabilities(FakeDatabase(numbers={}))
        assert caps.max_colors == 0
        assert caps.columns == 0
        assert caps.lines == 0

    def test_known_position_request(self) -> None:
        caps = resolve_capabilities(FakeDatabase())
        assert caps.cursor_position_request == "\x1b[6n"

    def test_unknown_position_request_is_dropped(self) -> None:
        db = FakeDatabase()
        db.strings["u7"] = "\x1b[?6n"
        assert resolve_capabilities(db).cursor_position_request == ""

    def test_scalars_lists_strings_and_numbers(self) -> None:
        scalars = resolve_capabilities(FakeDatabase()).scalars()
        assert scalars["max_colors"] == 16
        assert scalars["bell"] == "\x07"
        assert "key_table" not in scalars


class TestNormalizeMaxColors:

    @pytest.mark.parametrize("count,expected", [
        (256, 16), (16, 16), (15, 8), (8, 8), (7, 0), (2, 0), (-1, 0),
    ])
    def test_fold(self, count: int, expected: int) -> None:
        assert normalize_max_colors(count) == expected


class TestTitleFormat:
    """Tests for the title template lookup."""

    def test_status_line_capabilities_win(self) -> None:
        db = FakeDatabase(strings={"tsl": "\x1b]2;", "fsl": "\x07"})
        assert title_format(db) == "\x1b]2;%p1%s\x07"

    def test_only_one_status_capability_uses_table(self) -> None:
        db = FakeDatabase(term="konsole", strings={"tsl": "\x1b]2;"})
        assert title_format(db) == TITLE_FORMATS["konsole"]

    def test_xterm_variants_normalize(self) -> None:
        db = FakeDatabase(term="xterm-256color", strings={})
        assert title_format(db) == "\x1b]0;%p1%s\x07"

    def test_screen(self) -> None:
        db = FakeDatabase(term="screen", strings={})
        assert title_format(db) == "\x1bk%p1%s\x1b"

    def test_unknown_terminal(self) -> None:
        db = FakeDatabase(term="vt100", strings={})
        assert title_format(db) == ""

    def test_no_term(self) -> None:
        db = FakeDatabase(term=None, strings={})
        assert title_format(db) == ""


class TestBuildKeyTable:
    """Tests for key table construction."""

    def test_standard_keys(self) -> None:
        table = build_key_table(FakeDatabase())
        left = table.get("\x1bOD")
        assert left is not None
        assert left.key is ConsoleKey.LEFT_ARROW
        assert left.modifiers == ""
        assert table.get("\x1bOP").key is ConsoleKey.F1
        assert table.get("\x1b[15~").key is ConsoleKey.F5
        assert table.get("\x7f").key is ConsoleKey.BACKSPACE

    def test_shifted_standard_name(self) -> None:
        binding = build_key_table(FakeDatabase()).get("\x1b[1;2D")
        assert binding.key is ConsoleKey.LEFT_ARROW
        assert binding.shift is True
        assert binding.alt is False

    def test_modifier_suffixes(self) -> None:
        table = build_key_table(FakeDatabase())
        control_left = table.get("\x1b[1;5D")
        assert control_left.key is ConsoleKey.LEFT_ARROW
        assert (control_left.shift, control_left.alt, control_left.control) == (False, False, True)

        alt_right = table.get("\x1b[1;3C")
        assert alt_right.key is ConsoleKey.RIGHT_ARROW
        assert alt_right.modifiers == "alt"

        alt_control_up = table.get("\x1b[1;7A")
        assert alt_control_up.key is ConsoleKey.UP_ARROW
        assert alt_control_up.modifiers == "alt+control"

    def test_lengths_and_prefixes(self) -> None:
        table = build_key_table(FakeDatabase())
        assert table.min_length == 1
        assert table.max_length == 6
        assert table.is_prefix("\x1b")
        assert table.is_prefix("\x1b[1;")
        assert not table.is_prefix("\x1bOD")
        assert not table.is_prefix("x")

    def test_last_binding_wins(self) -> None:
        db = FakeDatabase(strings={"khome": "\x1b[H", "kHOM": "\x1b[H"})
        binding = build_key_table(db).get("\x1b[H")
        assert binding.key is ConsoleKey.HOME
        assert binding.shift is True

    def test_empty_database(self) -> None:
        table = build_key_table(FakeDatabase(strings={}))
        assert len(table) == 0
        assert not table
        assert table.min_length == 0
        assert table.max_length == 0
        assert list(table) == []

    def test_empty_strings_are_skipped(self) -> None:
        table = build_key_table(FakeDatabase(strings={"kf1": ""}))
        assert "" not in table
        assert len(table) == 0


class TestKeyTable:

    def test_default_is_empty(self) -> None:
        table = KeyTable()
        assert len(table) == 0
        assert table.get("\x1b") is None
        assert not table.is_prefix("\x1b")


class TestCapabilityRegistry:
    """Tests for one-time resolution."""

    def test_loader_called_once(self) -> None:
        calls = []

        def loader():
            calls.append(1)
            return FakeDatabase()

        registry = CapabilityRegistry(loader)
        assert registry.resolved is False
        first = registry.resolve()
        second = registry.resolve()
        assert first is second
        assert registry.resolved is True
        assert len(calls) == 1

    def test_missing_database(self) -> None:
        registry = CapabilityRegistry(lambda: None)
        assert registry.resolve() == CapabilitySet()

    def test_concurrent_first_resolution(self) -> None:
        calls = []
        gate = threading.Barrier(4)

        def loader():
            calls.append(1)
            return FakeDatabase()

        registry = CapabilityRegistry(loader)
        results = []

        def worker():
            gate.wait()
            results.append(registry.resolve())

        threads = [threading.Thread(target=worker) for _ in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(calls) == 1
        assert all(r is results[0] for r in results)
