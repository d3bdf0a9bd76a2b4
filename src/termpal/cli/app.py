"""Typer CLI application for inspecting and exercising the console layer."""

from __future__ import annotations

import logging
from typing import Annotated, Optional

import typer
from rich.console import Console as RichConsole
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from termpal.config import ConsoleConfig
from termpal.console.console import Console
from termpal.core.color import ConsoleColor
from termpal.core.errors import TermpalError
from termpal.core.keys import ConsoleKey


def configure_logging(level: str) -> None:
    """Route termpal's log records through rich."""
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
        force=True,
    )


def create_app() -> typer.Typer:
    """Create and configure the CLI application."""
    app = typer.Typer(
        name="termpal",
        help="Inspect and drive the terminal through its terminfo capabilities.",
        no_args_is_help=True,
        rich_markup_mode="rich",
    )
    out = RichConsole()
    state: dict[str, ConsoleConfig] = {}

    def open_console() -> Console:
        return Console(state["config"])

    @app.callback()
    def main(
        term: Annotated[Optional[str], typer.Option("--term", "-t", help="Terminal type (default: $TERM)")] = None,
        log_level: Annotated[Optional[str], typer.Option("--log-level", "-l", help="Log level name")] = None,
    ) -> None:
        config = ConsoleConfig.from_env()
        if term:
            config.with_term(term)
        if log_level:
            config.with_log_level(log_level)
        configure_logging(config.log_level)
        state["config"] = config

    @app.command()
    def caps() -> None:
        """Show the capabilities resolved for the terminal."""
        console = open_console()
        caps = console.capabilities

        if caps.term is None:
            out.print("[yellow]No terminfo entry loaded; every capability is empty[/]")

        table = Table(title=f"Capabilities: {caps.term or '(none)'}")
        table.add_column("Capability", style="bold cyan")
        table.add_column("Value")
        for name, value in caps.scalars().items():
            if isinstance(value, str):
                shown = escape(repr(value)) if value else "[dim](absent)[/]"
            else:
                shown = str(value)
            table.add_row(name, shown)
        table.add_row("key sequences", str(len(caps.key_table)))
        out.print(table)

    @app.command()
    def keys() -> None:
        """List the key sequences the terminal sends."""
        console = open_console()
        key_table = console.capabilities.key_table

        if not key_table:
            out.print("[yellow]The key table is empty[/]")
            raise typer.Exit(1)

        table = Table(title=f"Key table ({key_table.min_length}-{key_table.max_length} chars)")
        table.add_column("Sequence", style="bold")
        table.add_column("Key", style="cyan")
        table.add_column("Modifiers")
        for binding in sorted(key_table, key=lambda b: (b.key.value, b.modifiers, b.sequence)):
            table.add_row(escape(repr(binding.sequence)), binding.key.name, binding.modifiers or "[dim]-[/]")
        out.print(table)

    @app.command()
    def info() -> None:
        """Show terminal type, redirection and window size."""
        console = open_console()
        caps = console.capabilities
        out.print(f"[bold]Terminal:[/]  {caps.term or '(none)'}")
        out.print(f"[bold]Colors:[/]    {caps.max_colors}")
        out.print(f"[bold]Window:[/]    {console.window_width}x{console.window_height}")
        out.print(f"[bold]Redirected:[/] stdin={console.is_input_redirected} "
                  f"stdout={console.is_output_redirected} stderr={console.is_error_redirected}")

    @app.command()
    def colors() -> None:
        """Draw every foreground/background color combination."""
        console = open_console()
        console.initialize()
        try:
            for bg in ConsoleColor:
                for fg in ConsoleColor:
                    console.background_color = bg
                    console.foreground_color = fg
                    console.write(f" {fg.value:>2} ")
                console.reset_color()
                console.write(f"  {bg.name}\n")
        finally:
            console.reset_color()

    @app.command()
    def cursor() -> None:
        """Print the zero-based cursor position."""
        console = open_console()
        if console.is_input_redirected or console.is_output_redirected:
            out.print("[yellow]Cursor position needs an interactive terminal[/]")
            raise typer.Exit(1)
        row, col = console.get_cursor_position()
        out.print(f"row={row} col={col}")

    @app.command("read-keys")
    def read_keys(
        count: Annotated[int, typer.Option("--count", "-n", help="Stop after this many keys (0 = until 'q')")] = 0,
    ) -> None:
        """Read keys and show how each one was decoded. Press q to quit."""
        console = open_console()
        try:
            seen = 0
            while True:
                key = console.read_key(intercept=True)
                shown = key.char if key.is_char else repr(key.char)
                out.print(escape(f"{key.key.name:<12} {key.modifiers or '-':<14} {shown}"))
                seen += 1
                if (count and seen >= count) or (not count and key.key is ConsoleKey.Q and not key.shift):
                    break
        except TermpalError as e:
            out.print(f"[red]{e}[/]")
            raise typer.Exit(1)
        except EOFError:
            pass

    return app
