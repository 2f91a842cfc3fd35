"""Rich rendering for the terminal surface."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from sandbox_shell.types import ScreenAction

if TYPE_CHECKING:
    from sandbox_shell.config import ShellConfig
    from sandbox_shell.filesystem import VirtualFileSystem
    from sandbox_shell.types import CommandResult


class ShellConsole:
    """Renders command results and session information."""

    def __init__(self, console: Console | None = None) -> None:
        """Initialize the console.

        Args:
            console: Rich console to write to. Defaults to stdout.
        """
        self.console = console or Console()

    def show_welcome(self) -> None:
        """Display welcome banner."""
        self.console.print(
            Panel(
                "Welcome to the [bold cyan]sandbox terminal[/bold cyan]!\n"
                "Type [yellow]help[/yellow] to see available commands, "
                "[yellow]exit[/yellow] to leave.",
                border_style="cyan",
            )
        )

    def prompt(self, fs: VirtualFileSystem, config: ShellConfig) -> str:
        """Build the prompt markup, e.g. user@training:~/documents$."""
        identity = escape(f"{config.user}@{config.hostname}")
        return f"[green]{identity}[/green]:[blue]{escape(fs.display_path)}[/blue]$ "

    def read_line(self, prompt: str) -> str:
        """Read one line of input."""
        return self.console.input(prompt)

    def show_result(self, result: CommandResult) -> None:
        """Render a command result.

        Args:
            result: Result returned by the interpreter.
        """
        if result.action is ScreenAction.CLEAR:
            self.console.clear()
            return

        if result.output:
            style = None if result.success else "red"
            self.console.print(escape(result.output), style=style, highlight=False)
        if result.hint:
            self.console.print(f"[yellow]Hint: {escape(result.hint)}[/yellow]")

    def show_session(self, fs: VirtualFileSystem, location: str) -> None:
        """Display a summary of a saved session.

        Args:
            fs: Loaded filesystem.
            location: Where the session is stored.
        """
        table = Table(title="Saved Session")
        table.add_column("Field", style="cyan")
        table.add_column("Value")
        table.add_row("File", location)
        table.add_row("Directory", fs.cwd_path)
        table.add_row("Home entries", ", ".join(fs.list_children("~")) or "(empty)")
        table.add_row("Commands run", str(len(fs.history)))
        self.console.print(table)

    def show_config(self, config: ShellConfig, location: str) -> None:
        """Display the active configuration."""
        self.console.print("\n[bold]Configuration[/bold]")
        self.console.print(f"  Config file: {escape(location)}")
        self.console.print(f"  User: {escape(config.user)}")
        self.console.print(f"  Hostname: {escape(config.hostname)}")
        self.console.print(f"  State directory: {escape(str(config.resolved_state_dir()))}")

    def show_success(self, message: str) -> None:
        """Show success message."""
        self.console.print(f"[green]✓[/green] {message}")

    def show_error(self, message: str) -> None:
        """Show error message."""
        self.console.print(f"[red]✗[/red] {message}")

    def show_info(self, message: str) -> None:
        """Show info message."""
        self.console.print(f"[blue]i[/blue] {message}")
