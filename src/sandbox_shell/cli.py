"""CLI commands using Typer."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Annotated

if TYPE_CHECKING:
    from sandbox_shell.context import AppContext

import typer
from rich.console import Console

from sandbox_shell import __version__
from sandbox_shell.config import ConfigError, save_config
from sandbox_shell.console import ShellConsole
from sandbox_shell.context import create_context
from sandbox_shell.store import SessionStoreError

app = typer.Typer(
    name="sandbox-shell",
    help="Practice shell commands in a simulated filesystem",
    no_args_is_help=True,
)

session_app = typer.Typer(help="Manage the saved session")
config_app = typer.Typer(help="Configuration commands")

app.add_typer(session_app, name="session")
app.add_typer(config_app, name="config")

console = Console()
shell_console = ShellConsole(console)

# Words that end the interactive loop without reaching the interpreter
EXIT_WORDS = frozenset({"exit", "quit", "logout"})


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        console.print(f"sandbox-shell v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit",
        ),
    ] = False,
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Enable debug logging")
    ] = False,
) -> None:
    """Practice shell commands in a simulated filesystem."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG)


def _load_context(_context: AppContext | None) -> AppContext:
    """Return the injected context or build the default one."""
    if _context is not None:
        return _context
    try:
        return create_context()
    except ConfigError as e:
        shell_console.show_error(str(e))
        raise typer.Exit(1) from e


# ============================================================================
# Shell Commands
# ============================================================================


@app.command()
def repl(
    fresh: Annotated[
        bool, typer.Option("--fresh", help="Start from a new filesystem")
    ] = False,
    save: Annotated[
        bool, typer.Option("--save/--no-save", help="Save the session after each command")
    ] = True,
    _context=None,
) -> None:
    """Start an interactive shell session."""
    ctx = _load_context(_context)
    shell = ctx.open_shell(fresh=fresh)
    shell_console.show_welcome()

    while True:
        try:
            line = shell_console.read_line(shell_console.prompt(shell.fs, ctx.config))
        except (EOFError, KeyboardInterrupt):
            console.print()
            break

        if line.strip() in EXIT_WORDS:
            break

        shell_console.show_result(shell.execute(line))
        if save:
            try:
                ctx.store.save(shell.fs)
            except SessionStoreError as e:
                shell_console.show_error(str(e))


@app.command()
def run(
    lines: Annotated[list[str], typer.Argument(help="Command lines to execute in order")],
    fresh: Annotated[
        bool, typer.Option("--fresh", help="Start from a new filesystem")
    ] = False,
    save: Annotated[
        bool, typer.Option("--save/--no-save", help="Save the session afterwards")
    ] = True,
    _context=None,
) -> None:
    """Execute command lines against the saved session."""
    ctx = _load_context(_context)
    shell = ctx.open_shell(fresh=fresh)

    failed = False
    for line in lines:
        result = shell.execute(line)
        shell_console.show_result(result)
        failed = failed or not result.success

    if save:
        try:
            ctx.store.save(shell.fs)
        except SessionStoreError as e:
            shell_console.show_error(str(e))
            raise typer.Exit(1) from e
    if failed:
        raise typer.Exit(1)


# ============================================================================
# Session Commands
# ============================================================================


@session_app.command("show")
def session_show(
    _context=None,
) -> None:
    """Show a summary of the saved session."""
    ctx = _load_context(_context)
    if not ctx.store.exists():
        shell_console.show_info("No saved session")
        return
    shell_console.show_session(ctx.store.load(), str(ctx.store.session_file))


@session_app.command("export")
def session_export(
    _context=None,
) -> None:
    """Print the saved session's durable form."""
    ctx = _load_context(_context)
    console.print_json(ctx.store.load().to_durable_form())


@session_app.command("reset")
def session_reset(
    _context=None,
) -> None:
    """Delete the saved session."""
    ctx = _load_context(_context)
    if ctx.store.reset():
        shell_console.show_success("Session reset")
    else:
        shell_console.show_info("No saved session")


# ============================================================================
# Config Commands
# ============================================================================


@config_app.command("show")
def config_show(
    _context=None,
) -> None:
    """Show current configuration."""
    ctx = _load_context(_context)
    shell_console.show_config(ctx.config, str(ctx.config_path))


@config_app.command("set")
def config_set(
    key: Annotated[str, typer.Argument(help="Configuration key (user, hostname, state-dir)")],
    value: Annotated[str, typer.Argument(help="Configuration value")],
    _context=None,
) -> None:
    """Set a configuration value."""
    ctx = _load_context(_context)

    if key == "user":
        ctx.config.user = value
    elif key == "hostname":
        ctx.config.hostname = value
    elif key == "state-dir":
        ctx.config.state_dir = Path(value).expanduser()
    else:
        shell_console.show_error(f"Unknown configuration key: {key}")
        raise typer.Exit(1)

    save_config(ctx.config, ctx.config_path)
    shell_console.show_success(f"Set {key} to {value}")


if __name__ == "__main__":
    app()
