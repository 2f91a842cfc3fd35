"""Simulated filesystem and POSIX-like shell for safe practice."""

__version__ = "0.1.0"

from sandbox_shell.filesystem import VirtualFileSystem
from sandbox_shell.interpreter import Command, Shell
from sandbox_shell.protocols import CommandRunner, FileSystemQueries, SessionStorage
from sandbox_shell.types import CommandResult, ScreenAction

__all__ = [
    "__version__",
    "Command",
    "CommandResult",
    "CommandRunner",
    "FileSystemQueries",
    "ScreenAction",
    "SessionStorage",
    "Shell",
    "VirtualFileSystem",
]
