"""Protocol definitions for the shell's outward-facing surfaces.

Collaborators outside the core (exercise graders, renderers, session
persistence) depend on these structural interfaces rather than on the
concrete classes, so test doubles can be injected without inheritance.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from sandbox_shell.filesystem import VirtualFileSystem
    from sandbox_shell.types import CommandResult


@runtime_checkable
class FileSystemQueries(Protocol):
    """Side-effect-free queries used to grade exercises."""

    def exists(self, path: str) -> bool:
        """Check if a path resolves to any node."""
        ...

    def read(self, path: str) -> str | None:
        """Return a file's content, or None."""
        ...

    def list_children(self, path: str) -> list[str]:
        """Return sorted child names of a directory."""
        ...

    def file_contains(self, path: str, text: str) -> bool:
        """Check whether a file contains the given text."""
        ...


@runtime_checkable
class CommandRunner(Protocol):
    """Executes one line of input at a time."""

    def execute(self, line: str) -> CommandResult:
        """Run one line and return its result."""
        ...


@runtime_checkable
class SessionStorage(Protocol):
    """Persists and restores a session's durable form."""

    session_file: Path

    def load(self) -> VirtualFileSystem:
        """Load the saved session, or a fresh one."""
        ...

    def save(self, fs: VirtualFileSystem) -> None:
        """Save a session, raising SessionStoreError on failure."""
        ...

    def reset(self) -> bool:
        """Delete the saved session."""
        ...

    def exists(self) -> bool:
        """Check if a saved session exists."""
        ...
