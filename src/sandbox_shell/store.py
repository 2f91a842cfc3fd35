"""Session persistence for the durable form."""

from __future__ import annotations

import logging
from pathlib import Path

from sandbox_shell.config import STATE_DIR
from sandbox_shell.filesystem import Clock, VirtualFileSystem

logger = logging.getLogger(__name__)

SESSION_FILENAME = "session.json"


class SessionStoreError(Exception):
    """Error while writing the session file."""

    pass


class SessionStore:
    """Keeps one session's durable form in a JSON file."""

    def __init__(self, state_dir: Path | None = None, clock: Clock | None = None) -> None:
        """Initialize the session store.

        Args:
            state_dir: Directory for the session file. Defaults to ~/.sandbox-shell.
            clock: Clock handed to every filesystem this store loads.

        Note:
            Prefer using factory methods `create()` or `create_default()` for construction.
        """
        self.state_dir = state_dir or STATE_DIR
        self.session_file = self.state_dir / SESSION_FILENAME
        self.clock = clock

    @classmethod
    def create(cls, state_dir: Path, clock: Clock | None = None) -> SessionStore:
        """Create a session store with a custom directory.

        Args:
            state_dir: Directory for the session file.
            clock: Optional clock for loaded filesystems.

        Returns:
            Configured SessionStore instance.
        """
        return cls(state_dir=state_dir, clock=clock)

    @classmethod
    def create_default(cls) -> SessionStore:
        """Create a session store in ~/.sandbox-shell."""
        return cls()

    def ensure_state_dir(self) -> None:
        """Create state directory if it doesn't exist."""
        self.state_dir.mkdir(parents=True, exist_ok=True)

    def exists(self) -> bool:
        """Check if a saved session exists."""
        return self.session_file.exists()

    def load(self) -> VirtualFileSystem:
        """Load the saved session.

        Returns:
            Restored filesystem, or a fresh one if nothing usable is saved.
        """
        if not self.session_file.exists():
            logger.debug("No saved session at %s", self.session_file)
            return VirtualFileSystem(clock=self.clock)

        try:
            text = self.session_file.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Could not read %s: %s", self.session_file, e)
            return VirtualFileSystem(clock=self.clock)
        return VirtualFileSystem.from_durable_form(text, clock=self.clock)

    def save(self, fs: VirtualFileSystem) -> None:
        """Save a session.

        Args:
            fs: Filesystem whose durable form is written.

        Raises:
            SessionStoreError: If the state cannot be serialized or written.
        """
        try:
            text = fs.to_durable_form()
            self.ensure_state_dir()
            self.session_file.write_text(text, encoding="utf-8")
        except (OSError, ValueError) as e:
            raise SessionStoreError(f"Could not save session to {self.session_file}: {e}") from e

    def reset(self) -> bool:
        """Delete the saved session.

        Returns:
            True if a session file was removed, False if none existed.
        """
        if not self.session_file.exists():
            return False
        self.session_file.unlink()
        return True
