"""Application context for dependency injection.

This module separates object creation from object use, so CLI commands
can be tested with an injected context instead of touching the user's
home directory.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from sandbox_shell.config import ShellConfig, default_config_path, load_config
from sandbox_shell.filesystem import VirtualFileSystem
from sandbox_shell.interpreter import Shell
from sandbox_shell.protocols import SessionStorage


@dataclass
class AppContext:
    """Container for application dependencies.

    The store is typed by the SessionStorage protocol so test doubles can be
    injected without inheritance.
    """

    config: ShellConfig
    store: SessionStorage
    config_path: Path

    def open_shell(self, fresh: bool = False) -> Shell:
        """Create a shell over the saved session.

        Args:
            fresh: Ignore the saved session and start from the seed tree.

        Returns:
            Shell owning the loaded (or fresh) filesystem.
        """
        fs = VirtualFileSystem.create_default() if fresh else self.store.load()
        return Shell.create(fs, user=self.config.user)


def create_context(
    state_dir: Path | None = None,
    config_path: Path | None = None,
) -> AppContext:
    """Factory for application dependencies.

    Args:
        state_dir: Override the session directory (for testing).
        config_path: Override the config file location (for testing).

    Returns:
        Configured AppContext.

    Raises:
        ConfigError: If the config file exists but is invalid.
    """
    from sandbox_shell.store import SessionStore

    config_path = config_path or default_config_path()
    config = load_config(config_path)
    store = SessionStore.create(state_dir or config.resolved_state_dir())
    return AppContext(config=config, store=store, config_path=config_path)
