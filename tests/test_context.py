"""Tests for context module."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock

import pytest

from sandbox_shell.config import ConfigError, ShellConfig
from sandbox_shell.context import AppContext, create_context
from sandbox_shell.filesystem import VirtualFileSystem
from sandbox_shell.store import SessionStore


class TestAppContext:
    """Tests for AppContext dataclass."""

    def test_create_with_all_dependencies(self, tmp_path: Path) -> None:
        """Test creating context with all dependencies."""
        config = ShellConfig()
        store = MagicMock()
        ctx = AppContext(config=config, store=store, config_path=tmp_path / "config.yaml")
        assert ctx.config is config
        assert ctx.store is store

    def test_open_shell_loads_saved_session(self, tmp_path: Path) -> None:
        """Test open_shell uses the stored filesystem."""
        fs = VirtualFileSystem.create_default()
        store = MagicMock()
        store.load.return_value = fs
        ctx = AppContext(config=ShellConfig(user="ada"), store=store, config_path=tmp_path)

        shell = ctx.open_shell()

        assert shell.fs is fs
        assert shell.user == "ada"
        store.load.assert_called_once_with()

    def test_open_shell_fresh_skips_store(self, tmp_path: Path) -> None:
        """Test fresh sessions ignore the store."""
        store = MagicMock()
        ctx = AppContext(config=ShellConfig(), store=store, config_path=tmp_path)

        shell = ctx.open_shell(fresh=True)

        assert shell.fs.cwd_path == "/home/user"
        store.load.assert_not_called()


class TestCreateContext:
    """Tests for create_context factory function."""

    def test_create_context_with_overrides(self, temp_state_dir: Path, tmp_path: Path) -> None:
        """Test creating context with explicit locations."""
        config_path = tmp_path / "config.yaml"
        ctx = create_context(state_dir=temp_state_dir, config_path=config_path)

        assert isinstance(ctx.store, SessionStore)
        assert ctx.store.session_file.parent == temp_state_dir
        assert ctx.config == ShellConfig()
        assert ctx.config_path == config_path

    def test_state_dir_from_config(self, tmp_path: Path) -> None:
        """Test the configured state directory is used when not overridden."""
        config_path = tmp_path / "config.yaml"
        config_path.write_text(f"state_dir: {tmp_path / 'sessions'}\nuser: ada\n")

        ctx = create_context(config_path=config_path)

        assert ctx.store.session_file.parent == tmp_path / "sessions"
        assert ctx.config.user == "ada"

    def test_invalid_config_raises(self, tmp_path: Path) -> None:
        """Test a broken config file surfaces as ConfigError."""
        config_path = tmp_path / "config.yaml"
        config_path.write_text("user: [\n")

        with pytest.raises(ConfigError):
            create_context(config_path=config_path)
