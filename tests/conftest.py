"""Shared test fixtures."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from sandbox_shell.filesystem import VirtualFileSystem
from sandbox_shell.interpreter import Shell

START = datetime(2026, 10, 19, 14, 5, 0, tzinfo=timezone.utc)


class FakeClock:
    """Deterministic clock that only moves when told to."""

    def __init__(self, start: datetime = START) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: int = 60) -> datetime:
        self.now = self.now + timedelta(seconds=seconds)
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    """Create a clock frozen at a known instant."""
    return FakeClock()


@pytest.fixture
def fs(clock: FakeClock) -> VirtualFileSystem:
    """Create a seeded filesystem driven by the fake clock."""
    return VirtualFileSystem.create(clock)


@pytest.fixture
def shell(fs: VirtualFileSystem) -> Shell:
    """Create a shell over the seeded filesystem."""
    return Shell.create(fs)


@pytest.fixture
def temp_state_dir(tmp_path: Path) -> Path:
    """Create a temporary state directory."""
    state_dir = tmp_path / ".sandbox-shell"
    state_dir.mkdir(parents=True)
    return state_dir


@pytest.fixture
def run(shell: Shell):
    """Execute several lines and return the last result."""

    def _run(*lines: str):
        result = None
        for line in lines:
            result = shell.execute(line)
        return result

    return _run
