"""Shared data types for the sandbox shell."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from sandbox_shell.errors import ErrorKind

__all__ = ["CommandResult", "ScreenAction"]


class ScreenAction(str, Enum):
    """What the rendering surface should do with a result."""

    PRINT = "print"
    CLEAR = "clear"


@dataclass
class CommandResult:
    """Result of executing one line of input.

    Attributes:
        output: Text to write verbatim to the display (possibly empty).
        success: True if the command succeeded.
        hint: Advisory guidance shown distinctly from output.
        action: PRINT to show output, CLEAR to clear the screen.
        error: Error category on failure (None on success).
    """

    output: str = ""
    success: bool = True
    hint: str | None = None
    action: ScreenAction = ScreenAction.PRINT
    error: ErrorKind | None = None

    def __post_init__(self) -> None:
        """Validate invariants."""
        if self.success and self.error is not None:
            raise ValueError("success=True but error is set")
        if not self.success and self.error is None:
            raise ValueError("success=False requires an error kind")
        if self.action is ScreenAction.CLEAR and self.output:
            raise ValueError("CLEAR results carry no output")

    @classmethod
    def ok(cls, output: str = "") -> CommandResult:
        """Create a successful printing result."""
        return cls(output=output)

    @classmethod
    def fail(cls, output: str, error: ErrorKind, hint: str | None = None) -> CommandResult:
        """Create a failed result."""
        return cls(output=output, success=False, hint=hint, error=error)

    @classmethod
    def clear_screen(cls) -> CommandResult:
        """Create a result asking the surface to clear the screen."""
        return cls(action=ScreenAction.CLEAR)
