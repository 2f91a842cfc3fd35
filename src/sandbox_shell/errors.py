"""Error taxonomy for the sandbox shell.

Every error here is recoverable. The filesystem raises FileSystemError
subclasses, argument handling raises CommandError subclasses, and the
interpreter converts both into failed CommandResults.
"""

from __future__ import annotations

from enum import Enum

__all__ = [
    "AlreadyExists",
    "CommandError",
    "ErrorKind",
    "FileSystemError",
    "InvalidTarget",
    "IsADirectory",
    "MissingOperand",
    "NotADirectory",
    "NotFoundError",
    "PathTooDeep",
    "ShellError",
    "UnknownCommand",
]


class ErrorKind(str, Enum):
    """Machine-readable category attached to a failed result."""

    NOT_FOUND = "not_found"
    NOT_A_DIRECTORY = "not_a_directory"
    IS_A_DIRECTORY = "is_a_directory"
    ALREADY_EXISTS = "already_exists"
    MISSING_OPERAND = "missing_operand"
    UNKNOWN_COMMAND = "unknown_command"
    INVALID_TARGET = "invalid_target"
    INTERNAL = "internal"


class ShellError(Exception):
    """Base class for all sandbox shell errors.

    Args:
        path: The path (or command name) the error refers to.
        strerror: Optional override for the class-level description.
    """

    kind: ErrorKind = ErrorKind.INVALID_TARGET
    strerror: str = "Invalid argument"

    def __init__(self, path: str = "", strerror: str | None = None) -> None:
        self.path = path
        if strerror is not None:
            self.strerror = strerror
        super().__init__(f"{path}: {self.strerror}" if path else self.strerror)


class FileSystemError(ShellError):
    """Error raised by the virtual filesystem."""

    pass


class NotFoundError(FileSystemError):
    """Path does not resolve to any node."""

    kind = ErrorKind.NOT_FOUND
    strerror = "No such file or directory"


class NotADirectory(FileSystemError):
    """Expected a directory, found a file."""

    kind = ErrorKind.NOT_A_DIRECTORY
    strerror = "Not a directory"


class IsADirectory(FileSystemError):
    """Expected a file, found a directory."""

    kind = ErrorKind.IS_A_DIRECTORY
    strerror = "Is a directory"


class AlreadyExists(FileSystemError):
    """Name collision on create."""

    kind = ErrorKind.ALREADY_EXISTS
    strerror = "File exists"


class InvalidTarget(FileSystemError):
    """Operation would remove the root or move a directory into itself."""

    kind = ErrorKind.INVALID_TARGET
    strerror = "Invalid argument"


class PathTooDeep(InvalidTarget):
    """Operation would nest a node deeper than models.MAX_DEPTH."""

    strerror = "File name too long"


class CommandError(ShellError):
    """Error raised while interpreting command arguments."""

    pass


class MissingOperand(CommandError):
    """Command invoked without its required arguments."""

    kind = ErrorKind.MISSING_OPERAND
    strerror = "missing operand"


class UnknownCommand(CommandError):
    """No handler matches the parsed command name."""

    kind = ErrorKind.UNKNOWN_COMMAND
    strerror = "command not found"
