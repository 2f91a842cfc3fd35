"""Command interpreter for the sandbox shell.

Shell.execute() takes one raw line, records it in history, dispatches it
to a handler and returns a CommandResult. Handlers convert filesystem
errors into failed results where they occur; nothing raises past
execute().
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from enum import Enum

from sandbox_shell.errors import (
    ErrorKind,
    FileSystemError,
    IsADirectory,
    MissingOperand,
    NotADirectory,
    NotFoundError,
    UnknownCommand,
)
from sandbox_shell.filesystem import VirtualFileSystem
from sandbox_shell.formatting import (
    HELP_TEXT,
    format_date,
    format_history,
    long_entry,
    short_listing,
)
from sandbox_shell.models import Node
from sandbox_shell.parser import ASCII_WHITESPACE, parse_line, split_flags, strip_quotes
from sandbox_shell.types import CommandResult

logger = logging.getLogger(__name__)

DEFAULT_USER = "user"


class Command(str, Enum):
    """Every command the shell understands."""

    PWD = "pwd"
    LS = "ls"
    CD = "cd"
    MKDIR = "mkdir"
    TOUCH = "touch"
    RM = "rm"
    CAT = "cat"
    ECHO = "echo"
    CP = "cp"
    MV = "mv"
    CLEAR = "clear"
    HELP = "help"
    HISTORY = "history"
    WHOAMI = "whoami"
    DATE = "date"


USAGE: dict[Command, str] = {
    Command.MKDIR: "Usage: mkdir <directory_name>",
    Command.TOUCH: "Usage: touch <filename>",
    Command.RM: "Usage: rm [-r] <file_or_directory>",
    Command.CAT: "Usage: cat <filename>",
    Command.CP: "Usage: cp <source> <destination>",
    Command.MV: "Usage: mv <source> <destination>",
}

Handler = Callable[[list[str]], CommandResult]


def _failure(message: str, error: FileSystemError, hint: str | None = None) -> CommandResult:
    return CommandResult.fail(f"{message}: {error.strerror}", error.kind, hint=hint)


def _lookup(name: str) -> Command:
    try:
        return Command(name)
    except ValueError:
        raise UnknownCommand(name) from None


class Shell:
    """POSIX-like command interpreter bound to one VirtualFileSystem."""

    def __init__(self, fs: VirtualFileSystem | None = None, user: str = DEFAULT_USER) -> None:
        """Initialize the shell.

        Args:
            fs: Filesystem to operate on. Defaults to a fresh seeded one.
            user: Name reported by whoami and shown as owner in ls -l.

        Note:
            Prefer using factory method `create()` for construction.
        """
        self.fs = fs or VirtualFileSystem.create_default()
        self.user = user
        self._handlers: dict[Command, Handler] = {
            Command.PWD: self._pwd,
            Command.LS: self._ls,
            Command.CD: self._cd,
            Command.MKDIR: self._mkdir,
            Command.TOUCH: self._touch,
            Command.RM: self._rm,
            Command.CAT: self._cat,
            Command.ECHO: self._echo,
            Command.CP: self._cp,
            Command.MV: self._mv,
            Command.CLEAR: self._clear,
            Command.HELP: self._help,
            Command.HISTORY: self._history,
            Command.WHOAMI: self._whoami,
            Command.DATE: self._date,
        }

    @classmethod
    def create(cls, fs: VirtualFileSystem, user: str = DEFAULT_USER) -> Shell:
        """Create a shell over an existing filesystem.

        Args:
            fs: Filesystem the shell will own for the session.
            user: Name reported by whoami.

        Returns:
            Configured Shell.
        """
        return cls(fs=fs, user=user)

    @property
    def handlers(self) -> dict[Command, Handler]:
        """Dispatch table keyed by command."""
        return dict(self._handlers)

    def execute(self, line: str) -> CommandResult:
        """Run one line of input.

        Args:
            line: Raw input line.

        Returns:
            CommandResult describing output, success and an optional hint.
        """
        parsed = parse_line(line)
        if not parsed.command:
            return CommandResult.ok()

        self.fs.record(line.strip(ASCII_WHITESPACE))

        try:
            command = _lookup(parsed.command)
        except UnknownCommand as e:
            return CommandResult.fail(
                f"Command not found: {e.path}",
                e.kind,
                hint="Type 'help' to see available commands.",
            )

        logger.debug("Dispatching %s with %d argument(s)", command.value, len(parsed.args))
        try:
            return self._handlers[command](parsed.args)
        except MissingOperand as e:
            return CommandResult.fail(
                f"{command.value}: {e.strerror}", e.kind, hint=USAGE.get(command)
            )
        except Exception:
            logger.exception("Command failed: %s", command.value)
            return CommandResult.fail(f"{command.value}: internal error", ErrorKind.INTERNAL)

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def _pwd(self, args: list[str]) -> CommandResult:
        return CommandResult.ok(self.fs.cwd_path)

    def _ls(self, args: list[str]) -> CommandResult:
        flags, operands = split_flags(args)
        show_hidden = "a" in flags
        long_format = "l" in flags
        targets = operands or ["."]

        blocks = []
        for target in targets:
            segments = self.fs.resolve(target)
            try:
                node = self.fs.node_at(segments)
            except FileSystemError as e:
                return _failure(f"ls: cannot access '{target}'", e)

            if node.is_dir:
                nodes = [
                    child
                    for child in self.fs.entries(segments)
                    if show_hidden or not child.name.startswith(".")
                ]
            else:
                nodes = [node]

            listing = self._render(nodes, long_format)
            blocks.append(f"{target}:\n{listing}" if len(targets) > 1 else listing)

        return CommandResult.ok("\n\n".join(blocks))

    def _render(self, nodes: list[Node], long_format: bool) -> str:
        if long_format:
            return "\n".join(long_entry(node, self.user) for node in nodes)
        return short_listing(nodes)

    def _cd(self, args: list[str]) -> CommandResult:
        if not args or args[0] == "~":
            self.fs.change_directory(self.fs.home)
            return CommandResult.ok()

        target = args[0]
        try:
            self.fs.change_directory(self.fs.resolve(target))
        except NotFoundError as e:
            return CommandResult.fail(
                f"cd: no such file or directory: {target}",
                e.kind,
                hint="Use 'ls' to see what folders are available.",
            )
        except NotADirectory as e:
            return CommandResult.fail(f"cd: not a directory: {target}", e.kind)
        return CommandResult.ok()

    # ------------------------------------------------------------------
    # Creation and removal
    # ------------------------------------------------------------------

    def _mkdir(self, args: list[str]) -> CommandResult:
        flags, operands = split_flags(args)
        if not operands:
            raise MissingOperand("mkdir")

        for name in operands:
            try:
                self.fs.make_directory(self.fs.resolve(name), parents="p" in flags)
            except FileSystemError as e:
                return _failure(f"mkdir: cannot create directory '{name}'", e)
        return CommandResult.ok()

    def _touch(self, args: list[str]) -> CommandResult:
        _, operands = split_flags(args)
        if not operands:
            raise MissingOperand("touch", strerror="missing file operand")

        for name in operands:
            try:
                self.fs.make_file(self.fs.resolve(name))
            except FileSystemError as e:
                return _failure(f"touch: cannot touch '{name}'", e)
        return CommandResult.ok()

    def _rm(self, args: list[str]) -> CommandResult:
        flags, operands = split_flags(args)
        if not operands:
            raise MissingOperand("rm")
        recursive = "r" in flags or "R" in flags
        force = "f" in flags

        for target in operands:
            try:
                self.fs.remove(self.fs.resolve(target), recursive=recursive)
            except NotFoundError as e:
                if force:
                    continue
                return _failure(f"rm: cannot remove '{target}'", e)
            except IsADirectory as e:
                return _failure(
                    f"rm: cannot remove '{target}'",
                    e,
                    hint="Use 'rm -r' to remove directories.",
                )
            except FileSystemError as e:
                return _failure(f"rm: cannot remove '{target}'", e)
        return CommandResult.ok()

    # ------------------------------------------------------------------
    # Content
    # ------------------------------------------------------------------

    def _cat(self, args: list[str]) -> CommandResult:
        if not args:
            raise MissingOperand("cat", strerror="missing file operand")

        # All-or-nothing: any bad operand discards earlier output
        contents = []
        for name in args:
            try:
                node = self.fs.node_at(self.fs.resolve(name))
            except FileSystemError as e:
                return _failure(f"cat: {name}", e)
            if node.is_dir:
                return _failure(f"cat: {name}", IsADirectory(name))
            contents.append(node.content)
        return CommandResult.ok("\n".join(contents))

    def _echo(self, args: list[str]) -> CommandResult:
        words: list[str] = []
        redirects: list[tuple[str, bool]] = []

        tokens = iter(args)
        for token in tokens:
            if not token.startswith(">"):
                words.append(token)
                continue
            append = token.startswith(">>")
            target = (token[2:] if append else token[1:]) or next(tokens, None)
            if target is None or target.startswith(">"):
                if target is None:
                    unexpected = "newline"
                else:
                    unexpected = ">>" if target.startswith(">>") else ">"
                return CommandResult.fail(
                    f"echo: syntax error near unexpected token `{unexpected}'",
                    ErrorKind.MISSING_OPERAND,
                    hint="Usage: echo <text> > <file>",
                )
            redirects.append((target, append))

        text = strip_quotes(" ".join(words))
        if not redirects:
            return CommandResult.ok(text)

        # Every target is opened in order; only the last one receives the text
        *opened, (target, append) = redirects
        writes = [(name, "", mode) for name, mode in opened]
        writes.append((target, text + "\n", append))
        for name, content, mode in writes:
            try:
                self.fs.write(self.fs.resolve(name), content, append=mode)
            except FileSystemError as e:
                return _failure(f"echo: {name}", e)
        return CommandResult.ok()

    # ------------------------------------------------------------------
    # Copy and move
    # ------------------------------------------------------------------

    def _cp(self, args: list[str]) -> CommandResult:
        return self._transfer(Command.CP, args)

    def _mv(self, args: list[str]) -> CommandResult:
        return self._transfer(Command.MV, args)

    def _transfer(self, command: Command, args: list[str]) -> CommandResult:
        _, operands = split_flags(args)
        if len(operands) < 2:
            raise MissingOperand(command.value, strerror="missing file operand")

        *sources, dest = operands
        dst = self.fs.resolve(dest)
        if len(sources) > 1 and not self.fs.is_directory(dest):
            return CommandResult.fail(
                f"{command.value}: target '{dest}' is not a directory",
                ErrorKind.NOT_A_DIRECTORY,
            )

        verb = "copy" if command is Command.CP else "move"
        operation = self.fs.copy if command is Command.CP else self.fs.move
        for source in sources:
            src = self.fs.resolve(source)
            try:
                self.fs.node_at(src)
            except FileSystemError as e:
                return _failure(f"{command.value}: cannot stat '{source}'", e)
            try:
                operation(src, dst)
            except FileSystemError as e:
                return _failure(f"{command.value}: cannot {verb} '{source}' to '{dest}'", e)
        return CommandResult.ok()

    # ------------------------------------------------------------------
    # Session and information
    # ------------------------------------------------------------------

    def _clear(self, args: list[str]) -> CommandResult:
        return CommandResult.clear_screen()

    def _help(self, args: list[str]) -> CommandResult:
        return CommandResult.ok(HELP_TEXT)

    def _history(self, args: list[str]) -> CommandResult:
        return CommandResult.ok(format_history(self.fs.history))

    def _whoami(self, args: list[str]) -> CommandResult:
        return CommandResult.ok(self.user)

    def _date(self, args: list[str]) -> CommandResult:
        return CommandResult.ok(format_date(self.fs.clock()))
