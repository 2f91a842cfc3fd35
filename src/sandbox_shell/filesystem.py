"""In-memory hierarchical filesystem.

VirtualFileSystem owns the whole session state: the node tree, the
current working directory (the cursor) and the command history. Nothing
here touches the host disk. Paths are resolved to segment lists and
re-walked from the root on every access; nodes carry no parent pointers.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from datetime import datetime, timezone

from sandbox_shell.errors import (
    AlreadyExists,
    FileSystemError,
    InvalidTarget,
    IsADirectory,
    NotADirectory,
    NotFoundError,
    PathTooDeep,
)
from sandbox_shell.models import MAX_DEPTH, ROOT_NAME, DurableState, Node

logger = logging.getLogger(__name__)

# Fixed home directory, relative to the root
HOME: tuple[str, ...] = ("home", "user")

Clock = Callable[[], datetime]


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def format_path(segments: Sequence[str]) -> str:
    """Render a segment list as an absolute path string."""
    return "/" + "/".join(segments)


def subtree_height(node: Node) -> int:
    """Number of levels in a subtree (1 for a file or an empty directory)."""
    height = 0
    level = [node]
    while level:
        height += 1
        level = [child for current in level for child in (current.children or {}).values()]
    return height


def check_depth(segments: Sequence[str], height: int = 1) -> None:
    """Reject placing a subtree of the given height at segments.

    Raises:
        PathTooDeep: If its deepest node would sit below MAX_DEPTH segments.
    """
    if len(segments) + height - 1 > MAX_DEPTH:
        raise PathTooDeep(format_path(segments))


def build_seed_tree(now: datetime) -> Node:
    """Build the onboarding tree rooted at '/'.

    Args:
        now: Timestamp given to every seeded node.

    Returns:
        Root directory containing /home/user and its example content.
    """
    documents = Node.directory("documents", now)
    documents.add_child(
        Node.file(
            "readme.txt",
            now,
            "Welcome to your documents folder!\n\nThis is where you can store your files.",
        ),
        now,
    )
    documents.add_child(
        Node.file(
            "notes.txt",
            now,
            "My Notes\n========\n\n- Learn terminal commands\n- Build something useful\n"
            "- Deploy to the web",
        ),
        now,
    )

    example = Node.directory("example", now)
    example.add_child(
        Node.file(
            "index.html",
            now,
            "<!DOCTYPE html>\n<html>\n<head>\n  <title>Example Project</title>\n</head>\n"
            "<body>\n  <h1>Hello World!</h1>\n</body>\n</html>",
        ),
        now,
    )
    example.add_child(
        Node.file("style.css", now, "body {\n  font-family: sans-serif;\n  margin: 20px;\n}"),
        now,
    )
    projects = Node.directory("projects", now)
    projects.add_child(example, now)

    desktop = Node.directory("desktop", now)
    desktop.add_child(
        Node.file(
            "welcome.txt",
            now,
            "Welcome to the sandbox terminal!\n\n"
            "This simulated terminal will help you learn the basics.\n\n"
            "Try these commands:\n"
            "- pwd (print working directory)\n"
            "- ls (list files)\n"
            "- cd documents (change to documents folder)\n"
            "- cat welcome.txt (read this file)",
        ),
        now,
    )

    user = Node.directory(HOME[1], now)
    for child in (documents, projects, desktop):
        user.add_child(child, now)
    home = Node.directory(HOME[0], now)
    home.add_child(user, now)
    root = Node.directory(ROOT_NAME, now)
    root.add_child(home, now)
    return root


class VirtualFileSystem:
    """Simulated filesystem with a cursor and command history."""

    def __init__(
        self,
        clock: Clock | None = None,
        root: Node | None = None,
        cwd: Sequence[str] | None = None,
        history: Sequence[str] | None = None,
    ) -> None:
        """Initialize the filesystem.

        Args:
            clock: Callable returning the current aware datetime.
            root: Existing root directory. Defaults to the seed tree.
            cwd: Initial cursor segments. Defaults to the home directory.
            history: Previously recorded input lines.

        Note:
            Prefer using factory methods `create()` or `create_default()` for construction.
        """
        self.clock: Clock = clock or _utc_now
        self.root = root if root is not None else build_seed_tree(self.clock())
        self._cwd: list[str] = list(cwd) if cwd is not None else list(HOME)
        self._history: list[str] = list(history or [])

    @classmethod
    def create(cls, clock: Clock) -> VirtualFileSystem:
        """Create a seeded filesystem driven by a custom clock.

        Args:
            clock: Callable returning the current aware datetime.

        Returns:
            Fresh VirtualFileSystem.
        """
        return cls(clock=clock)

    @classmethod
    def create_default(cls) -> VirtualFileSystem:
        """Create a seeded filesystem using the UTC wall clock."""
        return cls()

    # ------------------------------------------------------------------
    # Cursor and history
    # ------------------------------------------------------------------

    @property
    def cwd(self) -> list[str]:
        """Segments of the current working directory."""
        return list(self._cwd)

    @property
    def cwd_path(self) -> str:
        """Absolute path of the current working directory."""
        return format_path(self._cwd)

    @property
    def display_path(self) -> str:
        """Current path with the home prefix abbreviated to '~'."""
        home = list(HOME)
        if self._cwd[: len(home)] == home:
            rest = self._cwd[len(home) :]
            return "~" + ("/" + "/".join(rest) if rest else "")
        return self.cwd_path

    @property
    def home(self) -> list[str]:
        """Segments of the home directory."""
        return list(HOME)

    @property
    def history(self) -> list[str]:
        """Recorded input lines, oldest first."""
        return list(self._history)

    def record(self, line: str) -> None:
        """Append a line to the command history."""
        self._history.append(line)

    def change_directory(self, segments: Sequence[str]) -> None:
        """Move the cursor.

        Args:
            segments: Resolved target path.

        Raises:
            NotFoundError: If the target does not exist.
            NotADirectory: If the target is a file.
        """
        node = self._walk(segments)
        if not node.is_dir:
            raise NotADirectory(format_path(segments))
        self._cwd = list(segments)

    # ------------------------------------------------------------------
    # Resolution and lookup
    # ------------------------------------------------------------------

    def resolve(self, path: str, cwd: Sequence[str] | None = None) -> list[str]:
        """Turn a path string into segments without checking existence.

        Args:
            path: Absolute, relative or '~'-prefixed path.
            cwd: Base for relative paths. Defaults to the cursor.

        Returns:
            Normalized segment list ([] is the root).
        """
        if path in ("", "/"):
            return []

        if path.startswith("/"):
            segments: list[str] = []
        elif path.startswith("~"):
            segments = list(HOME)
            path = path[1:]
        else:
            segments = list(self._cwd if cwd is None else cwd)

        for segment in path.split("/"):
            if segment in ("", "."):
                continue
            if segment == "..":
                if segments:
                    segments.pop()
                continue
            segments.append(segment)
        return segments

    def lookup(self, segments: Sequence[str]) -> Node | None:
        """Find the node at a resolved path.

        Returns:
            The node, or None if any segment is missing or descends into a file.
        """
        try:
            return self._walk(segments)
        except FileSystemError:
            return None

    def node_at(self, segments: Sequence[str]) -> Node:
        """Find the node at a resolved path or raise.

        Raises:
            NotFoundError: If a segment is missing.
            NotADirectory: If the path descends into a file.
        """
        return self._walk(segments)

    def _walk(self, segments: Sequence[str]) -> Node:
        node = self.root
        for depth, segment in enumerate(segments):
            if not node.is_dir:
                raise NotADirectory(format_path(segments[:depth]))
            child = node.children.get(segment)
            if child is None:
                raise NotFoundError(format_path(segments[: depth + 1]))
            node = child
        return node

    def _parent_of(self, segments: Sequence[str]) -> Node:
        parent = self._walk(segments[:-1])
        if not parent.is_dir:
            raise NotADirectory(format_path(segments[:-1]))
        return parent

    def entries(self, segments: Sequence[str]) -> list[Node]:
        """Children of a directory sorted by name.

        Raises:
            NotFoundError: If the path does not exist.
            NotADirectory: If the path is a file.
        """
        node = self._walk(segments)
        if not node.is_dir:
            raise NotADirectory(format_path(segments))
        return [node.children[name] for name in sorted(node.children)]

    # ------------------------------------------------------------------
    # Validation queries (side-effect free)
    # ------------------------------------------------------------------

    def exists(self, path: str) -> bool:
        """Check if a path resolves to any node."""
        return self.lookup(self.resolve(path)) is not None

    def is_directory(self, path: str) -> bool:
        """Check if a path resolves to a directory."""
        node = self.lookup(self.resolve(path))
        return node is not None and node.is_dir

    def read(self, path: str) -> str | None:
        """Return a file's content, or None for directories and missing paths."""
        node = self.lookup(self.resolve(path))
        if node is None or node.is_dir:
            return None
        return node.content

    def list_children(self, path: str) -> list[str]:
        """Return sorted child names, or [] for files and missing paths."""
        node = self.lookup(self.resolve(path))
        if node is None or not node.is_dir:
            return []
        return sorted(node.children)

    def file_contains(self, path: str, text: str) -> bool:
        """Check whether a file's content contains the given text."""
        content = self.read(path)
        return content is not None and text in content

    # ------------------------------------------------------------------
    # Mutators
    # ------------------------------------------------------------------

    def make_directory(self, segments: Sequence[str], parents: bool = False) -> None:
        """Create a directory.

        Args:
            segments: Resolved path of the new directory.
            parents: Create missing intermediate directories.

        Raises:
            AlreadyExists: If any node already exists at the path.
            NotFoundError: If the parent is missing and parents is False.
            NotADirectory: If a file sits on the parent path.
            PathTooDeep: If the path has more than MAX_DEPTH segments.
        """
        if self.lookup(segments) is not None:
            raise AlreadyExists(format_path(segments))
        check_depth(segments)

        # Validate the whole parent chain before creating anything
        node = self.root
        existing = 0
        for segment in segments[:-1]:
            child = node.children.get(segment)
            if child is None:
                break
            if not child.is_dir:
                raise NotADirectory(format_path(segments[: existing + 1]))
            node = child
            existing += 1

        missing = list(segments[existing:-1])
        if missing and not parents:
            raise NotFoundError(format_path(segments[: existing + 1]))

        now = self.clock()
        for segment in missing:
            child = Node.directory(segment, now)
            node.add_child(child, now)
            node = child
        node.add_child(Node.directory(segments[-1], now), now)

    def make_file(self, segments: Sequence[str]) -> None:
        """Create an empty file, or update modified_at if the node exists.

        Raises:
            NotFoundError: If the parent directory is missing.
            NotADirectory: If the parent is a file.
            PathTooDeep: If a new file would sit below MAX_DEPTH.
        """
        now = self.clock()
        if not segments:
            self.root.modified_at = now
            return

        parent = self._parent_of(segments)
        existing = parent.children.get(segments[-1])
        if existing is not None:
            existing.modified_at = now
            return
        check_depth(segments)
        parent.add_child(Node.file(segments[-1], now), now)

    def write(self, segments: Sequence[str], text: str, append: bool = False) -> None:
        """Overwrite or append to a file, creating it if absent.

        Raises:
            IsADirectory: If the target is a directory.
            NotFoundError: If the parent directory is missing.
            NotADirectory: If the parent is a file.
            PathTooDeep: If a new file would sit below MAX_DEPTH.
        """
        if not segments:
            raise IsADirectory(ROOT_NAME)

        parent = self._parent_of(segments)
        now = self.clock()
        existing = parent.children.get(segments[-1])
        if existing is None:
            check_depth(segments)
            parent.add_child(Node.file(segments[-1], now, text), now)
            return
        if existing.is_dir:
            raise IsADirectory(format_path(segments))
        existing.content = existing.content + text if append else text
        existing.modified_at = now

    def remove(self, segments: Sequence[str], recursive: bool = False) -> None:
        """Remove a file, or a directory and all its descendants.

        Raises:
            InvalidTarget: If asked to remove the root.
            NotFoundError: If the path does not exist.
            IsADirectory: If the path is a directory and recursive is False.
        """
        if not segments:
            raise InvalidTarget(ROOT_NAME)

        node = self._walk(segments)
        if node.is_dir and not recursive:
            raise IsADirectory(format_path(segments))

        parent = self._parent_of(segments)
        parent.remove_child(node.name, self.clock())
        self._repair_cwd()

    def copy(self, src: Sequence[str], dst: Sequence[str]) -> list[str]:
        """Deep-copy a node.

        If dst names an existing directory the copy goes inside it under the
        source's name; otherwise dst is the full path of the copy.

        Returns:
            Resolved path of the new node.

        Raises:
            NotFoundError: If the source or the destination parent is missing.
            NotADirectory: If a directory would replace a file.
            IsADirectory: If a file would replace a directory.
            InvalidTarget: If source and destination are the same node.
            PathTooDeep: If the copied subtree would reach below MAX_DEPTH.
        """
        source, target, parent = self._plan_transfer(src, dst)
        now = self.clock()
        parent.add_child(source.clone(target[-1], now), now)
        return target

    def move(self, src: Sequence[str], dst: Sequence[str]) -> list[str]:
        """Relocate or rename a node.

        All checks run before anything is touched, so a failed move leaves
        the tree unchanged. Timestamps of the moved subtree are kept.

        Returns:
            Resolved path of the moved node.

        Raises:
            InvalidTarget: If a directory would move into its own subtree.
            Plus everything copy() raises.
        """
        source, target, parent = self._plan_transfer(src, dst)
        if list(target[: len(src)]) == list(src):
            raise InvalidTarget(
                format_path(src), strerror="cannot move a directory into itself"
            )

        now = self.clock()
        self._parent_of(src).remove_child(source.name, now)
        source.name = target[-1]
        parent.add_child(source, now)
        self._repair_cwd()
        return target

    def _plan_transfer(
        self, src: Sequence[str], dst: Sequence[str]
    ) -> tuple[Node, list[str], Node]:
        if not src:
            raise InvalidTarget(ROOT_NAME)
        source = self._walk(src)

        destination = self.lookup(dst)
        if destination is not None and destination.is_dir:
            target = [*dst, source.name]
        else:
            target = list(dst)

        if target == list(src):
            raise InvalidTarget(format_path(src), strerror="are the same file")

        parent = self._parent_of(target)
        existing = parent.children.get(target[-1])
        if existing is not None:
            if existing.is_dir:
                if source.is_dir:
                    raise AlreadyExists(format_path(target))
                raise IsADirectory(format_path(target))
            if source.is_dir:
                raise NotADirectory(format_path(target))
        check_depth(target, subtree_height(source))
        return source, target, parent

    def _repair_cwd(self) -> None:
        """Truncate the cursor to its deepest existing directory."""
        node = self.root
        kept: list[str] = []
        for segment in self._cwd:
            child = node.children.get(segment)
            if child is None or not child.is_dir:
                break
            kept.append(segment)
            node = child
        if len(kept) != len(self._cwd):
            logger.debug("Cursor %s no longer exists, moved to %s", self.cwd_path, format_path(kept))
            self._cwd = kept

    # ------------------------------------------------------------------
    # Durable form
    # ------------------------------------------------------------------

    def to_durable_form(self) -> str:
        """Serialize the tree, cursor and history to a JSON string."""
        state = DurableState(
            root=self.root,
            current_path=self._cwd,
            command_history=self._history,
        )
        return state.model_dump_json(by_alias=True, exclude_none=True)

    @classmethod
    def from_durable_form(cls, text: str, clock: Clock | None = None) -> VirtualFileSystem:
        """Rebuild a filesystem from its durable form.

        Unreadable input never raises; a fresh seeded filesystem is returned
        instead so that corrupted saved state cannot block a session.

        Args:
            text: String produced by to_durable_form().
            clock: Clock for the rebuilt filesystem.

        Returns:
            Equivalent VirtualFileSystem, or a fresh one on any failure.
        """
        try:
            state = DurableState.model_validate_json(text)
            fs = cls(
                clock=clock,
                root=state.root,
                cwd=state.current_path,
                history=state.command_history,
            )
            cursor = fs.lookup(state.current_path)
            if cursor is None or not cursor.is_dir:
                raise ValueError(f"current path {format_path(state.current_path)} is not a directory")
            logger.debug("Restored filesystem state (version %s)", state.version)
            return fs
        except (ValueError, TypeError, RecursionError) as e:
            logger.warning("Discarding unreadable filesystem state: %s", e)
            return cls(clock=clock)
