"""Data models for the virtual filesystem and its durable form."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator

# Name carried by the root directory
ROOT_NAME = "/"

# Wire format version for DurableState
STATE_VERSION = "1.0"

# Names that can never be stored as a child
RESERVED_NAMES = frozenset({"", ".", ".."})

# Deepest path, in segments, a node may live at. Keeps the nested durable
# form inside the JSON parser's recursion limit.
MAX_DEPTH = 64


class NodeKind(str, Enum):
    """Kind of filesystem entry."""

    DIRECTORY = "directory"
    FILE = "file"


def is_valid_name(name: str) -> bool:
    """Check whether a name can be stored as a directory child."""
    return name not in RESERVED_NAMES and "/" not in name


class Node(BaseModel):
    """A directory or a file in the virtual filesystem.

    Directories exclusively own their children through a name-keyed map;
    there are no parent pointers.
    """

    model_config = ConfigDict(populate_by_name=True)

    name: str
    kind: NodeKind = Field(alias="type")
    content: str | None = None
    children: dict[str, Node] | None = None
    created_at: datetime = Field(alias="createdAt")
    modified_at: datetime = Field(alias="modifiedAt")

    @model_validator(mode="after")
    def check_shape(self) -> Node:
        """Enforce the file/directory shape and child naming."""
        if self.kind is NodeKind.FILE:
            if self.children is not None:
                raise ValueError(f"file '{self.name}' cannot have children")
            if self.content is None:
                self.content = ""
            return self

        if self.content is not None:
            raise ValueError(f"directory '{self.name}' cannot have content")
        if self.children is None:
            self.children = {}
        for key, child in self.children.items():
            if key != child.name:
                raise ValueError(f"child '{child.name}' stored under key '{key}'")
            if not is_valid_name(key):
                raise ValueError(f"invalid child name: {key!r}")
        return self

    @classmethod
    def directory(cls, name: str, now: datetime) -> Node:
        """Create an empty directory node."""
        return cls(
            name=name,
            kind=NodeKind.DIRECTORY,
            children={},
            created_at=now,
            modified_at=now,
        )

    @classmethod
    def file(cls, name: str, now: datetime, content: str = "") -> Node:
        """Create a file node."""
        return cls(
            name=name,
            kind=NodeKind.FILE,
            content=content,
            created_at=now,
            modified_at=now,
        )

    @property
    def is_dir(self) -> bool:
        """True for directory nodes."""
        return self.kind is NodeKind.DIRECTORY

    @property
    def size(self) -> int:
        """Byte length of a file's UTF-8 content (0 for directories)."""
        if self.content is None:
            return 0
        return len(self.content.encode("utf-8"))

    def add_child(self, child: Node, now: datetime) -> None:
        """Attach a child, replacing any same-named entry."""
        self.children[child.name] = child
        self.modified_at = now

    def remove_child(self, name: str, now: datetime) -> Node:
        """Detach and return a child."""
        child = self.children.pop(name)
        self.modified_at = now
        return child

    def clone(self, name: str, now: datetime) -> Node:
        """Deep-copy this node under a new name with fresh timestamps."""
        copied = self.model_copy(deep=True)
        copied.name = name
        _restamp(copied, now)
        return copied


def _restamp(node: Node, now: datetime) -> None:
    stack = [node]
    while stack:
        current = stack.pop()
        current.created_at = now
        current.modified_at = now
        if current.children:
            stack.extend(current.children.values())


class DurableState(BaseModel):
    """Serialized snapshot of a session: tree, cursor and history."""

    model_config = ConfigDict(populate_by_name=True)

    version: str = STATE_VERSION
    root: Node
    current_path: list[str] = Field(default_factory=list, alias="currentPath")
    command_history: list[str] = Field(default_factory=list, alias="commandHistory")

    @model_validator(mode="after")
    def check_root(self) -> DurableState:
        """The root must be a directory."""
        if not self.root.is_dir:
            raise ValueError("root must be a directory")
        return self
