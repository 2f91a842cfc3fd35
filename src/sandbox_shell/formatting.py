"""Text formatting for command output."""

from __future__ import annotations

from datetime import datetime

from sandbox_shell.models import Node

# Cosmetic permission string; permissions are never enforced
PERMISSIONS = "rwxr-xr-x"

# Size shown for directories in long listings
DIRECTORY_SIZE = 4096

DATE_FORMAT = "%a %b %d %H:%M:%S %Z %Y"

HELP_TEXT = """Available commands:

  pwd             Print current directory
  ls [path]       List directory contents
                    -l  Long format
                    -a  Show hidden files
  cd <path>       Change directory
                    cd ..  Go up one level
                    cd ~   Go to home directory
  mkdir <name>    Create a directory
                    -p  Create parent directories
  touch <file>    Create an empty file
  rm <path>       Remove file or directory
                    -r  Remove directories recursively
                    -f  Force (no error if missing)
  cat <file>      Display file contents
  echo <text>     Display text
                    > file   Write to file
                    >> file  Append to file
  cp <src> <dst>  Copy file or directory
  mv <src> <dst>  Move/rename file or directory
  clear           Clear the screen
  history         Show command history
  whoami          Show the current user
  date            Show the current date and time
  help            Show this help message

Tips:
  - Use Up/Down arrows for command history
  - Paths can be relative or absolute"""


def long_entry(node: Node, owner: str) -> str:
    """Format one `ls -l` line.

    Args:
        node: Entry to describe.
        owner: User and group name shown for every entry.

    Returns:
        Line such as "-rwxr-xr-x 1 user user       12 Oct 19 14:05 a.txt".
    """
    kind = "d" if node.is_dir else "-"
    size = DIRECTORY_SIZE if node.is_dir else node.size
    stamp = node.modified_at.strftime("%b %d %H:%M")
    return f"{kind}{PERMISSIONS} 1 {owner} {owner} {size:>8} {stamp} {node.name}"


def short_listing(nodes: list[Node]) -> str:
    return "  ".join(node.name for node in nodes)


def format_history(lines: list[str]) -> str:
    """Number history lines from 1."""
    return "\n".join(f"{index:>5}  {line}" for index, line in enumerate(lines, 1))


def format_date(moment: datetime) -> str:
    return moment.strftime(DATE_FORMAT)
