"""Line tokenization and argument splitting.

The shell has no quoting rules beyond echo's quote stripping: a line is
split on ASCII whitespace and the first token names the command.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

__all__ = [
    "ASCII_WHITESPACE",
    "ParsedLine",
    "parse_line",
    "split_flags",
    "strip_quotes",
    "tokenize",
]

# ASCII whitespace only; other Unicode spaces stay inside tokens
ASCII_WHITESPACE = " \t\n\r\f\v"
_WHITESPACE = re.compile(f"[{re.escape(ASCII_WHITESPACE)}]+")

_QUOTES = "\"'"


@dataclass
class ParsedLine:
    """A tokenized input line.

    Attributes:
        command: Lower-cased command name ("" for a blank line).
        args: Remaining tokens in order.
    """

    command: str
    args: list[str] = field(default_factory=list)


def tokenize(line: str) -> list[str]:
    """Split a line on ASCII whitespace, dropping empty tokens."""
    return [token for token in _WHITESPACE.split(line) if token]


def parse_line(line: str) -> ParsedLine:
    """Parse a raw input line into command name and arguments.

    Example:
        >>> parse_line("  LS -la  docs ")
        ParsedLine(command='ls', args=['-la', 'docs'])
    """
    tokens = tokenize(line)
    if not tokens:
        return ParsedLine(command="")
    return ParsedLine(command=tokens[0].lower(), args=tokens[1:])


def split_flags(args: list[str]) -> tuple[set[str], list[str]]:
    """Separate option letters from operands.

    Combined short options are expanded ("-rf" gives {"r", "f"}). A bare
    "-" is an operand.

    Args:
        args: Tokens following the command name.

    Returns:
        Tuple of (option letters, operands in order).
    """
    flags: set[str] = set()
    operands: list[str] = []
    for arg in args:
        if arg.startswith("-") and len(arg) > 1:
            flags.update(arg[1:])
        else:
            operands.append(arg)
    return flags, operands


def strip_quotes(text: str) -> str:
    """Remove one leading and one trailing quote character, if present."""
    if text and text[0] in _QUOTES:
        text = text[1:]
    if text and text[-1] in _QUOTES:
        text = text[:-1]
    return text
