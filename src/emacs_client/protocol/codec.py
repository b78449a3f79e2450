"""Wire codec for the Emacs server line protocol.

A line is a command name followed by space-separated arguments:

    -eval (message&_"hi") \n

Arguments are escaped so they never contain a raw space or newline:

    space    -> &_
    newline  -> &n
    &        -> &&
    leading - -> &-   (so a value is never mistaken for a verb)

The producer writes a space after every argument, including the last.
"""

from __future__ import annotations

from ..errors import DecodeError
from .commands import Command

ESCAPE = "&"

# UTF-8 on the wire; outbound text may carry surrogate-escaped bytes from os.environ
ENCODING = "utf-8"
ENCODE_ERRORS = "surrogateescape"
DECODE_ERRORS = "replace"

_QUOTE_MAP = {
    " ": "&_",
    "\n": "&n",
    "&": "&&",
}

_UNQUOTE_MAP = {
    "_": " ",
    "n": "\n",
}


def quote(arg: str) -> str:
    """Escape an argument for the wire."""
    parts = []
    if arg.startswith("-"):
        parts.append(ESCAPE)
    for char in arg:
        parts.append(_QUOTE_MAP.get(char, char))
    return "".join(parts)


def unquote(wire: str) -> str:
    """Undo quote().

    Unknown escapes pass through as the escaped character itself.

    Raises:
        DecodeError: If the string ends with a dangling escape marker.
    """
    parts = []
    chars = iter(wire)
    for char in chars:
        if char != ESCAPE:
            parts.append(char)
            continue
        escaped = next(chars, None)
        if escaped is None:
            raise DecodeError(f"Dangling escape at end of argument: {wire!r}")
        parts.append(_UNQUOTE_MAP.get(escaped, escaped))
    return "".join(parts)


def parse_line(line: str) -> Command:
    """Parse one protocol line (without its newline) into a Command."""
    name, *args = line.split(" ")
    return Command(name=name, args=[unquote(arg) for arg in args])


def format_command(command: Command) -> str:
    """Format a Command as wire text, without a line terminator."""
    parts = [command.name, " "]
    for arg in command.args:
        parts.append(quote(arg))
        parts.append(" ")
    return "".join(parts)


def encode(text: str) -> bytes:
    return text.encode(ENCODING, ENCODE_ERRORS)


def decode(data: bytes) -> str:
    return data.decode(ENCODING, DECODE_ERRORS)
