"""Emacs server line protocol.

Defines the command vocabulary, the wire codec and the handler that
renders server output:
- Commands: one verb plus escaped arguments per line
- Codec: quote/unquote arguments, parse/format whole lines
- OutputHandler: -print / -print-nonl / -error with newline bookkeeping
"""

from .codec import format_command, parse_line, quote, unquote
from .commands import (
    Command,
    CommandName,
    ErrorMessage,
    OtherMessage,
    PidMessage,
    PrintMessage,
    PrintNonlMessage,
    ServerMessage,
    decode_message,
)
from .handler import OutputHandler

__all__ = [
    # Commands
    "Command",
    "CommandName",
    "ServerMessage",
    "PrintMessage",
    "PrintNonlMessage",
    "ErrorMessage",
    "PidMessage",
    "OtherMessage",
    "decode_message",
    # Codec
    "quote",
    "unquote",
    "parse_line",
    "format_command",
    # Output
    "OutputHandler",
]
