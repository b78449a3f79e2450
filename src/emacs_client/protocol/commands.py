"""Command definitions for the protocol layer.

A Command is one protocol line: a verb plus its (unescaped) arguments.
Outbound commands make up the request handshake; inbound commands are
decoded once into typed ServerMessage variants so the session logic
matches on types instead of comparing verb strings.
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Union

from pydantic import BaseModel, Field

from ..errors import ProtocolViolation

# Signed decimal, ASCII digits only, within the signed 64-bit range
_PID_PATTERN = re.compile(r"[+-]?[0-9]+", re.ASCII)
_PID_MIN = -(2**63)
_PID_MAX = 2**63 - 1


class CommandName(str, Enum):
    """Protocol verbs understood by this client."""

    # Client -> server
    ENV = "-env"
    DIR = "-dir"
    TTY = "-tty"
    FILE = "-file"
    EVAL = "-eval"

    # Server -> client
    EMACS_PID = "-emacs-pid"
    PRINT = "-print"
    PRINT_NONL = "-print-nonl"
    ERROR = "-error"


class Command(BaseModel):
    """A single protocol command.

    Example:
        Command(name="-eval", args=["(+ 1 2)"])  <->  "-eval (+&_1&_2) "
    """

    name: str
    args: list[str] = Field(default_factory=list)

    @classmethod
    def create(cls, name: str | CommandName, *args: str) -> Command:
        """Factory method for creating commands."""
        return cls(
            name=name.value if isinstance(name, CommandName) else name,
            args=list(args),
        )

    # Convenience factories for the request handshake
    @classmethod
    def env(cls, entry: str) -> Command:
        """Create an -env command from a KEY=VALUE entry."""
        return cls.create(CommandName.ENV, entry)

    @classmethod
    def dir(cls, path: str) -> Command:
        """Create a -dir command."""
        return cls.create(CommandName.DIR, path)

    @classmethod
    def tty(cls, tty_name: str, term: str) -> Command:
        """Create a -tty command."""
        return cls.create(CommandName.TTY, tty_name, term)

    @classmethod
    def file(cls, path: str) -> Command:
        """Create a -file command."""
        return cls.create(CommandName.FILE, path)

    @classmethod
    def eval(cls, expression: str) -> Command:
        """Create an -eval command."""
        return cls.create(CommandName.EVAL, expression)


# =============================================================================
# Server messages
# =============================================================================


class PrintMessage(BaseModel):
    """-print: output that starts on a fresh line."""

    text: str


class PrintNonlMessage(BaseModel):
    """-print-nonl: output appended to whatever was printed before."""

    text: str


class ErrorMessage(BaseModel):
    """-error: the request failed."""

    text: str


class PidMessage(BaseModel):
    """-emacs-pid: the server announces its process id."""

    pid: int


class OtherMessage(BaseModel):
    """Any command this client does not interpret."""

    name: str
    args: list[str] = Field(default_factory=list)


ServerMessage = Union[PrintMessage, PrintNonlMessage, ErrorMessage, PidMessage, OtherMessage]


def _first_arg(command: Command) -> str:
    if not command.args:
        raise ProtocolViolation(f"{command.name} requires an argument")
    return command.args[0]


def decode_message(command: Command) -> ServerMessage:
    """Decode an inbound Command into its typed message.

    Raises:
        ProtocolViolation: If a known verb lacks its argument, or
            -emacs-pid does not carry an integer.
    """
    name = command.name
    if name == CommandName.PRINT.value:
        return PrintMessage(text=_first_arg(command))
    if name == CommandName.PRINT_NONL.value:
        return PrintNonlMessage(text=_first_arg(command))
    if name == CommandName.ERROR.value:
        return ErrorMessage(text=_first_arg(command))
    if name == CommandName.EMACS_PID.value:
        raw = _first_arg(command)
        if not _PID_PATTERN.fullmatch(raw):
            raise ProtocolViolation(f"Invalid -emacs-pid value: {raw!r}")
        pid = int(raw)
        if not _PID_MIN <= pid <= _PID_MAX:
            raise ProtocolViolation(f"-emacs-pid value out of range: {raw!r}")
        return PidMessage(pid=pid)
    return OtherMessage(name=name, args=command.args)
