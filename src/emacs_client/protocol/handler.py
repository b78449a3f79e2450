"""Output handler for server messages.

Turns the server's print/error stream into terminal output. The server
sends text in fragments; a fragment that does not end in a newline
leaves the terminal mid-line, and the next -print (or the final flush)
has to break the line first. -print-nonl never forces that break.
"""

from __future__ import annotations

import sys
from typing import TextIO

from ..errors import ServerError
from .commands import (
    Command,
    ErrorMessage,
    PrintMessage,
    PrintNonlMessage,
    ServerMessage,
    decode_message,
)


class OutputHandler:
    """Writes server output to the terminal with newline bookkeeping.

    One handler serves one request; the pending-newline flag is never
    shared between requests.
    """

    def __init__(self, stdout: TextIO | None = None):
        self._stdout = stdout or sys.stdout
        self._need_newline = False

    @property
    def need_newline(self) -> bool:
        """Whether the last printed fragment left the terminal mid-line."""
        return self._need_newline

    def handle(self, message: ServerMessage | Command) -> bool:
        """Handle a print or error message.

        Args:
            message: A decoded server message, or a raw Command to decode.

        Returns:
            True if the message was consumed here, False if the caller
            should interpret it.

        Raises:
            ServerError: For -error, after any pending newline is written.
        """
        if isinstance(message, Command):
            message = decode_message(message)

        if isinstance(message, PrintMessage):
            self.flush()
            self._write(message.text)
            return True
        if isinstance(message, PrintNonlMessage):
            self._write(message.text)
            return True
        if isinstance(message, ErrorMessage):
            self.flush()
            raise ServerError(message.text)
        return False

    def flush(self) -> None:
        """Terminate a pending partial line."""
        if self._need_newline:
            self._stdout.write("\n")
            self._stdout.flush()
            self._need_newline = False

    def _write(self, text: str) -> None:
        self._stdout.write(text)
        self._stdout.flush()
        self._need_newline = bool(text) and not text.endswith("\n")
