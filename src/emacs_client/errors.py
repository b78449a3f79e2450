"""Exceptions raised by the Emacs client.

Every failure of a request surfaces as an EmacsClientError subclass.
Only the CLI turns these into process exit codes.
"""

from __future__ import annotations


class EmacsClientError(Exception):
    """Base class for all client errors."""


class ConnectError(EmacsClientError):
    """The server socket could not be resolved or connected to."""


class StreamError(EmacsClientError):
    """A read or write on an open connection failed or timed out."""


class DecodeError(EmacsClientError, ValueError):
    """A wire argument contained a malformed escape sequence."""


class ProtocolViolation(EmacsClientError):
    """The server sent a known command with unusable arguments."""


class ChannelClosedError(EmacsClientError):
    """A command was published on a channel that no longer accepts values."""


class ServerError(EmacsClientError):
    """The server reported a failure with an -error command."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message
