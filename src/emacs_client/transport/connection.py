"""Duplex connection to the Emacs server socket.

Wraps one asyncio Unix stream with a line reader and a write buffer
that is only handed to the socket on flush(). Knows nothing about the
protocol; the pumps do the encoding.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import os
from typing import Any

from ..errors import ConnectError, StreamError

logger = logging.getLogger(__name__)

# Longest line accepted from the server (a -print of a large buffer is one line)
DEFAULT_LINE_LIMIT = 16 * 1024 * 1024


class Connection:
    """One open socket connection to the server.

    Usage:
        async with await Connection.open(path) as connection:
            connection.write(b"-eval t \\n")
            await connection.flush()
            line = await connection.read_line()
    """

    def __init__(
        self,
        reader: asyncio.StreamReader,
        writer: asyncio.StreamWriter,
        timeout: float | None = None,
        path: str | None = None,
    ):
        self._reader = reader
        self._writer = writer
        self._timeout = timeout
        self._buffer = bytearray()
        self._closed = False
        self.path = path

    @classmethod
    async def open(
        cls,
        path: str | os.PathLike[str],
        timeout: float | None = None,
        limit: int = DEFAULT_LINE_LIMIT,
    ) -> Connection:
        """Connect to the server socket at path.

        Args:
            path: Filesystem path of the server socket
            timeout: Deadline in seconds for connecting and for every
                later read and flush (None waits forever)
            limit: Longest line the reader accepts

        Raises:
            ConnectError: If the socket is missing or refuses the connection
        """
        path = os.fspath(path)
        logger.debug(f"Connecting to {path}")
        try:
            reader, writer = await asyncio.wait_for(
                asyncio.open_unix_connection(path, limit=limit),
                timeout=timeout,
            )
        except TimeoutError as e:
            raise ConnectError(f"Timed out connecting to {path}") from e
        except OSError as e:
            raise ConnectError(f"Cannot connect to {path}: {e.strerror or e}") from e

        logger.debug(f"Connected to {path}")
        return cls(reader, writer, timeout=timeout, path=path)

    @property
    def closed(self) -> bool:
        """Whether close() has been called."""
        return self._closed

    async def read_line(self) -> bytes:
        """Read up to and including the next newline.

        Returns the unterminated remainder when the stream ends without a
        newline, and b"" once the stream is exhausted.

        Raises:
            StreamError: On a read failure, an over-long line or the deadline
        """
        try:
            return await asyncio.wait_for(self._reader.readline(), timeout=self._timeout)
        except TimeoutError as e:
            raise StreamError("Timed out waiting for the server") from e
        except (OSError, ValueError) as e:
            raise StreamError(f"Read from server failed: {e}") from e

    def write(self, data: bytes) -> None:
        """Buffer data until the next flush()."""
        if self._closed:
            raise StreamError("Write on closed connection")
        self._buffer += data

    async def flush(self) -> None:
        """Send buffered data and wait until the socket accepted it.

        Raises:
            StreamError: On a write failure or the deadline
        """
        if self._closed:
            raise StreamError("Flush on closed connection")
        if not self._buffer:
            return

        data = bytes(self._buffer)
        self._buffer.clear()
        try:
            self._writer.write(data)
            await asyncio.wait_for(self._writer.drain(), timeout=self._timeout)
        except TimeoutError as e:
            raise StreamError("Timed out writing to the server") from e
        except (OSError, RuntimeError) as e:
            raise StreamError(f"Write to server failed: {e}") from e

    async def close(self) -> None:
        """Close both directions. Safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        self._buffer.clear()
        self._writer.close()
        with contextlib.suppress(OSError):
            await self._writer.wait_closed()
        logger.debug(f"Closed connection to {self.path}")

    async def __aenter__(self) -> Connection:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()
