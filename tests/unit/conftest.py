"""Fixtures for unit tests."""

import pytest


class FakeConnection:
    """In-memory stand-in for Connection.

    Serves scripted server lines, then end of stream (or read_error),
    and records what each flush() would have sent.
    """

    def __init__(
        self,
        lines: list[bytes] | None = None,
        read_error: Exception | None = None,
        flush_error: Exception | None = None,
    ):
        self._lines = list(lines or [])
        self._read_error = read_error
        self._flush_error = flush_error
        self._buffer = bytearray()
        self.flushed: list[bytes] = []

    async def read_line(self) -> bytes:
        if self._lines:
            return self._lines.pop(0)
        if self._read_error:
            raise self._read_error
        return b""

    def write(self, data: bytes) -> None:
        self._buffer += data

    async def flush(self) -> None:
        if self._flush_error:
            raise self._flush_error
        self.flushed.append(bytes(self._buffer))
        self._buffer.clear()


@pytest.fixture
def make_connection():
    """Factory for FakeConnection instances."""
    return FakeConnection
