"""Fake Emacs servers for socket-level tests."""

from __future__ import annotations

import asyncio
import os
import socketserver
import threading

import pytest


class FakeEmacsServer:
    """asyncio Unix socket server that answers one request per connection.

    Reads the request line (up to the end-of-request newline), records
    it, writes the scripted reply and hangs up. With hang=True it never
    answers, until stop().
    """

    def __init__(self, path: str, reply: bytes = b"", hang: bool = False):
        self.path = path
        self.reply = reply
        self.hang = hang
        self.requests: list[bytes] = []
        self._server: asyncio.Server | None = None
        self._release = asyncio.Event()

    async def start(self) -> FakeEmacsServer:
        self._server = await asyncio.start_unix_server(self._handle, path=self.path)
        return self

    async def stop(self) -> None:
        self._release.set()
        if self._server:
            self._server.close()
            await self._server.wait_closed()

    async def _handle(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
        self.requests.append(await reader.readline())
        if self.hang:
            await self._release.wait()
        else:
            writer.write(self.reply)
            await writer.drain()
        writer.close()


@pytest.fixture
def socket_path(socket_dir):
    return os.path.join(socket_dir, "server")


@pytest.fixture
async def fake_server(socket_path):
    """Factory starting FakeEmacsServer instances on socket_path."""
    servers: list[FakeEmacsServer] = []

    async def start(reply: bytes = b"", hang: bool = False) -> FakeEmacsServer:
        server = await FakeEmacsServer(socket_path, reply, hang).start()
        servers.append(server)
        return server

    yield start

    for server in servers:
        await server.stop()


class _ReplyHandler(socketserver.StreamRequestHandler):
    def handle(self) -> None:
        self.server.requests.append(self.rfile.readline())
        self.wfile.write(self.server.reply)


class ThreadedEmacsServer(socketserver.ThreadingUnixStreamServer):
    """Blocking fake server, for callers that run their own event loop."""

    daemon_threads = True

    def __init__(self, path: str, reply: bytes):
        super().__init__(path, _ReplyHandler)
        self.reply = reply
        self.requests: list[bytes] = []


@pytest.fixture
def threaded_server(socket_path):
    """Factory starting ThreadedEmacsServer instances in a background thread."""
    servers: list[ThreadedEmacsServer] = []

    def start(reply: bytes = b"") -> ThreadedEmacsServer:
        server = ThreadedEmacsServer(socket_path, reply)
        threading.Thread(target=server.serve_forever, daemon=True).start()
        servers.append(server)
        return server

    yield start

    for server in servers:
        server.shutdown()
        server.server_close()
