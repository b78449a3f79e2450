"""Unbuffered command channel.

A CommandChannel hands commands from exactly one producer task to
exactly one consumer task. send() returns only once the consumer has
taken the command, so a producer can never run ahead of its consumer.

Closing is done by the producer; the consumer then receives None
(and `async for` stops). If the consumer goes away first it abandons
the channel, and the producer's pending and future sends fail with
ChannelClosedError instead of blocking forever.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from ..errors import ChannelClosedError
from ..protocol.commands import Command

logger = logging.getLogger(__name__)

_CLOSED: Any = object()


class CommandChannel:
    """Rendezvous channel of Commands, one per direction per request."""

    def __init__(self, name: str = "channel"):
        self.name = name
        # At most one value in flight; join() waits until it was taken
        self._queue: asyncio.Queue[Any] = asyncio.Queue(maxsize=1)
        self._closed = False
        self._abandoned = False
        self._exhausted = False
        self._dropped = False

    @property
    def closed(self) -> bool:
        """True once the producer closed or the consumer abandoned the channel."""
        return self._closed or self._abandoned

    @property
    def exhausted(self) -> bool:
        """True once the consumer has observed the close."""
        return self._exhausted

    async def send(self, command: Command) -> None:
        """Publish a command and wait until the consumer has taken it.

        Raises:
            ChannelClosedError: If the channel is closed, or the consumer
                abandoned it before taking the command.
        """
        if self._closed:
            raise ChannelClosedError(f"{self.name}: send on closed channel")
        if self._abandoned:
            raise ChannelClosedError(f"{self.name}: consumer has gone away")

        await self._queue.put(command)
        try:
            await self._queue.join()
        except asyncio.CancelledError:
            # Withdraw the undelivered command
            if not self._queue.empty():
                self._queue.get_nowait()
                self._queue.task_done()
            raise

        if self._dropped:
            raise ChannelClosedError(f"{self.name}: consumer has gone away")

    def close(self) -> None:
        """Signal that no more commands will be sent. Idempotent."""
        if self._closed:
            return
        self._closed = True
        if not self._abandoned:
            self._queue.put_nowait(_CLOSED)

    def abandon(self) -> None:
        """Stop consuming; wake the producer if it is waiting in send()."""
        if self._abandoned:
            return
        self._abandoned = True
        while not self._queue.empty():
            item = self._queue.get_nowait()
            self._queue.task_done()
            if item is not _CLOSED:
                self._dropped = True
                logger.debug(f"{self.name}: dropped undelivered {item.name}")

    async def receive(self) -> Command | None:
        """Take the next command, or None once the channel is closed."""
        if self._exhausted or self._abandoned:
            return None

        item = await self._queue.get()
        self._queue.task_done()
        if item is _CLOSED:
            self._exhausted = True
            return None
        return item

    def __aiter__(self) -> CommandChannel:
        return self

    async def __anext__(self) -> Command:
        command = await self.receive()
        if command is None:
            raise StopAsyncIteration
        return command
