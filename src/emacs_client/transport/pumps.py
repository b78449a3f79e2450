"""The two data pumps of a request.

input_pump moves server lines into a channel as Commands; output_pump
moves Commands from a channel onto the socket. Each runs as its own
task and owns one direction of the Connection. Neither ever ends the
process: errors end the loop, settle the channel and propagate to
whoever awaits the task.
"""

from __future__ import annotations

import logging
from typing import Protocol

from ..protocol.codec import decode, encode, format_command, parse_line
from .channel import CommandChannel

logger = logging.getLogger(__name__)

# Written once the outgoing channel closes; the server waits for it
END_OF_REQUEST = b"\n"


class LineReader(Protocol):
    """Read side of a Connection."""

    async def read_line(self) -> bytes: ...


class BufferedWriter(Protocol):
    """Write side of a Connection."""

    def write(self, data: bytes) -> None: ...

    async def flush(self) -> None: ...


async def input_pump(connection: LineReader, channel: CommandChannel) -> None:
    """Publish every server line on channel, then close it.

    A final line without a newline is still published. The channel is
    closed on every exit path; read and decode errors propagate.
    """
    try:
        while True:
            data = await connection.read_line()
            if not data:
                logger.debug("Server closed the stream")
                break

            line = decode(data)
            if line.endswith("\n"):
                line = line[:-1]
            else:
                logger.debug("Stream ended inside a line, publishing the remainder")

            command = parse_line(line)
            logger.debug(f"<- {command.name}")
            await channel.send(command)
    finally:
        channel.close()


async def output_pump(connection: BufferedWriter, channel: CommandChannel) -> None:
    """Write every command from channel to the socket, one flush each.

    When the channel closes, writes the end-of-request newline. If the
    pump stops before that, the channel is abandoned so the producer
    does not block on it.
    """
    try:
        async for command in channel:
            logger.debug(f"-> {command.name}")
            connection.write(encode(format_command(command)))
            await connection.flush()

        connection.write(END_OF_REQUEST)
        await connection.flush()
        logger.debug("Request sent")
    finally:
        if not channel.exhausted:
            channel.abandon()
