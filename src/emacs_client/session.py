"""Session driver: one request against the Emacs server.

A request is a handshake (environment, working directory, optionally
the terminal) followed by the actual -file or -eval commands, all sent
through the output pump. The outgoing channel is then closed, which
makes the pump write the end-of-request newline, and the server's
replies are drained through the OutputHandler until the server closes
the connection.

Usage:
    session = await open_file("notes.txt")
    print(session.emacs_pid)

    await eval_expressions(["(+ 1 2)"])
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable, Sequence
from typing import TextIO

from .config import ClientConfig
from .environment import (
    controlling_tty_name,
    current_environment,
    current_working_directory,
    terminal_type,
)
from .errors import ChannelClosedError
from .protocol import Command, OutputHandler, PidMessage, decode_message
from .transport import CommandChannel, Connection, input_pump, output_pump

logger = logging.getLogger(__name__)


# =============================================================================
# Request building
# =============================================================================


def handshake_commands(environment: Iterable[str], cwd: str | None) -> list[Command]:
    """Build the -env and -dir commands every request starts with."""
    commands = [Command.env(entry) for entry in environment]
    if cwd:
        commands.append(Command.dir(cwd))
    return commands


def open_request(
    path: str,
    environment: Iterable[str],
    cwd: str | None,
    tty_name: str | None = None,
    term: str | None = None,
) -> list[Command]:
    """Build the commands for opening a file.

    The terminal is only offered when both its device name and $TERM
    are known.
    """
    commands = handshake_commands(environment, cwd)
    if tty_name and term:
        commands.append(Command.tty(tty_name, term))
    commands.append(Command.file(path))
    return commands


def eval_request(
    expressions: Sequence[str],
    environment: Iterable[str],
    cwd: str | None,
) -> list[Command]:
    """Build the commands for evaluating expressions, one -eval each."""
    if not expressions:
        raise ValueError("At least one expression is required")
    commands = handshake_commands(environment, cwd)
    commands.extend(Command.eval(expression) for expression in expressions)
    return commands


# =============================================================================
# Session
# =============================================================================


class Session:
    """Runs one request over a borrowed Connection.

    The connection stays owned by the caller; the session only starts
    the two pumps on it and stops them before returning.
    """

    def __init__(self, connection: Connection, handler: OutputHandler | None = None):
        self._connection = connection
        self._handler = handler or OutputHandler()
        self.emacs_pid: int | None = None

    @property
    def handler(self) -> OutputHandler:
        return self._handler

    async def run(self, commands: Iterable[Command]) -> None:
        """Send commands, then relay server output until the server hangs up.

        Raises:
            ServerError: If the server answered with -error
            ProtocolViolation: If a server command had unusable arguments
            StreamError: If the connection failed in either direction
            DecodeError: If a server line was malformed
        """
        outgoing = CommandChannel("outgoing")
        incoming = CommandChannel("incoming")
        output_task = asyncio.create_task(
            output_pump(self._connection, outgoing), name="emacs-output-pump"
        )
        input_task = asyncio.create_task(
            input_pump(self._connection, incoming), name="emacs-input-pump"
        )

        try:
            await self._send_all(outgoing, commands, output_task)

            async for command in incoming:
                self._dispatch(command)

            await input_task
            await output_task
        finally:
            await self._stop_pumps(output_task, input_task)
            self._handler.flush()

    async def _send_all(
        self,
        channel: CommandChannel,
        commands: Iterable[Command],
        output_task: asyncio.Task[None],
    ) -> None:
        for command in commands:
            try:
                await channel.send(command)
            except ChannelClosedError:
                # The pump stopped; its own error is the one worth reporting
                await output_task
                raise
        channel.close()

    def _dispatch(self, command: Command) -> None:
        message = decode_message(command)
        if self._handler.handle(message):
            return

        if isinstance(message, PidMessage):
            self.emacs_pid = message.pid
            logger.debug(f"Server pid is {message.pid}")
        else:
            logger.debug(f"Ignoring server command: {command.name} {command.args}")

    async def _stop_pumps(self, *tasks: asyncio.Task[None]) -> None:
        for task in tasks:
            if not task.done():
                task.cancel()
        # Collects every pump outcome, including failures not yet awaited;
        # on an early exit the original error is already propagating
        await asyncio.gather(*tasks, return_exceptions=True)


# =============================================================================
# Entry points
# =============================================================================


async def run_request(
    commands: Iterable[Command],
    config: ClientConfig | None = None,
    stdout: TextIO | None = None,
) -> Session:
    """Connect to the server, run one request and disconnect."""
    config = config or ClientConfig.from_env()
    path = config.resolve_socket_path()

    async with await Connection.open(path, timeout=config.timeout) as connection:
        session = Session(connection, OutputHandler(stdout))
        await session.run(commands)
    return session


async def open_file(
    path: str,
    config: ClientConfig | None = None,
    stdout: TextIO | None = None,
) -> Session:
    """Ask the server to visit path."""
    config = config or ClientConfig.from_env()
    commands = open_request(
        path,
        environment=current_environment(),
        cwd=current_working_directory(),
        tty_name=controlling_tty_name(config.tty_fd),
        term=terminal_type(),
    )
    logger.info(f"Opening {path}")
    return await run_request(commands, config, stdout)


async def eval_expressions(
    expressions: Sequence[str],
    config: ClientConfig | None = None,
    stdout: TextIO | None = None,
) -> Session:
    """Ask the server to evaluate each expression in turn."""
    commands = eval_request(
        expressions,
        environment=current_environment(),
        cwd=current_working_directory(),
    )
    logger.info(f"Evaluating {len(expressions)} expression(s)")
    return await run_request(commands, config, stdout)
