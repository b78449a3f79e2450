"""Emacs client CLI.

Hands requests to a running Emacs server over its local socket.

Usage:
    emacs-client open notes.txt              # Visit a file
    emacs-client eval '(+ 1 2)'              # Evaluate expressions
    emacs-client -s work eval '(buffer-list)'
    emacs-client --socket-path /run/emacs/sock open notes.txt
    emacs-client socket-path                 # Show the socket in use
"""

from __future__ import annotations

import asyncio
import logging
import sys
from collections.abc import Coroutine
from typing import Any

import click

from .config import DEFAULT_SERVER_NAME, SOCKET_NAME_ENV, ClientConfig
from .errors import EmacsClientError, ServerError
from .session import eval_expressions, open_file


def _configure_logging(verbose: bool) -> None:
    # stdout carries the server's output; logs go to stderr
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )


def _run(coro: Coroutine[Any, Any, Any]) -> None:
    """Run a request and turn client errors into exit status 1."""
    try:
        asyncio.run(coro)
    except ServerError as e:
        click.echo(e.message, err=True)
        sys.exit(1)
    except EmacsClientError as e:
        click.echo(str(e), err=True)
        sys.exit(1)
    except KeyboardInterrupt:
        click.echo("\nInterrupted", err=True)
        sys.exit(130)


@click.group()
@click.option(
    "--socket-name",
    "-s",
    "server_name",
    envvar=SOCKET_NAME_ENV,
    default=DEFAULT_SERVER_NAME,
    show_default=True,
    help="Name of the Emacs server (or a socket path if it contains '/')",
)
@click.option(
    "--socket-path",
    type=click.Path(dir_okay=False),
    help="Explicit path of the server socket; overrides --socket-name",
)
@click.option(
    "--timeout",
    type=click.FloatRange(min=0, min_open=True),
    default=None,
    help="Give up if the server does not respond within this many seconds",
)
@click.option("--verbose", "-v", is_flag=True, help="Log protocol traffic to stderr")
@click.pass_context
def main(
    ctx: click.Context,
    server_name: str,
    socket_path: str | None,
    timeout: float | None,
    verbose: bool,
) -> None:
    """Emacs client - open files and evaluate Lisp in a running Emacs server."""
    _configure_logging(verbose)
    ctx.obj = ClientConfig(
        server_name=server_name,
        socket_path=socket_path,
        timeout=timeout,
    )


@main.command("open")
@click.argument("path")
@click.pass_obj
def open_command(config: ClientConfig, path: str) -> None:
    """Open PATH in the Emacs server.

    Examples:

        emacs-client open notes.txt
    """
    _run(open_file(path, config))


@main.command("eval")
@click.argument("expressions", nargs=-1, required=True)
@click.pass_obj
def eval_command(config: ClientConfig, expressions: tuple[str, ...]) -> None:
    """Evaluate each of EXPRESSIONS in the Emacs server.

    The server prints each result on its own line.

    Examples:

        emacs-client eval '(+ 1 2)' '(emacs-version)'
    """
    _run(eval_expressions(list(expressions), config))


@main.command("socket-path")
@click.pass_obj
def socket_path_command(config: ClientConfig) -> None:
    """Print the socket path the client would connect to."""
    click.echo(config.resolve_socket_path())


if __name__ == "__main__":
    main()
