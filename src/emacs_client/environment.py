"""Queries over the calling process's state.

The session only ever sees the plain strings these return; nothing in
the protocol layer reads os.environ, the cwd or the terminal directly.
"""

from __future__ import annotations

import os
import tempfile


def current_environment() -> list[str]:
    """Return the process environment as KEY=VALUE entries."""
    return [f"{key}={value}" for key, value in os.environ.items()]


def current_working_directory() -> str | None:
    """Return the working directory, or None if it no longer exists."""
    try:
        return os.getcwd()
    except OSError:
        return None


def controlling_tty_name(fd: int) -> str | None:
    """Return the terminal device name for fd, or None if it is not a tty."""
    try:
        return os.ttyname(fd)
    except OSError:
        return None


def terminal_type() -> str | None:
    """Return $TERM, or None if unset or empty."""
    return os.environ.get("TERM") or None


def default_socket_path(server_name: str) -> str:
    """Return the path Emacs uses for a named server socket."""
    return os.path.join(tempfile.gettempdir(), f"emacs{os.getuid()}", server_name)
