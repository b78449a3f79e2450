"""Client configuration.

Defaults, overridable from the environment and from CLI options.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from .environment import default_socket_path

DEFAULT_SERVER_NAME = "server"

# Same variable emacsclient honours; a value containing "/" is a socket path
SOCKET_NAME_ENV = "EMACS_SOCKET_NAME"


@dataclass
class ClientConfig:
    """Settings for one client invocation."""

    # Server selection
    server_name: str = DEFAULT_SERVER_NAME
    socket_path: str | None = None  # wins over server_name when set

    # Deadline for connect and every read/flush, in seconds (None = wait forever)
    timeout: float | None = None

    # File descriptor whose terminal is offered to the server on open
    tty_fd: int = 1

    @classmethod
    def from_env(cls) -> ClientConfig:
        """Build a config from the environment."""
        config = cls()
        if server_name := os.environ.get(SOCKET_NAME_ENV):
            config.server_name = server_name
        return config

    def resolve_socket_path(self) -> str:
        """Return the socket path to connect to."""
        if self.socket_path:
            return self.socket_path
        if "/" in self.server_name:
            return self.server_name
        return default_socket_path(self.server_name)
