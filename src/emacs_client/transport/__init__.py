"""Transport layer: the socket connection and the command pumps.

- Connection: one duplex Unix socket stream with line reads and
  flush-on-demand writes
- CommandChannel: unbuffered single-producer/single-consumer conduit
- input_pump / output_pump: move Commands between channels and socket
"""

from .channel import CommandChannel
from .connection import DEFAULT_LINE_LIMIT, Connection
from .pumps import END_OF_REQUEST, input_pump, output_pump

__all__ = [
    "Connection",
    "DEFAULT_LINE_LIMIT",
    "CommandChannel",
    "END_OF_REQUEST",
    "input_pump",
    "output_pump",
]
