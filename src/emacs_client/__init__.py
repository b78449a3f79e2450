"""Emacs client - talk to a running Emacs server over its local socket."""

__version__ = "0.1.0"
