"""Exception types raised by the client.

Normal protocol traffic never raises: malformed frames are dropped and
server-side errors are reported to the session observer. These classes cover
strict parsing and misuse of the transport.
"""
from __future__ import annotations

from typing import Optional


class BoardGameIOError(Exception):
    """Base class for every error raised by :mod:`board_game_io`."""


class ProtocolError(BoardGameIOError, ValueError):
    """An inbound frame is not a well-formed server envelope."""

    def __init__(self, message: str, raw: Optional[str] = None):
        super().__init__(message)
        self.raw = raw


class ConnectionClosedError(BoardGameIOError):
    """Raised when sending on a websocket connection that was closed."""


__all__ = ["BoardGameIOError", "ProtocolError", "ConnectionClosedError"]
