"""Client-side state synchronization for board-game-io rooms."""
from __future__ import annotations

from .cells import ReadableCell, WritableCell, WriteGuard
from .config import ClientConfig, build_token_store, configure_logging
from .errors import BoardGameIOError, ConnectionClosedError, ProtocolError
from .observers import CallbackObserver, LoggingObserver, SessionObserver
from .schemas import UserInfo
from .session import GameSession
from .tokens import DeletableKeyValueStore, JsonFileKeyValueStore, KeyValueStore, MemoryKeyValueStore, TokenStore
from .transport import Connection, WebSocketConnection, open_session

__version__ = "0.1.0"

__all__ = [
    "ReadableCell",
    "WritableCell",
    "WriteGuard",
    "ClientConfig",
    "build_token_store",
    "configure_logging",
    "BoardGameIOError",
    "ConnectionClosedError",
    "ProtocolError",
    "CallbackObserver",
    "LoggingObserver",
    "SessionObserver",
    "UserInfo",
    "GameSession",
    "DeletableKeyValueStore",
    "JsonFileKeyValueStore",
    "KeyValueStore",
    "MemoryKeyValueStore",
    "TokenStore",
    "Connection",
    "WebSocketConnection",
    "open_session",
]
