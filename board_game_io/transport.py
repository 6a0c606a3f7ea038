"""Websocket transport for :class:`~board_game_io.session.GameSession`.

The session only needs ``send(text)``; :class:`WebSocketConnection` provides
it on top of the ``websockets`` client by queueing frames in an outbox that
a sender task drains, so sending never blocks the caller. The receive loop
hands every inbound frame to ``session.handle_text`` and finishes handling it
before reading the next one.

Reconnection and backoff are left to the caller.
"""
from __future__ import annotations

import asyncio
import logging
from contextlib import suppress
from typing import TYPE_CHECKING, Optional, Protocol, Tuple

import websockets
from websockets.exceptions import ConnectionClosed

from .config import ClientConfig, build_token_store, configure_logging
from .errors import ConnectionClosedError
from .session import GameSession

if TYPE_CHECKING:
    from .observers import SessionObserver

logger = logging.getLogger(__name__)


class Connection(Protocol):
    """Outbound half of a duplex text connection."""

    def send(self, text: str) -> None:
        ...


class WebSocketConnection:
    """Fire-and-forget text connection to a room server.

    Frames sent before :meth:`connect` are buffered and delivered once the
    socket is open.
    """

    def __init__(self, url: str):
        self.url = url
        self.websocket = None
        self._outbox: "asyncio.Queue[str]" = asyncio.Queue()
        self._sender: Optional[asyncio.Task] = None
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def send(self, text: str) -> None:
        if self._closed:
            raise ConnectionClosedError(f"connection to {self.url} is closed")
        self._outbox.put_nowait(text)

    async def connect(self) -> None:
        if self.websocket is not None:
            return
        logger.info("Connecting to room server at %s", self.url)
        self.websocket = await websockets.connect(self.url)
        logger.info("Connected to room server")
        self._sender = asyncio.create_task(self._drain_outbox())

    async def _drain_outbox(self) -> None:
        ws = self.websocket
        while True:
            text = await self._outbox.get()
            try:
                await ws.send(text)
            except ConnectionClosed:
                logger.debug("Sender stopped: connection closed", exc_info=True)
                self._closed = True
                break
            finally:
                self._outbox.task_done()

    async def run(self, session: GameSession) -> None:
        """Feed inbound frames to *session* until the connection ends."""
        await self.connect()
        try:
            async for frame in self.websocket:
                try:
                    session.handle_text(frame)
                except Exception:
                    logger.exception("Inbound message handling failed")
        except ConnectionClosed as exc:
            logger.info("Room server connection closed (%s)", exc)
        finally:
            await self._stop_sender()
            self._closed = True

    async def flush(self) -> None:
        """Wait until every queued frame has been handed to the socket."""
        sender = self._sender
        if sender is None:
            return
        joiner = asyncio.ensure_future(self._outbox.join())
        await asyncio.wait({joiner, sender}, return_when=asyncio.FIRST_COMPLETED)
        if not joiner.done():
            joiner.cancel()

    async def _stop_sender(self) -> None:
        sender = self._sender
        self._sender = None
        if sender is not None:
            sender.cancel()
            with suppress(asyncio.CancelledError):
                await sender

    async def close(self) -> None:
        self._closed = True
        await self._stop_sender()
        ws = self.websocket
        if ws is not None:
            await ws.close()

    async def __aenter__(self) -> "WebSocketConnection":
        await self.connect()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()


async def open_session(
    config: Optional[ClientConfig] = None,
    observer: Optional["SessionObserver"] = None,
) -> Tuple[GameSession, WebSocketConnection]:
    """Connect to ``config.server_url`` and return a wired session.

    Applies ``config.log_level`` to the package logger. The caller drives the
    receive loop with ``await connection.run(session)``.
    """
    config = config if config is not None else ClientConfig.from_env()
    configure_logging(config)
    connection = WebSocketConnection(config.server_url)
    await connection.connect()
    session = GameSession(connection, token_store=build_token_store(config), observer=observer)
    return session, connection


__all__ = ["Connection", "WebSocketConnection", "open_session"]
