"""Collaborator notified of navigation and server-reported problems."""
from __future__ import annotations

import logging
from typing import Protocol

logger = logging.getLogger(__name__)


class SessionObserver(Protocol):
    def on_navigate(self, path: str) -> None:
        """The session joined a room reachable at *path* (``/<room_id>``)."""

    def on_error(self, message: str) -> None:
        """The server sent an ``error`` envelope."""

    def on_invalid_action(self, message: str) -> None:
        """The server rejected an intent with ``invalid_action``."""

    def on_token_invalidated(self, token: str) -> None:
        """The server declared a reconnect token unusable."""


class LoggingObserver:
    """Default observer: reports everything through :mod:`logging`."""

    def on_navigate(self, path: str) -> None:
        logger.info("Joined room at %s", path)

    def on_error(self, message: str) -> None:
        logger.warning("Error: %s", message)

    def on_invalid_action(self, message: str) -> None:
        logger.warning("Invalid action: %s", message)

    def on_token_invalidated(self, token: str) -> None:
        logger.info("Server invalidated a reconnect token")


class CallbackObserver(LoggingObserver):
    """Observer built from plain callables; unset hooks fall back to logging."""

    def __init__(self, on_navigate=None, on_error=None, on_invalid_action=None, on_token_invalidated=None):
        self._on_navigate = on_navigate
        self._on_error = on_error
        self._on_invalid_action = on_invalid_action
        self._on_token_invalidated = on_token_invalidated

    def on_navigate(self, path: str) -> None:
        if self._on_navigate is None:
            return super().on_navigate(path)
        self._on_navigate(path)

    def on_error(self, message: str) -> None:
        if self._on_error is None:
            return super().on_error(message)
        self._on_error(message)

    def on_invalid_action(self, message: str) -> None:
        if self._on_invalid_action is None:
            return super().on_invalid_action(message)
        self._on_invalid_action(message)

    def on_token_invalidated(self, token: str) -> None:
        if self._on_token_invalidated is None:
            return super().on_token_invalidated(token)
        self._on_token_invalidated(token)


__all__ = ["SessionObserver", "LoggingObserver", "CallbackObserver"]
