"""Routing of decoded server messages onto session state.

Every inbound envelope is handled on its own: there is no protocol state
beyond the session identity, and each message either replaces one cell
wholesale or reports to the session observer.
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import jsonpatch
from jsonpointer import JsonPointerException

from .schemas import (
    ErrorMessage,
    GameInfo,
    GameViewDiff,
    InvalidAction,
    InvalidateToken,
    JoinResponse,
    RoomInfo,
    UserInfoMessage,
)

if TYPE_CHECKING:
    from .session import GameSession

logger = logging.getLogger(__name__)


def apply_view_diff(view: Any, diff: list) -> Any:
    """Return *view* with the RFC 6902 patch *diff* applied; *view* is untouched."""
    return jsonpatch.apply_patch(view, diff, in_place=False)


def handle_server_message(session: "GameSession", message: Any) -> None:
    """Apply one decoded server *message* to *session*."""
    if isinstance(message, ErrorMessage):
        session.observer.on_error(message.message)
    elif isinstance(message, JoinResponse):
        session.room_id = message.room_id
        session.user_id = message.user_id
        session.username = message.username
        session.token_store.set(message.room_id, message.token)
        session.observer.on_navigate("/" + message.room_id)
    elif isinstance(message, UserInfoMessage):
        session.users.replace(list(message.users))
    elif isinstance(message, RoomInfo):
        # Server-authoritative: bypasses the leader guard.
        session.config.replace(message.config)
    elif isinstance(message, GameInfo):
        session.view.replace(message.view)
    elif isinstance(message, GameViewDiff):
        try:
            view = apply_view_diff(session.view.read(), message.diff)
        except (jsonpatch.JsonPatchException, JsonPointerException, TypeError) as exc:
            logger.debug("Could not apply game view diff", exc_info=True)
            session.observer.on_error(f"Could not apply game view diff: {exc}")
            return
        session.view.replace(view)
    elif isinstance(message, InvalidAction):
        session.observer.on_invalid_action(message.message)
    elif isinstance(message, InvalidateToken):
        session.observer.on_token_invalidated(message.token)
    else:
        logger.debug("Ignoring unhandled message %r", message)


__all__ = ["apply_view_diff", "handle_server_message"]
