"""Client session façade for one room connection.

:class:`GameSession` owns the three observable cells the UI renders from
(``users``, ``config`` and ``view``), the session identity learnt from
``join_response`` and the intent operations that talk to the server.
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Union

from pydantic import BaseModel

from .auth import LeaderConfigGuard, is_leader
from .cells import ReadableCell, WritableCell
from .codec import decode_server_message, encode_message
from .dispatch import handle_server_message
from .observers import LoggingObserver, SessionObserver
from .schemas import (
    DoAction,
    GameViewRequest,
    JoinRoom,
    KickUser,
    ReassignPlayer,
    RejoinRoom,
    ResetToLobby,
    StartGame,
    UpdateConfig,
    UserInfo,
)
from .tokens import TokenStore

if TYPE_CHECKING:
    from .transport import Connection

logger = logging.getLogger(__name__)


class GameSession:
    """Mirror of one room's state plus the intents a member can send.

    All sends are fire-and-forget: nothing here waits for, or correlates,
    the server's reply. Effects arrive later as inbound messages.
    """

    def __init__(
        self,
        connection: "Connection",
        token_store: Optional[TokenStore] = None,
        observer: Optional[SessionObserver] = None,
    ):
        self.connection = connection
        self.token_store = token_store if token_store is not None else TokenStore()
        self.observer: SessionObserver = observer if observer is not None else LoggingObserver()

        # Identity; unset until the first join_response.
        self.room_id: Optional[str] = None
        self.user_id: Optional[str] = None
        self.username: Optional[str] = None

        self.users: ReadableCell[List[UserInfo]] = ReadableCell([])
        self.config: WritableCell[Any] = WritableCell(None, guard=LeaderConfigGuard(self))
        self.view: ReadableCell[Any] = ReadableCell(None)

    # ---------------------------------------------------------------------
    # Inbound
    # ---------------------------------------------------------------------

    def handle_text(self, text: Union[str, bytes]) -> None:
        """Entry point for every frame received on the connection.

        Unrecognised or malformed frames are dropped without touching state.
        """
        message = decode_server_message(text)
        if message is None:
            return
        handle_server_message(self, message)

    # ---------------------------------------------------------------------
    # Helpers
    # ---------------------------------------------------------------------

    @property
    def joined(self) -> bool:
        return self.room_id is not None

    @property
    def is_leader(self) -> bool:
        """*True* if the local user is currently marked leader."""
        return is_leader(self.users.read(), self.user_id)

    def _send(self, message: BaseModel) -> None:
        text = encode_message(message)
        logger.debug("-> %s", text)
        self.connection.send(text)

    # ---------------------------------------------------------------------
    # Intents
    # ---------------------------------------------------------------------

    def join_room(self, username: str, room: Optional[str] = None) -> None:
        """Join *room*, or ask the server for a new room when *room* is None."""
        self._send(JoinRoom(username=username, room=room))

    def rejoin_room(self, room: str) -> bool:
        """Resume a previous seat in *room* using its stored reconnect token.

        Returns *False* without sending anything if no token is stored.
        *True* only means the request was sent, not that it succeeded.
        """
        token = self.token_store.get(room)
        if token is None:
            logger.debug("No reconnect token stored for room %s", room)
            return False
        self._send(RejoinRoom(token=token, room=room))
        return True

    def update_config(self, config: Any) -> None:
        """Send *config* as-is. Prefer ``session.config.write`` in UI code."""
        self._send(UpdateConfig(config=config))

    def kick_user(self, user: str) -> None:
        self._send(KickUser(user=user))

    def reassign_player(self, from_user: str, to_user: str) -> None:
        self._send(ReassignPlayer(from_user=from_user, to_user=to_user))

    def start_game(self, player_mapping: Optional[Dict[str, str]] = None) -> None:
        self._send(StartGame(player_mapping=player_mapping))

    def do_action(self, action: Any) -> None:
        self._send(DoAction(action=action))

    def request_game_view(self) -> None:
        """Ask the server to resend the last full game view."""
        self._send(GameViewRequest())

    def reset_to_lobby(self) -> None:
        self._send(ResetToLobby())

    def __repr__(self) -> str:
        return f"GameSession(room_id={self.room_id!r}, user_id={self.user_id!r}, username={self.username!r})"


__all__ = ["GameSession"]
