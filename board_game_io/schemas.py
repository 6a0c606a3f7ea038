"""Pydantic shapes of every envelope exchanged with the room server.

All envelopes are JSON objects tagged by a ``type`` string. This module
centralises the models so the codec, the dispatcher and the session import
from a single location.
"""
from __future__ import annotations

from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

# Opaque identifiers; equality is plain string equality.
RoomId = str
UserId = str
PlayerId = str
ReconnectToken = str

# -----------------------------
# Room membership
# -----------------------------


class UserInfo(BaseModel):
    """One member of the room as reported by the server.

    Fields beyond ``id`` and ``leader`` are server-defined; unknown ones are
    kept so consumers can read them off the model.
    """

    model_config = ConfigDict(extra="allow")

    id: UserId
    leader: bool = False
    username: Optional[str] = None
    player_id: Optional[PlayerId] = None


# -----------------------------
# Client -> server
# -----------------------------


class JoinRoom(BaseModel):
    type: Literal["join_room"] = "join_room"
    username: str
    # None asks the server to create a new room.
    room: Optional[RoomId] = None


class RejoinRoom(BaseModel):
    type: Literal["rejoin_room"] = "rejoin_room"
    token: ReconnectToken
    room: RoomId


class UpdateConfig(BaseModel):
    type: Literal["update_config"] = "update_config"
    config: Any


class KickUser(BaseModel):
    type: Literal["kick_user"] = "kick_user"
    user: UserId


class ReassignPlayer(BaseModel):
    type: Literal["reassign_player"] = "reassign_player"
    from_user: UserId
    to_user: UserId


class StartGame(BaseModel):
    type: Literal["start_game"] = "start_game"
    player_mapping: Optional[Dict[UserId, PlayerId]] = None


class DoAction(BaseModel):
    type: Literal["do_action"] = "do_action"
    action: Any


class GameViewRequest(BaseModel):
    type: Literal["game_view_request"] = "game_view_request"


class ResetToLobby(BaseModel):
    type: Literal["reset_to_lobby"] = "reset_to_lobby"


ClientMessage = Annotated[
    Union[
        JoinRoom,
        RejoinRoom,
        UpdateConfig,
        KickUser,
        ReassignPlayer,
        StartGame,
        DoAction,
        GameViewRequest,
        ResetToLobby,
    ],
    Field(discriminator="type"),
]

# -----------------------------
# Server -> client
# -----------------------------


class ErrorMessage(BaseModel):
    type: Literal["error"] = "error"
    message: str


class JoinResponse(BaseModel):
    type: Literal["join_response"] = "join_response"
    room_id: RoomId
    user_id: UserId
    username: str
    token: ReconnectToken


class InvalidateToken(BaseModel):
    type: Literal["invalidate_token"] = "invalidate_token"
    token: ReconnectToken


class UserInfoMessage(BaseModel):
    type: Literal["user_info"] = "user_info"
    users: List[UserInfo]


class RoomInfo(BaseModel):
    type: Literal["room_info"] = "room_info"
    config: Any


class GameInfo(BaseModel):
    type: Literal["game_info"] = "game_info"
    view: Any


class GameViewDiff(BaseModel):
    """RFC 6902 patch relative to the last full view sent to this client."""

    type: Literal["game_view_diff"] = "game_view_diff"
    diff: List[Dict[str, Any]]


class InvalidAction(BaseModel):
    type: Literal["invalid_action"] = "invalid_action"
    message: str


ServerMessage = Annotated[
    Union[
        ErrorMessage,
        JoinResponse,
        InvalidateToken,
        UserInfoMessage,
        RoomInfo,
        GameInfo,
        GameViewDiff,
        InvalidAction,
    ],
    Field(discriminator="type"),
]

__all__ = [
    # identifiers
    "RoomId",
    "UserId",
    "PlayerId",
    "ReconnectToken",
    # membership
    "UserInfo",
    # client -> server
    "JoinRoom",
    "RejoinRoom",
    "UpdateConfig",
    "KickUser",
    "ReassignPlayer",
    "StartGame",
    "DoAction",
    "GameViewRequest",
    "ResetToLobby",
    "ClientMessage",
    # server -> client
    "ErrorMessage",
    "JoinResponse",
    "InvalidateToken",
    "UserInfoMessage",
    "RoomInfo",
    "GameInfo",
    "GameViewDiff",
    "InvalidAction",
    "ServerMessage",
]
