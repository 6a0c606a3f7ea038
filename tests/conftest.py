from __future__ import annotations

import json
from typing import Any, Dict, List

import pytest

from board_game_io.session import GameSession
from board_game_io.tokens import MemoryKeyValueStore, TokenStore


class FakeConnection:
    """Records every frame the session sends."""

    def __init__(self) -> None:
        self.sent: List[str] = []

    def send(self, text: str) -> None:
        self.sent.append(text)

    @property
    def messages(self) -> List[Dict[str, Any]]:
        return [json.loads(text) for text in self.sent]


class RecordingObserver:
    def __init__(self) -> None:
        self.paths: List[str] = []
        self.errors: List[str] = []
        self.invalid_actions: List[str] = []
        self.invalidated_tokens: List[str] = []

    def on_navigate(self, path: str) -> None:
        self.paths.append(path)

    def on_error(self, message: str) -> None:
        self.errors.append(message)

    def on_invalid_action(self, message: str) -> None:
        self.invalid_actions.append(message)

    def on_token_invalidated(self, token: str) -> None:
        self.invalidated_tokens.append(token)


def frame(**fields: Any) -> str:
    return json.dumps(fields)


@pytest.fixture
def connection() -> FakeConnection:
    return FakeConnection()


@pytest.fixture
def kv() -> MemoryKeyValueStore:
    return MemoryKeyValueStore()


@pytest.fixture
def token_store(kv: MemoryKeyValueStore) -> TokenStore:
    return TokenStore(kv)


@pytest.fixture
def observer() -> RecordingObserver:
    return RecordingObserver()


@pytest.fixture
def session(connection: FakeConnection, token_store: TokenStore, observer: RecordingObserver) -> GameSession:
    return GameSession(connection, token_store=token_store, observer=observer)


@pytest.fixture
def joined_session(session: GameSession) -> GameSession:
    """Session joined to room R1 as U1 with U1 leader and U2 member."""
    session.handle_text(frame(type="join_response", room_id="R1", user_id="U1", username="alice", token="T1"))
    session.handle_text(
        frame(
            type="user_info",
            users=[
                {"id": "U1", "username": "alice", "leader": True, "player_id": None},
                {"id": "U2", "username": "bob", "leader": False, "player_id": None},
            ],
        )
    )
    return session
