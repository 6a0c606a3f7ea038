"""Wire-level constants shared by the codec and the token store."""

# Key prefix of persisted reconnect tokens: ``reconnect_token:<room_id>``.
TOKEN_KEY_PREFIX = "reconnect_token:"

# Envelope tags sent by the client.
CLIENT_MESSAGE_TYPES = frozenset(
    {
        "join_room",
        "rejoin_room",
        "update_config",
        "kick_user",
        "reassign_player",
        "start_game",
        "do_action",
        "game_view_request",
        "reset_to_lobby",
    }
)

# Envelope tags sent by the server.
SERVER_MESSAGE_TYPES = frozenset(
    {
        "error",
        "join_response",
        "invalidate_token",
        "user_info",
        "room_info",
        "game_info",
        "game_view_diff",
        "invalid_action",
    }
)

__all__ = [
    "TOKEN_KEY_PREFIX",
    "CLIENT_MESSAGE_TYPES",
    "SERVER_MESSAGE_TYPES",
]
