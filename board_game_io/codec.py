"""JSON text codec for protocol envelopes.

Outbound messages are serialised field-named with compact separators.
Inbound frames are validated against the closed set of server shapes;
:func:`decode_server_message` fails closed and returns ``None`` for anything
it does not recognise, while :func:`parse_server_message` raises.
"""
from __future__ import annotations

import json
import logging
from typing import Any, Optional, Union

from pydantic import BaseModel, TypeAdapter, ValidationError

from .constants import CLIENT_MESSAGE_TYPES, SERVER_MESSAGE_TYPES
from .errors import ProtocolError
from .schemas import ClientMessage, ServerMessage

logger = logging.getLogger(__name__)

_SERVER_ADAPTER: TypeAdapter = TypeAdapter(ServerMessage)
_CLIENT_ADAPTER: TypeAdapter = TypeAdapter(ClientMessage)


def _frame_text(text: Union[str, bytes]) -> str:
    if not isinstance(text, bytes):
        return text
    try:
        return text.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise ProtocolError(f"frame is not valid UTF-8: {exc}", repr(text)) from exc


def encode_message(message: BaseModel) -> str:
    """Return the wire text of *message*."""
    return json.dumps(message.model_dump(mode="json"), separators=(",", ":"))


def parse_server_message(text: Union[str, bytes]) -> Any:
    """Strictly parse one inbound frame into a server message model.

    Raises
    ------
    ProtocolError
        If *text* is not JSON, not an object, carries an unknown ``type`` or
        misses a field its ``type`` requires.
    """
    raw = _frame_text(text)
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ProtocolError(f"frame is not valid JSON: {exc}", raw) from exc
    if not isinstance(data, dict):
        raise ProtocolError("frame is not a JSON object", raw)
    msg_type = data.get("type")
    if not isinstance(msg_type, str) or msg_type not in SERVER_MESSAGE_TYPES:
        raise ProtocolError(f"unknown message type {msg_type!r}", raw)
    try:
        return _SERVER_ADAPTER.validate_python(data)
    except ValidationError as exc:
        raise ProtocolError(f"invalid {msg_type} message: {exc.error_count()} error(s)", raw) from exc


def decode_server_message(text: Union[str, bytes]) -> Optional[Any]:
    """Like :func:`parse_server_message` but returns ``None`` instead of raising."""
    try:
        return parse_server_message(text)
    except ProtocolError as exc:
        logger.debug("Dropping inbound frame: %s", exc)
        return None


def parse_client_message(text: Union[str, bytes]) -> Any:
    """Parse a client envelope; used by servers and test doubles.

    Raises
    ------
    ProtocolError
        If *text* is not a valid client envelope.
    """
    raw = _frame_text(text)
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ProtocolError(f"frame is not valid JSON: {exc}", raw) from exc
    msg_type = data.get("type") if isinstance(data, dict) else None
    if not isinstance(msg_type, str) or msg_type not in CLIENT_MESSAGE_TYPES:
        raise ProtocolError(f"unknown client message type {msg_type!r}", raw)
    try:
        return _CLIENT_ADAPTER.validate_python(data)
    except ValidationError as exc:
        raise ProtocolError(f"invalid {msg_type} message: {exc.error_count()} error(s)", raw) from exc


__all__ = [
    "encode_message",
    "parse_server_message",
    "decode_server_message",
    "parse_client_message",
]
