"""Reconnect token persistence.

Tokens are opaque bearer credentials handed out in ``join_response``. They
are stored under ``<prefix><room_id>`` in an injected key-value surface so a
later connection can resume the same seat with ``rejoin_room``.
"""
from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Dict, Optional, Protocol, Union, runtime_checkable

from .constants import TOKEN_KEY_PREFIX

logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    """Minimal persisted string -> string surface."""

    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...


@runtime_checkable
class DeletableKeyValueStore(KeyValueStore, Protocol):
    """Key-value surface that can also forget a key; required by :meth:`TokenStore.discard`."""

    def delete(self, key: str) -> None:
        ...


# -----------------------------
# Key-value surfaces
# -----------------------------


class MemoryKeyValueStore:
    """Process-local store; tokens are lost when the process exits."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __len__(self) -> int:
        return len(self._data)


class JsonFileKeyValueStore:
    """Store backed by a single JSON object on disk.

    The whole file is rewritten on every mutation through a temporary file
    and ``os.replace`` so a crash never leaves a truncated document behind.
    A missing or unreadable file reads as empty.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self._lock = threading.Lock()

    def _load(self) -> Dict[str, str]:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Token store %s is not valid JSON; ignoring its contents", self.path)
            return {}
        if not isinstance(data, dict):
            logger.warning("Token store %s does not hold a JSON object; ignoring it", self.path)
            return {}
        return {str(k): str(v) for k, v in data.items()}

    def _dump(self, data: Dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{self.path.name}.", suffix=".tmp", dir=str(self.path.parent))
        tmp_path = Path(tmp_name)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, sort_keys=True)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, self.path)
        finally:
            if tmp_path.exists():
                tmp_path.unlink()

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            return self._load().get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            data = self._load()
            data[key] = value
            self._dump(data)

    def delete(self, key: str) -> None:
        with self._lock:
            data = self._load()
            if data.pop(key, None) is not None:
                self._dump(data)


# -----------------------------
# Token store
# -----------------------------


class TokenStore:
    """Map room ids to reconnect tokens on top of a :class:`KeyValueStore`."""

    def __init__(self, backend: Optional[KeyValueStore] = None, prefix: str = TOKEN_KEY_PREFIX):
        self.backend: KeyValueStore = backend if backend is not None else MemoryKeyValueStore()
        self.prefix = prefix

    def key_for(self, room: str) -> str:
        return self.prefix + room

    def get(self, room: str) -> Optional[str]:
        return self.backend.get(self.key_for(room))

    def set(self, room: str, token: str) -> None:
        logger.debug("Storing reconnect token for room %s", room)
        self.backend.set(self.key_for(room), token)

    def discard(self, room: str) -> None:
        """Forget the token of *room*. Never called automatically by the client.

        Raises
        ------
        TypeError
            If the backend is not a :class:`DeletableKeyValueStore`.
        """
        if not isinstance(self.backend, DeletableKeyValueStore):
            raise TypeError(f"{type(self.backend).__name__} does not support deleting keys")
        self.backend.delete(self.key_for(room))


__all__ = [
    "KeyValueStore",
    "DeletableKeyValueStore",
    "MemoryKeyValueStore",
    "JsonFileKeyValueStore",
    "TokenStore",
]
