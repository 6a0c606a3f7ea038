"""Client configuration and logging setup.

Settings come from keyword arguments or from ``BOARD_GAME_IO_*`` environment
variables via :meth:`ClientConfig.from_env`.
"""
from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional, Union

from pydantic import BaseModel, field_validator

from .constants import TOKEN_KEY_PREFIX
from .tokens import JsonFileKeyValueStore, MemoryKeyValueStore, TokenStore

ENV_PREFIX = "BOARD_GAME_IO_"
DEFAULT_SERVER_URL = "ws://localhost:9002"
LOG_FORMAT = "[%(asctime)s] %(name)s - %(levelname)s - %(message)s"


def _env_str(name: str, default: Optional[str] = None) -> Optional[str]:
    v = os.getenv(ENV_PREFIX + name)
    return v if v is not None and v != "" else default


def _env_bool(name: str, default: bool = False) -> bool:
    v = os.getenv(ENV_PREFIX + name)
    if v is None:
        return default
    return v.strip().lower() in ("1", "true", "yes", "on", "debug")


# -----------------------------
# Settings model
# -----------------------------


class ClientConfig(BaseModel):
    """Connection and persistence settings of a client."""

    server_url: str = DEFAULT_SERVER_URL
    # None keeps reconnect tokens in memory only.
    token_store_path: Optional[Path] = None
    token_key_prefix: str = TOKEN_KEY_PREFIX
    log_level: str = "INFO"

    @field_validator("server_url")
    @classmethod
    def _check_scheme(cls, value: str) -> str:
        if not value.startswith(("ws://", "wss://")):
            raise ValueError("server_url must use the ws:// or wss:// scheme")
        return value

    @field_validator("log_level")
    @classmethod
    def _check_level(cls, value: str) -> str:
        level = value.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"unknown log level {value!r}")
        return level

    @classmethod
    def from_env(cls, **overrides) -> "ClientConfig":
        """Build a config from ``BOARD_GAME_IO_*`` variables, then *overrides*."""
        values = {}
        url = _env_str("SERVER_URL")
        if url is not None:
            values["server_url"] = url
        path = _env_str("TOKEN_STORE")
        if path is not None:
            values["token_store_path"] = path
        prefix = _env_str("TOKEN_PREFIX")
        if prefix is not None:
            values["token_key_prefix"] = prefix
        level = _env_str("LOG_LEVEL")
        if level is not None:
            values["log_level"] = level
        if _env_bool("DEBUG"):
            values["log_level"] = "DEBUG"
        values.update(overrides)
        return cls(**values)


def build_token_store(config: ClientConfig) -> TokenStore:
    """Return the token store described by *config*."""
    if config.token_store_path is None:
        backend = MemoryKeyValueStore()
    else:
        backend = JsonFileKeyValueStore(config.token_store_path)
    return TokenStore(backend, prefix=config.token_key_prefix)


# -----------------------------
# Logging
# -----------------------------


def configure_logging(level: Union[int, str, ClientConfig, None] = None) -> logging.Logger:
    """Attach one stream handler to the package logger.

    *level* may be a level name or number, or a :class:`ClientConfig` whose
    ``log_level`` is used. ``None`` reads it from the environment. Safe to
    call repeatedly: later calls only adjust the level.
    """
    if level is None:
        level = ClientConfig.from_env()
    if isinstance(level, ClientConfig):
        level = level.log_level
    if isinstance(level, str):
        level = level.upper()
    pkg_logger = logging.getLogger("board_game_io")
    has_local = any(getattr(h, "_board_game_io_local", False) for h in pkg_logger.handlers)
    if not has_local:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        setattr(handler, "_board_game_io_local", True)
        pkg_logger.addHandler(handler)
    pkg_logger.setLevel(level)
    return pkg_logger


__all__ = [
    "ENV_PREFIX",
    "DEFAULT_SERVER_URL",
    "ClientConfig",
    "build_token_store",
    "configure_logging",
]
