"""Client-side authorization for room configuration writes.

Only the room leader may change the configuration. The server stays the
authority; this check just avoids sending writes that are bound to fail and
decides whether the local config cell is optimistically updated.
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Iterable, Optional

from .schemas import UserInfo

if TYPE_CHECKING:
    from .session import GameSession

logger = logging.getLogger(__name__)

# -----------------------------
# Membership helpers
# -----------------------------


def find_user(users: Iterable[UserInfo], user_id: Optional[str]) -> Optional[UserInfo]:
    """Return the entry of *users* whose id is *user_id*, if any."""
    if user_id is None:
        return None
    for user in users:
        if user.id == user_id:
            return user
    return None


def is_leader(users: Iterable[UserInfo], user_id: Optional[str]) -> bool:
    """*True* if *user_id* is listed in *users* and marked leader."""
    user = find_user(users, user_id)
    return user is not None and bool(user.leader)


# -----------------------------
# Config write guard
# -----------------------------


class LeaderConfigGuard:
    """Write guard of the session's config cell.

    When the local user is the leader the candidate config is sent as
    ``update_config`` *before* returning *True*, so the local value is
    replaced optimistically and later overwritten by the authoritative
    ``room_info``. Otherwise nothing is sent and the write is dropped.
    """

    def __init__(self, session: "GameSession"):
        self.session = session

    def __call__(self, candidate: Any, current: Any) -> bool:
        session = self.session
        if not is_leader(session.users.read(), session.user_id):
            logger.debug("Config write dropped: user %s is not the room leader", session.user_id)
            return False
        session.update_config(candidate)
        return True


__all__ = ["find_user", "is_leader", "LeaderConfigGuard"]
