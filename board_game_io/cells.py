"""Observable cells holding one slice of session state.

A cell stores a single value and an ordered list of subscriber callbacks.
Subscribing calls the callback right away with the current value, so every
subscriber sees *something* even if the value never changes again.

Notification policy: the subscriber list is snapshotted at the start of each
notification round. Callbacks subscribed during a round are not called by
that round; callbacks unsubscribed during a round are still called by it.

The per-cell lock is held while subscribers run, so a write from another
thread waits until the current round has finished. A subscriber must not
block on a thread that writes the same cell: that thread can never acquire
the lock and both deadlock.
"""
from __future__ import annotations

import logging
import threading
from typing import Callable, Generic, List, Optional, Protocol, TypeVar

T = TypeVar("T")

Subscriber = Callable[[T], None]
Unsubscribe = Callable[[], None]

logger = logging.getLogger(__name__)


class WriteGuard(Protocol[T]):
    """Authorization strategy consulted before a consumer write is applied.

    Returns *True* to let the write through, *False* to drop it silently.
    """

    def __call__(self, candidate: T, current: T) -> bool:
        ...


# ---------------------------------------------------------------------------
# Read-only cell
# ---------------------------------------------------------------------------


class ReadableCell(Generic[T]):
    """Cell mutated only by the system (the inbound dispatcher)."""

    def __init__(self, value: T):
        self._value = value
        self._subscribers: List[Subscriber] = []
        # Serializes mutation + notification; re-entrant so subscribers may
        # mutate the cell from inside a callback.
        self._lock = threading.RLock()

    def subscribe(self, callback: Subscriber) -> Unsubscribe:
        """Call *callback* with the current value, then register it.

        The returned function removes exactly this registration. Subscribing
        the same callable twice yields two registrations; each unsubscriber
        removes one of them.
        """
        with self._lock:
            callback(self._value)
            self._subscribers.append(callback)

        removed = False

        def unsubscribe() -> None:
            nonlocal removed
            if removed:
                return
            removed = True
            with self._lock:
                for idx, registered in enumerate(self._subscribers):
                    if registered is callback:
                        del self._subscribers[idx]
                        break

        return unsubscribe

    def read(self) -> T:
        return self._value

    def replace(self, value: T) -> None:
        """Store *value* unconditionally and notify subscribers in order."""
        with self._lock:
            self._value = value
            for callback in list(self._subscribers):
                callback(value)

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._value!r})"


# ---------------------------------------------------------------------------
# Writable cell
# ---------------------------------------------------------------------------


class WritableCell(ReadableCell[T]):
    """Cell the consumer may write to, subject to an optional *guard*."""

    def __init__(self, value: T, guard: Optional[WriteGuard] = None):
        super().__init__(value)
        self._guard = guard

    @property
    def guard(self) -> Optional[WriteGuard]:
        return self._guard

    def write(self, value: T) -> None:
        """Apply *value* unless the guard rejects it.

        A rejected write is dropped without notification or error, so the
        caller cannot tell it apart from a write that changed nothing.
        """
        with self._lock:
            if self._guard is not None and not self._guard(value, self._value):
                logger.debug("%s: write rejected by guard", type(self).__name__)
                return
            self.replace(value)


__all__ = ["WriteGuard", "ReadableCell", "WritableCell", "Subscriber", "Unsubscribe"]
