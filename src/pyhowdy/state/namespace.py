"""Namespaced key/value store with serialized writes.

Writers take the per-store lock for one entry plus its notification
round. Readers never lock: every write swaps in a fresh entry table, so
a reader always sees one committed table and never a half-applied write.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import threading
from collections.abc import Iterator
from collections.abc import Set as AbstractSet
from types import MappingProxyType

from pyhowdy.exceptions import NamespaceLockedError
from pyhowdy.state.events import ChangeEvent, NamespaceKey
from pyhowdy.state.notifier import ChangeCallback, ChangeNotifier, Subscription

_logger = logging.getLogger(__name__)

#: Default seconds to wait for a write lock before giving up.
DEFAULT_LOCK_TIMEOUT: float = 0.5


class NamespaceStore:
    """One shared key/value table.

    Obtain instances through :func:`pyhowdy.state.registry.open_namespace`
    so every caller naming the same triple shares the same store.
    """

    def __init__(self, key: NamespaceKey, *, lock_timeout: float = DEFAULT_LOCK_TIMEOUT) -> None:
        if lock_timeout < 0:
            raise ValueError("lock_timeout must be >= 0")
        self._key = key
        self._lock_timeout = lock_timeout
        self._write_lock = threading.Lock()
        self._writer: int | None = None
        self._entries: MappingProxyType[str, str] = MappingProxyType({})
        self._sequence = 0
        self._notifier = ChangeNotifier(name=str(key))

    def __repr__(self) -> str:
        return f"NamespaceStore({self._key!s}, entries={len(self._entries)})"

    @property
    def key(self) -> NamespaceKey:
        return self._key

    @property
    def lock_timeout(self) -> float:
        return self._lock_timeout

    @property
    def subscriber_count(self) -> int:
        return len(self._notifier)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get(self, key: str, default: str | None = None) -> str | None:
        return self._entries.get(key, default)

    def contains(self, key: str) -> bool:
        return key in self._entries

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def keys(self) -> AbstractSet[str]:
        """Keys at call time, in insertion order.

        Published tables are never mutated, so later writes do not change
        the returned view.
        """
        return self._entries.keys()

    def snapshot(self) -> dict[str, str]:
        """All entries at one instant."""
        return dict(self._entries)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def put(self, key: str, value: str) -> None:
        """Insert or overwrite *key*, then notify subscribers.

        Raises
        ------
        NamespaceLockedError
            The write lock was not acquired within ``lock_timeout``, or the
            caller is a change callback running inside this store's own
            write (nested writes would reorder events).
        """
        if not isinstance(key, str) or not isinstance(value, str):
            raise TypeError("namespace keys and values must be str")

        if self._writer == threading.get_ident():
            raise NamespaceLockedError(
                f"Namespace {self._key} is being written by this thread",
                namespace=str(self._key),
                timeout=0.0,
            )

        if not self._acquire():
            _logger.debug("Write lock timeout namespace=%s key=%s", self._key, key)
            raise NamespaceLockedError(
                f"Namespace {self._key} is locked by another writer",
                namespace=str(self._key),
                timeout=self._lock_timeout,
            )
        self._writer = threading.get_ident()
        try:
            entries = dict(self._entries)
            entries[key] = value
            self._entries = MappingProxyType(entries)
            self._sequence += 1
            event = ChangeEvent(namespace=self._key, sequence=self._sequence)
            self._notifier.notify(event)
        finally:
            self._writer = None
            self._write_lock.release()

    def _acquire(self) -> bool:
        if self._lock_timeout == 0:
            return self._write_lock.acquire(blocking=False)
        return self._write_lock.acquire(timeout=self._lock_timeout)

    # ------------------------------------------------------------------
    # Subscriptions
    # ------------------------------------------------------------------

    def subscribe(
        self,
        callback: ChangeCallback,
        *,
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> Subscription:
        """Register *callback* for change events.

        With *loop*, callbacks run on that asyncio loop instead of the
        writer's thread.
        """
        return self._notifier.subscribe(callback, loop=loop)

    def unsubscribe(self, subscription: Subscription) -> None:
        """Cancel *subscription*. Repeated calls are no-ops."""
        self._notifier.unsubscribe(subscription)

    @contextlib.contextmanager
    def observe(
        self,
        callback: ChangeCallback,
        *,
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> Iterator[Subscription]:
        """Subscribe for the duration of a ``with`` block."""
        subscription = self.subscribe(callback, loop=loop)
        try:
            yield subscription
        finally:
            self.unsubscribe(subscription)
