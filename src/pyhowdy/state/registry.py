"""Process-wide lookup of namespace stores.

A store is created lazily the first time its triple is opened and then
lives as long as the registry (for the default registry, the process).
Stores are never torn down.
"""

from __future__ import annotations

import logging
import threading

from pyhowdy.config import HowdyConfig
from pyhowdy.state.events import NamespaceKey
from pyhowdy.state.namespace import NamespaceStore

_logger = logging.getLogger(__name__)


class NamespaceRegistry:
    """Maps namespace triples to their single shared store."""

    def __init__(self, config: HowdyConfig | None = None) -> None:
        self._config = config or HowdyConfig()
        self._lock = threading.Lock()
        self._stores: dict[NamespaceKey, NamespaceStore] = {}

    @property
    def config(self) -> HowdyConfig:
        return self._config

    def open(self, application: str, board: str, isolated: bool = True) -> NamespaceStore:
        """Return the store for the triple, creating it on first request."""
        key = NamespaceKey(application=application, board=board, isolated=isolated)
        with self._lock:
            store = self._stores.get(key)
            if store is None:
                store = NamespaceStore(key, lock_timeout=self._config.lock_timeout)
                self._stores[key] = store
                _logger.debug("Namespace created %s", key)
            return store

    def open_default(self) -> NamespaceStore:
        """Return the board namespace named by the configuration."""
        return self.open(self._config.application, self._config.board, self._config.isolated)

    def namespaces(self) -> list[NamespaceKey]:
        with self._lock:
            return list(self._stores)

    def __len__(self) -> int:
        with self._lock:
            return len(self._stores)


_default_registry: NamespaceRegistry | None = None
_default_lock = threading.Lock()


def default_registry() -> NamespaceRegistry:
    """The process-wide registry, configured from the environment on first use."""
    global _default_registry
    with _default_lock:
        if _default_registry is None:
            _default_registry = NamespaceRegistry(HowdyConfig.from_env())
        return _default_registry


def open_namespace(application: str, board: str, isolated: bool = True) -> NamespaceStore:
    """Idempotent lookup-or-create on the process-wide registry."""
    return default_registry().open(application, board, isolated)
