"""
Cache in memoria con scadenza per i risultati di geocodifica inversa.
"""

import time
from threading import Lock
from typing import Any, Callable, Hashable, Optional, Protocol


class Cache(Protocol):
    """Interfaccia minima di una cache chiave/valore con TTL."""

    def get(self, key: Hashable) -> Optional[Any]: ...

    def set(self, key: Hashable, value: Any, ttl: float) -> None: ...


class MemoryCache:
    """Cache thread-safe in memoria. Le voci scadute sono rimosse in lettura e ad ogni scrittura."""

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._data: dict = {}
        self._lock = Lock()

    def get(self, key: Hashable) -> Optional[Any]:
        """Restituisce il valore se presente e non scaduto, altrimenti None."""
        with self._lock:
            entry = self._data.get(key)
            if entry is None:
                return None
            expires_at, value = entry
            if self._clock() >= expires_at:
                del self._data[key]
                return None
            return value

    def set(self, key: Hashable, value: Any, ttl: float) -> None:
        """Salva il valore e rimuove le voci già scadute."""
        with self._lock:
            now = self._clock()
            expired = [k for k, (expires_at, _) in self._data.items() if now >= expires_at]
            for k in expired:
                del self._data[k]
            self._data[key] = (now + ttl, value)

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)
