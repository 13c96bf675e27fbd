"""Lock-guarded tables shared between the event loop and host threads."""

import threading
from typing import Generic, Hashable, Iterator, Optional, TypeVar

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


class ConcurrentTable(Generic[K, V]):
    """
    Mapping with every operation under one reentrant lock.

    Writers are expected to be the single serial context; readers may be
    anywhere. Compound operations (``replace``, ``pop_if``) are atomic so the
    one-value-per-key invariant holds even with concurrent delivery.
    """

    def __init__(self, name: str = "table"):
        self.name = name
        self._items: dict[K, V] = {}
        self._lock = threading.RLock()  # Reentrant for nested calls

    def get(self, key: K) -> Optional[V]:
        with self._lock:
            return self._items.get(key)

    def replace(self, key: K, value: V) -> Optional[V]:
        """Store *value* under *key* and return whatever it displaced."""
        with self._lock:
            previous = self._items.get(key)
            self._items[key] = value
            return previous

    def pop(self, key: K) -> Optional[V]:
        with self._lock:
            return self._items.pop(key, None)

    def pop_if(self, key: K, expected: V) -> bool:
        """Remove *key* only while it still maps to *expected* (identity)."""
        with self._lock:
            if self._items.get(key) is expected:
                del self._items[key]
                return True
            return False

    def snapshot(self) -> dict[K, V]:
        """Get a shallow copy of the table."""
        with self._lock:
            return dict(self._items)

    def drain(self) -> dict[K, V]:
        """Remove and return everything."""
        with self._lock:
            items = self._items
            self._items = {}
            return items

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._items

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    def __iter__(self) -> Iterator[K]:
        return iter(self.snapshot())

    def __repr__(self) -> str:
        return f"ConcurrentTable({self.name!r}, {len(self)} entries)"
