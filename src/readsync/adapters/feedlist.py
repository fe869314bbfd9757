"""Process-wide feed list state."""

from __future__ import annotations

import threading


class InMemoryNewItemCounter:
    """Thread-safe holder for the feed list's new-item count."""

    def __init__(self, value: int = 0) -> None:
        self._value = value
        self._lock = threading.Lock()

    def get(self) -> int:
        with self._lock:
            return self._value

    def set(self, value: int) -> None:
        with self._lock:
            self._value = max(0, value)


_NEW_ITEM_COUNTER = InMemoryNewItemCounter()


def get_new_item_counter() -> InMemoryNewItemCounter:
    return _NEW_ITEM_COUNTER
